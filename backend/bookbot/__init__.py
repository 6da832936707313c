"""
BookBot - turn-based book ordering assistant.
"""
