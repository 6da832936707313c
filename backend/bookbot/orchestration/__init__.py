"""
Dialog orchestration
"""
