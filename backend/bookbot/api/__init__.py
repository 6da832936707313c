"""
HTTP and WebSocket transport
"""
