"""
HTTP API routes
"""
