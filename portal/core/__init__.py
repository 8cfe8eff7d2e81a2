"""
Shared building blocks: password and token security, session cookies,
single-active-record coordination and request middleware.
"""
