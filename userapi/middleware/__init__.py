"""
User API — Middleware Package
===============================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    The request ID is set first so the access log line of the same request
    can include it.
"""
