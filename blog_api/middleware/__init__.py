# Middleware package init
"""
Blog API — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every log line of the request carries it
    - Logging records status and duration on the way back out
"""
