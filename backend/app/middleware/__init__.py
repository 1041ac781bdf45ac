# Middleware package init
"""
Questions Portal Backend — Middleware Package
==============================================

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: abusive clients are rejected before any processing
    2. Request ID: correlation id for logs and error bodies
    3. Logging: one access line per request, tagged with the request id
"""
