# Middleware package init
"""
UYNM Backend — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first, as registered in create_app()):
    Request → [CORS] → [Request ID] → [Logging] → [Rate Limit] → [GZip] → Route

    - CORS outermost: 429 and error envelopes still carry CORS headers, so
      the browser can read them.
    - Request ID before logging and rate limiting: every access log line and
      every 429 envelope carries the request ID.
"""
