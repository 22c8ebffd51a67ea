# Middleware package init
"""
United Pets Backend — Middleware Package
=========================================

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Rate limit rejects abusive clients before any work is done.
    - Request ID is set before the access log line is written, so the log
      line and the X-Request-ID response header carry the same id.
"""
