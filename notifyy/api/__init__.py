"""HTTP front door for notifyy.

- GET|POST /out - relay a notification to one or more recipient tokens
- GET / - informational page
- GET /health - health check
- GET /metrics - Prometheus metrics (when enabled)
"""

from __future__ import annotations

__all__ = ["create_app"]
