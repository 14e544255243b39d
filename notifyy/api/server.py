"""FastAPI-based HTTP front door for notifyy.

Endpoints:
- GET|POST /out - Relay a notification; 204 when at least one send went out
- GET / - Static informational page
- GET /health - Health check
- GET /metrics - Prometheus metrics (when the Prometheus backend is active)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from loguru import logger

from notifyy import __version__
from notifyy.api.params import build_request, parse_json_body
from notifyy.core.errors import ValidationError
from notifyy.telemetry.prometheus import PrometheusTelemetry

if TYPE_CHECKING:
    from notifyy.app.bootstrap import Runtime

INDEX_HTML = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>notifyy</title></head>
<body>
<h1>notifyy</h1>
<p>Send yourself Telegram notifications with a plain HTTP call.</p>
<h2>Getting a token</h2>
<p>Send any message to the bot. It replies with your personal access token.</p>
<h2>Sending a notification</h2>
<pre>GET /out?title=Build&amp;message=Failed&amp;url=https://ci.example/1&amp;users=&lt;token&gt;</pre>
<pre>POST /out?users=&lt;token&gt;
{"title": "Build", "message": "Failed", "code": "Traceback ..."}</pre>
<ul>
<li><code>title</code> shown in bold</li>
<li><code>message</code> body text</li>
<li><code>code</code> (POST only) pre-formatted block</li>
<li><code>url</code> appended on its own line</li>
<li><code>users</code> one or more tokens (legacy <code>user</code> also accepted)</li>
</ul>
<p>Identical messages to the same recipient are sent once per hour.</p>
</body>
</html>
"""


def create_app(runtime: Runtime) -> FastAPI:
    """Create the FastAPI application.

    Args:
        runtime: Wired collaborators (directory, relay, telemetry).

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="notifyy",
        description="Relay HTTP notifications to Telegram chats",
        version=__version__,
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.debug(f"Rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/", response_class=HTMLResponse, tags=["info"])
    async def index() -> str:
        return INDEX_HTML

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, object]:
        return {"status": "ok", "recipients": len(runtime.directory)}

    @app.api_route("/out", methods=["GET", "POST"], tags=["notify"])
    async def out(request: Request) -> Response:
        """Relay a notification to every known recipient token."""
        body = parse_json_body(await request.body())
        notification = build_request(
            request.query_params,
            body,
            allow_code=request.method == "POST",
        )

        outcome = runtime.relay.relay(notification)
        if not outcome.delivered:
            return Response(status_code=400)
        return Response(status_code=204)

    @app.get("/metrics", tags=["metrics"])
    async def get_metrics() -> Response:
        telemetry = runtime.telemetry
        if isinstance(telemetry, PrometheusTelemetry):
            return Response(content=telemetry.render(), media_type=telemetry.content_type)
        return Response(status_code=404)

    return app
