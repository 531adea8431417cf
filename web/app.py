"""Local-first FastAPI transport for the NEAR ledger tools."""

from __future__ import annotations

import html
import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import ValidationError

from tools.config import ConfigError, ServerConfig
from tools.connection import NearConnection
from tools.registry import (
    SERVER_NAME,
    SERVER_VERSION,
    UnknownToolError,
    call_tool,
    get_prompt,
    list_prompts,
    list_tools,
)
from tools.service import ToolService

logger = logging.getLogger(__name__)

app = FastAPI(title="NEAR Ledger Tools", description="Local-first tool server", version=SERVER_VERSION)

_STATE: Dict[str, Optional[ToolService]] = {"service": None}


@app.middleware("http")
async def _local_only(request: Request, call_next):
    client = request.client
    if client is not None:
        host = client.host
        if host not in {"127.0.0.1", "::1", "testclient"}:
            return JSONResponse({"error": "Remote access disabled."}, status_code=403)
    return await call_next(request)


async def _handle_errors(request: Request, exc: Exception):
    return JSONResponse({"error": str(exc)}, status_code=400)


async def _handle_unknown(request: Request, exc: UnknownToolError):
    return JSONResponse({"error": exc.args[0] if exc.args else "Unknown tool."}, status_code=404)


async def _handle_config(request: Request, exc: ConfigError):
    logger.error("Server is not configured: %s", exc)
    return JSONResponse({"error": str(exc)}, status_code=503)


for _exc_class in (ValidationError, ValueError):
    app.add_exception_handler(_exc_class, _handle_errors)
app.add_exception_handler(UnknownToolError, _handle_unknown)
app.add_exception_handler(ConfigError, _handle_config)


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(_render_index())


@app.get("/api/server")
async def server_info():
    return {"name": SERVER_NAME, "version": SERVER_VERSION}


@app.get("/api/tools")
async def tools():
    return {"tools": list_tools()}


@app.post("/api/tools/{name}")
async def run_tool(name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
    result = await call_tool(_get_service(), name, arguments)
    return result.to_dict()


@app.get("/api/prompts")
async def prompts():
    return {"prompts": list_prompts()}


@app.get("/api/prompts/{name}")
async def prompt(name: str):
    return get_prompt(_get_service(), name)


def set_service(service: Optional[ToolService]) -> None:
    _STATE["service"] = service


def _get_service() -> ToolService:
    service = _STATE["service"]
    if service is None:
        config = ServerConfig.from_env()
        service = ToolService(NearConnection(config))
        _STATE["service"] = service
        logger.info("NEAR tool service configured for %s at %s", config.network_id, config.node_url)
    return service


def _render_index() -> str:
    rows = "\n".join(
        f"      <li><code>{html.escape(tool['name'])}</code> - {html.escape(tool['description'])}</li>"
        for tool in list_tools()
    )
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{html.escape(SERVER_NAME)}</title>
  </head>
  <body>
    <h1>{html.escape(SERVER_NAME)} {html.escape(SERVER_VERSION)}</h1>
    <p>POST a JSON object of arguments to <code>/api/tools/&lt;name&gt;</code>.</p>
    <ul>
{rows}
    </ul>
  </body>
</html>
"""


def _reset_state() -> None:
    _STATE["service"] = None
