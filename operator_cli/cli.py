"""Operator CLI for the NEAR ledger tools."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from tools.config import ConfigError, ServerConfig, configure_logging
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


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="near-tools")
    parser.add_argument("--env-file", default=None, help="Read settings from this .env file.")
    parser.add_argument("--version", action="version", version=f"{SERVER_NAME} {SERVER_VERSION}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    tools_parser = subparsers.add_parser("tools")
    tools_parser.add_argument("--json", action="store_true")
    tools_parser.set_defaults(func=_list_tools)

    prompts_parser = subparsers.add_parser("prompts")
    prompts_parser.set_defaults(func=_list_prompts)

    call_parser = subparsers.add_parser("call")
    call_parser.add_argument("name")
    call_parser.add_argument("--args", default=None, help="JSON object of arguments, or - for stdin.")
    call_parser.set_defaults(func=_call_tool)

    prompt_parser = subparsers.add_parser("prompt")
    prompt_parser.add_argument("name")
    prompt_parser.set_defaults(func=_show_prompt)

    serve_parser = subparsers.add_parser("serve")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=_serve)

    args = parser.parse_args(argv)

    try:
        return args.func(args)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except (UnknownToolError, ValidationError, ValueError) as exc:
        message = exc.args[0] if isinstance(exc, UnknownToolError) and exc.args else exc
        print(f"ERROR: {message}", file=sys.stderr)
        return 2


def _list_tools(args: argparse.Namespace) -> int:
    catalog = list_tools()
    if args.json:
        print(json.dumps(catalog, indent=2))
        return 0
    for tool in catalog:
        print(f"{tool['name']}: {tool['description']}")
    return 0


def _list_prompts(args: argparse.Namespace) -> int:
    for prompt in list_prompts():
        print(f"{prompt['name']}: {prompt['description']}")
    return 0


def _call_tool(args: argparse.Namespace) -> int:
    arguments = _load_arguments(args.args)
    service = _build_service(args.env_file)
    result = asyncio.run(call_tool(service, args.name, arguments))
    print(result.text)
    return 1 if result.is_error else 0


def _show_prompt(args: argparse.Namespace) -> int:
    service = _build_service(args.env_file)
    print(json.dumps(get_prompt(service, args.name), indent=2))
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from web import app as web_app

    web_app.set_service(_build_service(args.env_file))
    uvicorn.run(web_app.app, host=args.host, port=args.port, log_config=None)
    return 0


def _build_service(env_file: Optional[str]) -> ToolService:
    config = ServerConfig.from_env(dotenv_path=env_file)
    configure_logging(config.log_level)
    return ToolService(NearConnection(config))


def _load_arguments(raw: Optional[str]) -> Dict[str, Any]:
    if raw is None:
        return {}
    if raw == "-":
        raw = sys.stdin.read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Tool arguments are not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Tool arguments must be a JSON object.")
    return data


if __name__ == "__main__":
    raise SystemExit(main())
