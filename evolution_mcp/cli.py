"""
描述: Evolution MCP 命令行入口
主要功能:
    - serve: 以 stdio (MCP) 或 http (FastAPI) 方式启动服务
    - list: 输出工具目录 JSON
    - call: 单次调用某个工具并输出结果信封
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Sequence

from dotenv import load_dotenv

from evolution_mcp.config import Settings, get_settings
from evolution_mcp.dispatcher import Dispatcher
from evolution_mcp.errors import GatewayError
from evolution_mcp.tools.formatter import Outcome
from evolution_mcp.utils.logger import setup_logging


TRANSPORTS = ("stdio", "http")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _parse_arguments(raw: str) -> dict[str, Any]:
    arguments = json.loads(raw) if raw.strip() else {}
    if not isinstance(arguments, dict):
        raise ValueError("tool arguments must be a JSON object")
    return arguments


def _serve(settings: Settings, transport: str) -> int:
    if transport == "http":
        import uvicorn

        from evolution_mcp.server.app_factory import create_app

        uvicorn.run(
            create_app(settings),
            host=settings.server.host,
            port=settings.server.port,
            log_level="debug" if settings.server.debug else "info",
        )
        return 0

    from evolution_mcp.server.stdio import serve_stdio

    try:
        asyncio.run(serve_stdio(Dispatcher(settings)))
    except KeyboardInterrupt:
        return 130  # 标准 Ctrl+C 退出码
    return 0


def _list(settings: Settings) -> int:
    _print_json({"tools": Dispatcher(settings).list_tools()})
    return 0


def _call(settings: Settings, tool_name: str, raw_arguments: str) -> int:
    try:
        arguments = _parse_arguments(raw_arguments)
    except ValueError as exc:
        print(f"Invalid JSON arguments: {exc}", file=sys.stderr)
        return 1

    try:
        outcome, envelope = asyncio.run(Dispatcher(settings).execute(tool_name, arguments))
    except GatewayError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    _print_json(envelope.model_dump())
    # 远端错误已写入信封，只有入参校验失败视为命令失败
    return 1 if outcome is Outcome.INVALID_INPUT else 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evolution-mcp",
        description="Evolution API MCP gateway",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="启动 MCP 服务")
    serve.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=None,
        help="传输方式，缺省取配置 transport.default",
    )

    subparsers.add_parser("list", help="输出工具目录")

    call = subparsers.add_parser("call", help="单次调用工具")
    call.add_argument("tool", help="工具名，例如 send_text")
    call.add_argument("arguments", nargs="?", default="{}", help="JSON 格式的工具参数")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    load_dotenv()
    settings = get_settings()
    setup_logging(settings.logging)

    if args.command == "serve":
        transport = args.transport or settings.transport.default
        return _serve(settings, transport)
    if args.command == "list":
        return _list(settings)
    return _call(settings, args.tool, args.arguments)
