"""
描述: HTTP 工具 API 运行脚本
主要功能:
    - 配置 asyncio 策略 (Windows)
    - 使用 uvicorn 启动 ASGI 服务
    - 端口取 MCP_PORT，默认 8000
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Windows 兼容性：在任何 asyncio 操作前设置策略
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

BASE_DIR = Path(__file__).resolve().parent
os.environ.setdefault("CONFIG_PATH", str(BASE_DIR / "config.yaml"))

from dotenv import load_dotenv

load_dotenv(BASE_DIR / ".env")

import uvicorn


if __name__ == "__main__":
    host = os.getenv("MCP_HOST", "0.0.0.0")
    port = int(os.getenv("MCP_PORT", "8000"))
    print(f"Starting Evolution API MCP server on http://{host}:{port}", file=sys.stderr)
    uvicorn.run("evolution_mcp.main:app", host=host, port=port, log_level="info")
