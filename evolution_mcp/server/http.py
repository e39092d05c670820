"""
HTTP API for MCP tools.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from evolution_mcp.config import get_settings
from evolution_mcp.dispatcher import Dispatcher
from evolution_mcp.errors import ConfigurationError, OperationDisabledError, UnknownOperationError
from evolution_mcp.server.schema import ResultEnvelope, ToolRequest


router = APIRouter()


def get_dispatcher() -> Dispatcher:
    return Dispatcher(get_settings())


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/mcp/tools")
async def list_tools() -> dict[str, Any]:
    return {"tools": get_dispatcher().list_tools()}


@router.post("/mcp/tools/{tool_name}", response_model=ResultEnvelope)
async def call_tool(tool_name: str, request: ToolRequest) -> ResultEnvelope:
    dispatcher = get_dispatcher()
    try:
        return await dispatcher.dispatch(tool_name, request.params)
    except UnknownOperationError:
        raise HTTPException(status_code=404, detail="Tool not found")
    except OperationDisabledError:
        raise HTTPException(status_code=403, detail="Tool disabled")
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=exc.to_dict())
