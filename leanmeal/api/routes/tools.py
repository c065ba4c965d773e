from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request, Response
from pydantic import BaseModel, Field

from leanmeal.api.api_tools import TOOLS, ToolService, call_tool, describe_tools

router = APIRouter(prefix="/tools", tags=["tools"])


class ToolCall(BaseModel):
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


def get_service(request: Request) -> ToolService:
    return request.app.state.tool_service


def _text(content: str) -> Response:
    return Response(content=content, media_type="text/plain")


@router.get("")
def list_tools():
    """Names, descriptions and input schemas of every tool."""
    return {"tools": describe_tools()}


@router.post("/call", response_class=Response)
def dispatch(request: Request, call: ToolCall):
    if call.name not in TOOLS:
        return Response(content=f"Unknown tool: {call.name}", media_type="text/plain", status_code=404)
    return _text(call_tool(get_service(request), call.name, call.arguments))


@router.post("/{tool_name}", response_class=Response)
def run_tool(request: Request, tool_name: str, arguments: Optional[Dict[str, Any]] = Body(None)):
    if tool_name not in TOOLS:
        return Response(content=f"Unknown tool: {tool_name}", media_type="text/plain", status_code=404)
    return _text(call_tool(get_service(request), tool_name, arguments))
