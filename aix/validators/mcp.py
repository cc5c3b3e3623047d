"""MCP server validation."""

from aix.constants import OS_PLATFORMS
from aix.models import TRANSPORT_SSE, TRANSPORT_STDIO, TRANSPORTS, MCPServer
from aix.validators.names import check_name
from aix.validators.result import Result


def validate_mcp(server: MCPServer) -> Result:
    """Validate an MCP server entry.

    Rules:
    - transport is empty, "stdio" or "sse"
    - stdio needs a command, sse needs a url
    - without a transport exactly one of command and url is set
    - OS platforms are darwin, linux or windows
    """
    result = Result()
    check_name(server.name, result)

    if server.transport not in TRANSPORTS:
        result.add_error("transport", "must be 'stdio' or 'sse'", server.transport)
    elif server.transport == TRANSPORT_STDIO and not server.command:
        result.add_error("command", "is required for stdio transport")
    elif server.transport == TRANSPORT_SSE and not server.url:
        result.add_error("url", "is required for sse transport")
    elif not server.transport:
        if server.command and server.url:
            result.add_error("transport", "cannot infer transport when both command and url are set")
        elif not server.command and not server.url:
            result.add_error("command", "either command or url is required")

    for os_name in server.platforms:
        if os_name not in OS_PLATFORMS:
            result.add_error("platforms", f"must be one of {', '.join(OS_PLATFORMS)}", os_name)

    for key in server.env:
        if not key.strip():
            result.add_error("env", "variable names cannot be empty")
    for key in server.headers:
        if not key.strip():
            result.add_error("headers", "header names cannot be empty")
    return result
