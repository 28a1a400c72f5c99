"""Command backend speaking the Model Context Protocol over a stdio server process."""

import json
import time
from contextlib import AsyncExitStack
from types import TracebackType
from typing import Any, Dict, Mapping, Optional, Type, cast

from mcp import ClientSession
from mcp.client.stdio import StdioServerParameters, stdio_client
from mcp.types import TextContent

from ..core.exceptions import RemoteApplicationError, RemoteServiceError
from ..core.logger import get_logger
from .base import unwrap_envelope

logger = get_logger(__name__)

__all__ = ["MCPCommandBackend"]


class MCPCommandBackend:
    """Runs backend commands as MCP tool calls on a stdio server.

    Usage::

        async with MCPCommandBackend("node", ["mlb-server.js"]) as backend:
            roster = await backend.call("getRoster", {"pathParams": {"teamId": "147"}})
    """

    def __init__(self, command: str, args: list[str], env: Optional[dict[str, str]] = None, name: str = "mlb"):
        """Initializes the backend with parameters for the MCP server process.

        Args:
            command: The command to run the server.
            args: List of arguments for the command.
            env: Optional dictionary of environment variables.
            name: Label used in logs and health reports.
        """
        self.name = name
        self._server_params = StdioServerParameters(command=command, args=args, env=env)
        self._session: Optional[ClientSession] = None
        self._exit_stack = AsyncExitStack()

    async def __aenter__(self) -> "MCPCommandBackend":
        """Opens the connection (transport) and initializes the session."""
        logger.debug("Initializing MCP client session for '%s'...", self.name)
        read, write = await self._exit_stack.enter_async_context(stdio_client(self._server_params))
        self._session = await self._exit_stack.enter_async_context(ClientSession(read, write))
        await self._session.initialize()
        logger.info("MCP backend '%s' connected.", self.name)
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        """Cleanly closes all connections."""
        await self._exit_stack.aclose()
        self._session = None
        logger.info("MCP backend '%s' closed.", self.name)

    async def call(self, command: str, params: Mapping[str, Any]) -> Any:
        if not self._session:
            raise RemoteServiceError(f"MCP backend '{self.name}' is not connected. Use 'async with'.")

        logger.debug("Delegating '%s' to MCP backend '%s' with %s", command, self.name, params)
        try:
            mcp_result = await self._session.call_tool(command, arguments=dict(params))
        except Exception as e:
            raise RemoteServiceError(f"MCP backend '{self.name}' failed on '{command}': {e}") from e

        text = self._first_text(mcp_result.content)
        if mcp_result.isError:
            raise RemoteApplicationError(f"{self.name} error ({command}): {text or 'unknown error'}")
        if text is None:
            raise RemoteServiceError(f"Malformed payload from {self.name} for '{command}': no text content.")

        try:
            body = json.loads(text)
        except json.JSONDecodeError as e:
            raise RemoteServiceError(f"Malformed payload from {self.name} for '{command}': {e}") from e

        if isinstance(body, dict) and ("result" in body or "error" in body):
            return unwrap_envelope(body, self.name, command)
        return body

    async def health(self) -> Dict[str, Any]:
        if not self._session:
            return {"status": "unavailable", "error": "Session not connected"}
        started = time.monotonic()
        try:
            await self._session.list_tools()
        except Exception as e:
            return {"status": "error", "error": str(e)}
        return {"status": "healthy", "responseTime": round((time.monotonic() - started) * 1000, 1)}

    @staticmethod
    def _first_text(content: Any) -> Optional[str]:
        for block in content or []:
            if getattr(block, "type", None) == "text":
                return cast(TextContent, block).text
        return None
