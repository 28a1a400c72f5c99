"""Contract of the remote command-execution service."""

from typing import Any, Dict, Mapping, Protocol

from ..core.exceptions import RemoteApplicationError, RemoteServiceError


class CommandBackend(Protocol):
    """
    Executes ``{command, params}`` requests.

    Implementations return the ``result`` member of a successful answer and
    raise ``RemoteServiceError`` on transport or payload problems and
    ``RemoteApplicationError`` when the answer carries an ``error``.
    """

    name: str

    async def call(self, command: str, params: Mapping[str, Any]) -> Any:
        """Run ``command`` and return its result."""
        ...

    async def health(self) -> Dict[str, Any]:
        """Report reachability as ``{"status": "healthy" | "unhealthy" | "error", ...}``."""
        ...


def unwrap_envelope(body: Any, backend_name: str, command: str) -> Any:
    """Extract ``result`` from a ``{result} | {error}`` answer.

    Raises:
        RemoteServiceError: If the body is not a JSON object.
        RemoteApplicationError: If the body carries an ``error``.
    """
    if not isinstance(body, Mapping):
        raise RemoteServiceError(f"Malformed payload from {backend_name} for '{command}': expected an object.")
    if body.get("error"):
        raise RemoteApplicationError(f"{backend_name} error ({command}): {body['error']}")
    return body.get("result")
