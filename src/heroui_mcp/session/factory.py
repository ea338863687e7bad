# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/heroui-mcp-python/LICENSE
# ==============================================================================

"""Endpoint construction.

:class:`EndpointFactory` builds a fresh :class:`SessionEndpoint` for every
initiation request: a new cryptographically random session id, a new SDK
transport configured from :class:`~heroui_mcp.config.ServerConfig`, and a new
protocol server bound to the shared Capability Set.  The endpoint's background
task is started in the task group owned by the request router.
"""

from __future__ import annotations

from collections.abc import Callable
import secrets
from typing import TYPE_CHECKING, Any

from mcp.server.streamable_http import StreamableHTTPServerTransport
from mcp.server.transport_security import TransportSecuritySettings

from ..capabilities import CapabilitySet, build_server
from ..utils import get_logger
from .endpoint import CloseReason, SessionEndpoint


if TYPE_CHECKING:
    from anyio.abc import TaskGroup
    from mcp.server.lowlevel import Server

    from ..config import ServerConfig
    from .registry import SessionRegistry


SessionIdGenerator = Callable[[], str]
ServerBuilder = Callable[[CapabilitySet, "ServerConfig"], "Server[Any, Any]"]


def generate_session_id() -> str:
    """Return a 128-bit random hex token."""
    return secrets.token_hex(16)


class RegistryBinding:
    """Endpoint observer that mirrors lifecycle events into the registry."""

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    async def on_established(self, endpoint: SessionEndpoint) -> None:
        if endpoint.session_id is None:
            raise RuntimeError("Endpoint reported establishment without a session id")
        self._registry.set(endpoint.session_id, endpoint)

    async def on_closed(self, endpoint: SessionEndpoint, reason: CloseReason) -> None:
        await self._registry.remove(endpoint.assigned_id)


class EndpointFactory:
    def __init__(
        self,
        registry: SessionRegistry,
        capabilities: CapabilitySet,
        config: ServerConfig,
        *,
        id_generator: SessionIdGenerator = generate_session_id,
        server_builder: ServerBuilder = build_server,
    ) -> None:
        self._registry = registry
        self._capabilities = capabilities
        self._config = config
        self._id_generator = id_generator
        self._server_builder = server_builder
        self._binding = RegistryBinding(registry)
        self._task_group: TaskGroup | None = None
        self._logger = get_logger("heroui_mcp.session")

    @property
    def running(self) -> bool:
        return self._task_group is not None

    def attach(self, task_group: TaskGroup) -> None:
        """Run endpoint tasks in *task_group* (owned by the router's ``run()``)."""
        self._task_group = task_group

    def detach(self) -> None:
        self._task_group = None

    def security_settings(self) -> TransportSecuritySettings | None:
        if not self._config.enable_dns_rebinding_protection:
            return None
        return TransportSecuritySettings(
            enable_dns_rebinding_protection=True,
            allowed_hosts=list(self._config.allowed_hosts),
            allowed_origins=list(self._config.allowed_origins),
        )

    async def create_endpoint(self) -> SessionEndpoint:
        if self._task_group is None:
            raise RuntimeError("EndpointFactory is not running; enter RequestRouter.run() first")

        session_id = self._id_generator()
        transport = StreamableHTTPServerTransport(
            mcp_session_id=session_id,
            is_json_response_enabled=self._config.session.json_response,
            event_store=None,
            security_settings=self.security_settings(),
        )
        endpoint = SessionEndpoint(session_id, transport, self._server_builder(self._capabilities, self._config))
        endpoint.subscribe(self._binding)

        await self._task_group.start(endpoint.run)
        self._logger.debug("Created endpoint", extra={"context": {"session_id": session_id}})
        return endpoint


__all__ = ["EndpointFactory", "RegistryBinding", "SessionIdGenerator", "generate_session_id"]
