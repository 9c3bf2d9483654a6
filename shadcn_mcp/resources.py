"""
MCP resource catalog and dispatcher.

Resources are addressed by URI. Every handler returns a ``ContentEnvelope``;
backend failures are logged and converted into a JSON error payload so the
transport layer never sees an exception from a known resource.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from fastmcp import FastMCP

from shadcn_mcp.framework import FrameworkResolver
from shadcn_mcp.paths import select_default_path
from shadcn_mcp.registry_client import ComponentRegistryClient, RegistryClient, load_client, registry_source

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    name: str
    description: str
    uri: str
    content_type: str


@dataclass(frozen=True, slots=True)
class ContentEnvelope:
    """Serialized resource payload plus its MIME type."""

    content: str
    content_type: str = JSON_CONTENT_TYPE

    @classmethod
    def from_json(cls, payload: Any) -> "ContentEnvelope":
        return cls(content=json.dumps(payload, indent=2), content_type=JSON_CONTENT_TYPE)


class UnknownResourceError(KeyError):
    """Raised when a URI is not part of the resource catalog."""


GET_COMPONENTS_URI = "resource:get_components"
GET_THEME_METADATA_URI = "resource:get_theme_metadata"

RESOURCES: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor(
        name="get_components",
        description="List of available shadcn/ui components that can be used in the project",
        uri=GET_COMPONENTS_URI,
        content_type=JSON_CONTENT_TYPE,
    ),
    ResourceDescriptor(
        name="get_theme_metadata",
        description="Returns metadata about the currently configured theme",
        uri=GET_THEME_METADATA_URI,
        content_type=JSON_CONTENT_TYPE,
    ),
)


@dataclass
class ResourceDependencies:
    """Runtime dependencies required by the resource handlers."""

    resolver: FrameworkResolver
    http_client: httpx.AsyncClient | None = None

    def attach_client(self, client: httpx.AsyncClient) -> None:
        self.http_client = client

    def detach_client(self) -> None:
        self.http_client = None

    def require_client(self) -> httpx.AsyncClient:
        if self.http_client is None:
            raise RuntimeError("GitHub HTTP client is not initialized.")
        return self.http_client

    async def load_registry_client(self) -> ComponentRegistryClient:
        return load_client(
            self.resolver.resolve_framework(),
            self.resolver.resolve_ui_library(),
            self.require_client(),
        )


ClientFactory = Callable[[], Awaitable[RegistryClient]]
ResourceHandler = Callable[[], Awaitable[ContentEnvelope]]


async def _with_error_handling(
    resource_name: str,
    error_message: str,
    action: Callable[[], Awaitable[ContentEnvelope]],
) -> ContentEnvelope:
    try:
        return await action()
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Error fetching %s",
            resource_name,
            exc_info=True,
            extra={"resource": resource_name, "error": str(exc)},
        )
        return ContentEnvelope.from_json({"error": error_message, "message": str(exc)})


class ResourceDispatcher:
    """Route resource URIs to handlers backed by the selected registry."""

    def __init__(self, resolver: FrameworkResolver, client_factory: ClientFactory) -> None:
        self._resolver = resolver
        self._client_factory = client_factory
        self._handlers: dict[str, ResourceHandler] = {
            GET_COMPONENTS_URI: self.get_components,
            GET_THEME_METADATA_URI: self.get_theme_metadata,
        }

    @property
    def descriptors(self) -> tuple[ResourceDescriptor, ...]:
        return RESOURCES

    @property
    def handlers(self) -> Mapping[str, ResourceHandler]:
        return dict(self._handlers)

    async def resolve(self, uri: str) -> ContentEnvelope:
        handler = self._handlers.get(uri)
        if handler is None:
            raise UnknownResourceError(uri)
        return await handler()

    async def get_components(self) -> ContentEnvelope:
        """Sorted component names of the active registry as a JSON array."""

        async def _call() -> ContentEnvelope:
            client = await self._client_factory()
            components = await client.get_available_components()
            return ContentEnvelope.from_json(sorted(components))

        return await _with_error_handling(
            "components list",
            "Failed to fetch components list",
            _call,
        )

    async def get_theme_metadata(self) -> ContentEnvelope:
        """Describe the configured framework, UI library and registry location."""

        async def _call() -> ContentEnvelope:
            info = self._resolver.framework_info()
            ui_library = self._resolver.resolve_ui_library()
            source = registry_source(info.current, ui_library)
            payload = {
                **info.as_dict(),
                "uiLibrary": ui_library.value,
                "registryPath": select_default_path(source.paths),
            }
            return ContentEnvelope.from_json(payload)

        return await _with_error_handling(
            "theme metadata",
            "Failed to fetch theme metadata",
            _call,
        )


def register_resources(mcp: FastMCP, dispatcher: ResourceDispatcher) -> None:
    """Expose the dispatcher's catalog as FastMCP resources."""

    def _reader(uri: str) -> Callable[[], Awaitable[str]]:
        async def read() -> str:
            envelope = await dispatcher.resolve(uri)
            return envelope.content

        return read

    for descriptor in dispatcher.descriptors:
        mcp.resource(
            descriptor.uri,
            name=descriptor.name,
            description=descriptor.description,
            mime_type=descriptor.content_type,
        )(_reader(descriptor.uri))

    logger.info("Registered %d MCP resources.", len(dispatcher.descriptors))
