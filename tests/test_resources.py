import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx
import pytest
from fastmcp import Client, FastMCP

from shadcn_mcp.framework import FrameworkResolver
from shadcn_mcp.resources import (
    RESOURCES,
    ContentEnvelope,
    ResourceDependencies,
    ResourceDispatcher,
    UnknownResourceError,
    register_resources,
)


@dataclass
class FakeRegistryClient:
    components: list[str] = field(default_factory=list)
    error: Exception | None = None
    paths: Mapping[str, str] = field(default_factory=lambda: {"NEW_YORK_V4_PATH": "apps/v4/registry/new-york-v4"})

    async def get_available_components(self) -> list[str]:
        if self.error is not None:
            raise self.error
        return list(self.components)


def _dispatcher(client: FakeRegistryClient, argv: list[str] | None = None) -> ResourceDispatcher:
    async def factory() -> FakeRegistryClient:
        return client

    return ResourceDispatcher(FrameworkResolver(argv or [], {}), factory)


@pytest.mark.anyio
async def test_get_components_sorted_json() -> None:
    dispatcher = _dispatcher(FakeRegistryClient(components=["button", "alert"]))
    envelope = await dispatcher.resolve("resource:get_components")
    assert envelope.content_type == "application/json"
    assert json.loads(envelope.content) == ["alert", "button"]


@pytest.mark.anyio
async def test_get_components_failure_becomes_error_payload(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="shadcn_mcp.resources")
    dispatcher = _dispatcher(FakeRegistryClient(error=TimeoutError("timeout")))

    envelope = await dispatcher.resolve("resource:get_components")

    assert envelope.content_type == "application/json"
    assert json.loads(envelope.content) == {
        "error": "Failed to fetch components list",
        "message": "timeout",
    }
    assert "Error fetching components list" in caplog.text


@pytest.mark.anyio
async def test_client_factory_failure_is_converted() -> None:
    async def factory() -> FakeRegistryClient:
        raise RuntimeError("backend unavailable")

    dispatcher = ResourceDispatcher(FrameworkResolver([], {}), factory)
    envelope = await dispatcher.get_components()
    assert json.loads(envelope.content)["message"] == "backend unavailable"


@pytest.mark.anyio
async def test_theme_metadata_describes_configuration() -> None:
    dispatcher = _dispatcher(FakeRegistryClient(), ["-f", "vue", "--ui-library", "base"])
    envelope = await dispatcher.resolve("resource:get_theme_metadata")
    payload = json.loads(envelope.content)
    assert envelope.content_type == "application/json"
    assert payload["current"] == "vue"
    assert payload["repository"] == "unovue/shadcn-vue"
    assert payload["fileExtension"] == ".vue"
    assert payload["uiLibrary"] == "radix"
    assert payload["registryPath"] == "apps/v4/registry/new-york-v4"


@pytest.mark.anyio
async def test_theme_metadata_needs_no_http_client() -> None:
    resolver = FrameworkResolver(["--ui-library", "base"], {})
    dependencies = ResourceDependencies(resolver)
    dispatcher = ResourceDispatcher(resolver, dependencies.load_registry_client)

    payload = json.loads((await dispatcher.get_theme_metadata()).content)

    assert "error" not in payload
    assert payload["current"] == "react"
    assert payload["uiLibrary"] == "base"
    assert payload["registryPath"] == "apps/v4/registry/bases/base"


class _BrokenEnviron(dict):
    def get(self, key, default=None):  # type: ignore[override]
        raise RuntimeError("environment unavailable")


@pytest.mark.anyio
async def test_theme_metadata_failure_becomes_error_payload() -> None:
    dispatcher = ResourceDispatcher(FrameworkResolver([], _BrokenEnviron()), _never_called)
    payload = json.loads((await dispatcher.get_theme_metadata()).content)
    assert payload == {"error": "Failed to fetch theme metadata", "message": "environment unavailable"}


async def _never_called() -> FakeRegistryClient:
    raise AssertionError("theme metadata must not load a registry client")


@pytest.mark.anyio
async def test_unknown_uri_raises() -> None:
    dispatcher = _dispatcher(FakeRegistryClient())
    with pytest.raises(UnknownResourceError):
        await dispatcher.resolve("resource:get_blocks")


def test_catalog_uris_are_unique_and_dispatchable() -> None:
    uris = [descriptor.uri for descriptor in RESOURCES]
    assert len(uris) == len(set(uris))
    assert set(uris) == set(_dispatcher(FakeRegistryClient()).handlers)
    assert [descriptor.name for descriptor in RESOURCES] == ["get_components", "get_theme_metadata"]


@pytest.mark.anyio
async def test_declared_content_type_matches_payload() -> None:
    dispatcher = _dispatcher(FakeRegistryClient(components=["card"]))
    for descriptor in RESOURCES:
        envelope = await dispatcher.resolve(descriptor.uri)
        assert envelope.content_type == descriptor.content_type
        json.loads(envelope.content)


def test_envelope_from_json_is_indented() -> None:
    envelope = ContentEnvelope.from_json(["a"])
    assert envelope.content == '[\n  "a"\n]'


@pytest.mark.anyio
async def test_dependencies_build_client_for_resolved_framework() -> None:
    http_client = httpx.AsyncClient(base_url="http://mock.local")
    dependencies = ResourceDependencies(FrameworkResolver(["-f", "svelte"], {}))
    with pytest.raises(RuntimeError):
        await dependencies.load_registry_client()

    dependencies.attach_client(http_client)
    try:
        client = await dependencies.load_registry_client()
        assert client.source.repository == "huntabyte/shadcn-svelte"
    finally:
        dependencies.detach_client()
        await http_client.aclose()


@pytest.mark.anyio
async def test_registered_resources_are_readable_over_mcp() -> None:
    mcp = FastMCP(name="test")
    register_resources(mcp, _dispatcher(FakeRegistryClient(components=["tabs", "card"])))

    async with Client(mcp) as client:
        resources = await client.list_resources()
        assert sorted(resource.name for resource in resources) == ["get_components", "get_theme_metadata"]

        contents = await client.read_resource("resource:get_components")
        assert json.loads(contents[0].text) == ["card", "tabs"]
