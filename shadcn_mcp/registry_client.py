"""
Component registry clients backed by the GitHub contents API.

Each framework (and, for React, each UI library) maps to a ``RegistrySource``
describing where its components live. ``load_client`` picks the source for the
resolved selection and wraps it around a shared httpx client.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from shadcn_mcp.framework import Framework, UiLibrary
from shadcn_mcp.paths import select_default_path

logger = logging.getLogger(__name__)


class RegistryApiError(RuntimeError):
    """Represents failures when reading a component registry."""


class RepositoryEntry(BaseModel):
    """Subset of a GitHub contents API entry."""

    name: str
    type: str


_ENTRIES = TypeAdapter(list[RepositoryEntry])


class RegistryClient(Protocol):
    """Capabilities the resource handlers rely on."""

    @property
    def paths(self) -> Mapping[str, str]: ...

    async def get_available_components(self) -> list[str]: ...


@dataclass(frozen=True, slots=True)
class RegistrySource:
    """Location and conventions of one framework's component registry."""

    owner: str
    repo: str
    branch: str
    file_extension: str
    component_dir: str = "ui"
    paths: Mapping[str, str] = field(default_factory=dict)

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def components_path(self) -> str:
        default_path = select_default_path(self.paths)
        if default_path is None:
            raise RegistryApiError(f"No default registry path configured for {self.repository}.")
        return f"{default_path}/{self.component_dir}"


def _source(owner: str, repo: str, branch: str, file_extension: str, component_dir: str = "ui", **paths: str) -> RegistrySource:
    return RegistrySource(
        owner=owner,
        repo=repo,
        branch=branch,
        file_extension=file_extension,
        component_dir=component_dir,
        paths=MappingProxyType(
            {"REPO_OWNER": owner, "REPO_NAME": repo, "REPO_BRANCH": branch, **paths}
        ),
    )


REGISTRY_SOURCES: Mapping[tuple[Framework, UiLibrary], RegistrySource] = MappingProxyType(
    {
        (Framework.REACT, UiLibrary.RADIX): _source(
            "shadcn-ui",
            "ui",
            "main",
            ".tsx",
            V4_BASE_PATH="apps/v4",
            REGISTRY_PATH="apps/v4/registry",
            NEW_YORK_V4_PATH="apps/v4/registry/new-york-v4",
        ),
        (Framework.REACT, UiLibrary.BASE): _source(
            "shadcn-ui",
            "ui",
            "main",
            ".tsx",
            V4_BASE_PATH="apps/v4",
            REGISTRY_PATH="apps/v4/registry",
            CURRENT_REGISTRY_PATH="apps/v4/registry/bases/base",
            NEW_YORK_V4_PATH="apps/v4/registry/new-york-v4",
        ),
        (Framework.SVELTE, UiLibrary.RADIX): _source(
            "huntabyte",
            "shadcn-svelte",
            "main",
            ".svelte",
            CURRENT_REGISTRY_PATH="docs/src/lib/registry",
        ),
        (Framework.VUE, UiLibrary.RADIX): _source(
            "unovue",
            "shadcn-vue",
            "dev",
            ".vue",
            CURRENT_REGISTRY_PATH="apps/v4/registry/new-york-v4",
        ),
        (Framework.REACT_NATIVE, UiLibrary.RADIX): _source(
            "founded-labs",
            "react-native-reusables",
            "main",
            ".tsx",
            component_dir="components/ui",
            CURRENT_REGISTRY_PATH="packages/registry/src/new-york",
        ),
    }
)


@dataclass(slots=True)
class ComponentRegistryClient:
    """Read-only view of a component registry hosted on GitHub."""

    source: RegistrySource
    _client: httpx.AsyncClient

    @property
    def paths(self) -> Mapping[str, str]:
        return self.source.paths

    async def get_available_components(self) -> list[str]:
        """Return component names found in the registry's component directory."""
        path = self.source.components_path
        logger.debug(
            "Listing registry components",
            extra={"repository": self.source.repository, "path": path},
        )
        payload = await self._request(
            "GET",
            f"/repos/{self.source.owner}/{self.source.repo}/contents/{path}",
            params={"ref": self.source.branch},
        )
        try:
            entries = _ENTRIES.validate_python(payload)
        except ValidationError as exc:
            raise RegistryApiError(
                f"Unexpected directory listing for {self.source.repository}/{path}."
            ) from exc

        components: list[str] = []
        for entry in entries:
            if entry.type == "dir":
                components.append(entry.name)
            elif entry.type == "file" and entry.name.endswith(self.source.file_extension):
                components.append(entry.name[: -len(self.source.file_extension)])
        return components

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Normalized request handler for all outgoing GitHub calls."""

        def _transport_error(message: str, *, exc: Exception | None = None) -> RegistryApiError:
            logger.error(
                message,
                extra={"method": method, "path": path},
                exc_info=exc,
            )
            return RegistryApiError(message)

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise _transport_error(
                f"GitHub API request timed out ({method} {path}).",
                exc=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise _transport_error(
                f"GitHub API request failed ({method} {path}): {exc!s}",
                exc=exc,
            ) from exc

        if response.status_code in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
            reset = response.headers.get("X-RateLimit-Reset", "unknown")
            logger.warning(
                "GitHub API rate limit exhausted",
                extra={"method": method, "path": path, "rate_limit_reset": reset},
            )
            raise RegistryApiError(
                f"GitHub API rate limit exceeded during {method} {path} (resets at {reset}). "
                "Set GITHUB_PERSONAL_ACCESS_TOKEN for a higher limit."
            )

        if response.is_error:
            snippet = response.text.strip()
            if len(snippet) > 512:
                snippet = f"{snippet[:512]}..."
            logger.warning(
                "GitHub API responded with error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise RegistryApiError(
                f"GitHub API error ({response.status_code}) during {method} {path}: {snippet or 'no body provided.'}"
            )

        try:
            return response.json()
        except json.JSONDecodeError as exc:
            logger.error(
                "GitHub API returned invalid JSON",
                extra={"method": method, "path": path},
            )
            raise RegistryApiError(
                f"GitHub API returned invalid JSON during {method} {path}."
            ) from exc


def registry_source(framework: Framework, ui_library: UiLibrary) -> RegistrySource:
    """Return the registry source for a selection; UI library only matters for React."""
    if framework is not Framework.REACT:
        ui_library = UiLibrary.RADIX
    return REGISTRY_SOURCES[(framework, ui_library)]


def load_client(
    framework: Framework,
    ui_library: UiLibrary,
    http_client: httpx.AsyncClient,
) -> ComponentRegistryClient:
    """Build the registry client for the selected framework."""
    return ComponentRegistryClient(registry_source(framework, ui_library), http_client)
