"""HTTP client factory for the GitHub contents API."""

import httpx

from shadcn_mcp.settings import Settings


def create_github_client(settings: Settings) -> httpx.AsyncClient:
    """
    Build an AsyncClient configured for the GitHub REST API.

    The personal access token is optional; unauthenticated requests are subject
    to GitHub's lower rate limit.
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "shadcn-ui-mcp-server",
    }
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"
    return httpx.AsyncClient(
        base_url=settings.github_api_url,
        headers=headers,
        timeout=settings.api_timeout,
    )
