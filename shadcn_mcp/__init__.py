"""
Framework-aware MCP server exposing shadcn/ui component metadata.

The package resolves the active component framework once per process and
serves MCP resources backed by the matching component registry.
"""

__all__ = []
