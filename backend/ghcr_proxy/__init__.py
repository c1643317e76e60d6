"""GHCR proxy API: container package and tag lookups over HTTP."""

__all__ = [
    "api",
    "core",
    "schemas",
    "services",
    "tools",
]
