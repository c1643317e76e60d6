"""Upstream lookups against GitHub Packages and the container registry."""
