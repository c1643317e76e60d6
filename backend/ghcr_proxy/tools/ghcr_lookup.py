"""
CLI to run a catalog or tag lookup without starting the HTTP server.

- Token comes from --token or the GITHUB_TOKEN environment variable.
- --async uses the coroutine flavour (registry v2 API for tags).
- Outputs the response model as JSON on STDOUT.

Usage examples:
  python -m ghcr_proxy.tools.ghcr_lookup catalog --username octocat
  python -m ghcr_proxy.tools.ghcr_lookup tags octocat/hello --username octocat --async
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from ghcr_proxy.schemas.auth import AuthRequest
from ghcr_proxy.services.github_packages import GitHubPackagesService


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Look up GHCR container packages or tags and print JSON."
    )
    parser.add_argument("command", choices=["catalog", "tags"], help="Lookup to run.")
    parser.add_argument("repository", nargs="?", help='Repository for "tags": "owner/name" or "name".')
    parser.add_argument("--username", required=True, help="GitHub username.")
    parser.add_argument("--token", default=None, help="Personal access token (default: $GITHUB_TOKEN).")
    parser.add_argument("--async", dest="use_async", action="store_true", help="Use the async lookup.")
    return parser.parse_args(argv)


def run(args: argparse.Namespace, service: Optional[GitHubPackagesService] = None) -> str:
    """Execute the lookup described by `args` and return the response as JSON text."""
    if args.command == "tags" and not args.repository:
        raise ValueError("repository is required for the tags command")

    auth = AuthRequest(username=args.username, token=args.token or os.getenv("GITHUB_TOKEN", ""))
    service = service or GitHubPackagesService()

    if args.command == "catalog":
        if args.use_async:
            result = asyncio.run(service.get_catalog_async(auth))
        else:
            result = service.get_catalog(auth)
    elif args.use_async:
        result = asyncio.run(service.get_tags_async(args.repository, auth))
    else:
        result = service.get_tags(args.repository, auth)
    return result.model_dump_json()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entrypoint for the CLI.

    Returns:
        Process exit code (0 for success, non-zero for error).
    """
    args = _parse_args(argv)
    try:
        print(run(args))
        return 0
    except ValidationError as exc:
        messages = "; ".join(str(e.get("msg", "")).replace("Value error, ", "") for e in exc.errors())
        print(f"Error: {messages}", file=sys.stderr)
        return 1
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
