#!/usr/bin/env python3
"""Run the federated search pipeline from a terminal and print JSON.

Usage:
  python scripts/search_cli.py search [--query Q] [--source All|GitHub|"Hugging Face"]
                                      [--tags a,b] [--sort default|growth_week|growth_month]
                                      [--category humanoid] [--limit N] [-v]
  python scripts/search_cli.py smart "a robot dog that can climb stairs" [-v]

Reads api/.env when present (OPENROUTER_API_KEY, GITHUB_TOKEN, HF_TOKEN, ...).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

_api_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _api_dir)
load_dotenv(os.path.join(_api_dir, ".env"))

from app.models.search import SearchRequest  # noqa: E402
from app.services import query_expander, search_service  # noqa: E402
from app.services.openrouter_client import MissingCredentialError  # noqa: E402
from app.services.query_expander import SmartSearchError  # noqa: E402


def _dump(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def _run_search(args: argparse.Namespace) -> int:
    request = SearchRequest.from_params(
        query=args.query,
        source=args.source,
        tags=args.tags,
        sort=args.sort,
        category=args.category,
    )
    projects = await search_service.run_search(request)
    _dump([p.model_dump(mode="json", by_alias=True) for p in projects[: args.limit]])
    return 0


async def _run_smart(args: argparse.Namespace) -> int:
    try:
        result = await query_expander.smart_search(args.description)
    except (MissingCredentialError, SmartSearchError) as exc:
        print(f"smart search failed: {exc}", file=sys.stderr)
        return 1
    _dump(
        {
            "keywords": result.keywords,
            "results": [p.model_dump(mode="json", by_alias=True) for p in result.results[: args.limit]],
            "suggestions": result.suggestions,
        }
    )
    return 0


def main() -> int:
    ap = argparse.ArgumentParser(description="Federated robotics project search")
    ap.add_argument("-v", "--verbose", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("search", help="Direct search")
    sp.add_argument("--query", default=None)
    sp.add_argument("--source", default="All")
    sp.add_argument("--tags", default=None)
    sp.add_argument("--sort", default="default")
    sp.add_argument("--category", default=None)
    sp.add_argument("--limit", type=int, default=20)

    sm = sub.add_parser("smart", help="Description -> keywords -> search -> suggestions")
    sm.add_argument("description")
    sm.add_argument("--limit", type=int, default=20)

    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s %(message)s")

    if args.command == "search":
        return asyncio.run(_run_search(args))
    if not args.description.strip():
        ap.error("description must not be empty")
    return asyncio.run(_run_smart(args))


if __name__ == "__main__":
    sys.exit(main())
