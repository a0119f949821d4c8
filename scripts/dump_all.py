#!/usr/bin/env python3
"""Dump everything the carcircle data-access layer can read.

Opens the configured SQLite store and circle backend, then calls every
read-only channel operation and prints the envelopes it answers with.
Use it to check what the UI would see, including whether circles come
from the backend or from the local fallback cache.

Usage
-----
Configure through environment variables and run::

    export CARCIRCLE_DATABASE_PATH=carcircle.db
    export CARCIRCLE_API_BASE_URL=http://localhost:8080/api
    python scripts/dump_all.py

Options::

    --seed               Insert the demo vehicles and one demo circle first
    --name TEXT          Only list circles whose name contains TEXT
    --privacy VALUE      Only list circles with this privacy
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from carcircle import CarCircleApp, CarCircleConfig  # noqa: E402


def _section(title: str) -> str:
    return f"\n── {title} " + "─" * max(0, 60 - len(title))


def _render_text(results: dict[str, Any]) -> str:
    lines: list[str] = [f"carcircle dump at {results['timestamp']}"]
    lines.append(f"  database: {results['database']}")
    lines.append(f"  backend:  {results['backend']}")
    lines.append(f"  circle source: {results['circle_source']}")
    for operation, reply in results["operations"].items():
        lines.append(_section(operation))
        if not reply["success"]:
            lines.append(f"  ERROR: {reply['error']}")
            continue
        data = reply.get("data")
        if isinstance(data, list):
            lines.append(f"  {len(data)} record(s)")
            for item in data:
                lines.append(f"  - {json.dumps(item, sort_keys=True)}")
        else:
            lines.append(f"  {json.dumps(data, sort_keys=True)}")
    return "\n".join(lines)


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump all vehicles and circles visible through the carcircle channel",
    )
    parser.add_argument("--seed", action="store_true", help="Insert demo vehicles and one demo circle first")
    parser.add_argument("--name", help="Only list circles whose name contains TEXT")
    parser.add_argument("--privacy", help="Only list circles with this privacy")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = CarCircleConfig.from_env(seed_sample_data=args.seed)
    filters = {key: value for key, value in {"name": args.name, "privacy": args.privacy}.items() if value}

    results: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "database": config.database_path,
        "backend": config.api_base_url,
        "operations": {},
    }

    async with CarCircleApp(config) as app:
        if args.seed:
            results["operations"]["circle:seed"] = await app.channel.dispatch("circle:seed")
        results["operations"]["vehicle:getAll"] = await app.channel.dispatch("vehicle:getAll")
        results["operations"]["circle:list"] = await app.channel.dispatch("circle:list", filters)
        listed = await app.circles.list(name=args.name, privacy=args.privacy)
        results["circle_source"] = "cache" if listed.from_cache else "remote"

    output = json.dumps(results, indent=2, sort_keys=True) if args.json_mode else _render_text(results)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"Output written to {args.output}")
    else:
        print(output)


if __name__ == "__main__":
    asyncio.run(main())
