#!/usr/bin/env python3
import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config import settings
from src.core.logging import configure_logging
from src.crawlers.sources import build_source_registry
from src.services.feed_service import render_rss


def _json_ready(row: dict) -> dict:
    out = dict(row)
    value = out.get("published_at")
    if isinstance(value, datetime):
        out["published_at"] = value.isoformat()
    content = out.get("content_html")
    if isinstance(content, str) and len(content) > 200:
        out["content_html"] = f"{content[:200]}..."
    return out


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate one source's feed, print its items, and optionally save the RSS XML."
    )
    parser.add_argument("source_id", nargs="?", default=None)
    parser.add_argument("--list", action="store_true", help="Print the registered source ids and exit.")
    parser.add_argument("--output", default=None, help="Write the rendered RSS document to this path.")
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args()

    configure_logging(args.log_level)
    registry = build_source_registry(settings)

    if args.list or not args.source_id:
        for source_id in registry.list_ids():
            print(source_id)
        return 0

    source = registry.get(args.source_id)
    if source is None:
        print(f"Unknown source {args.source_id!r}. Available: {', '.join(registry.list_ids())}")
        return 2

    feed = await source.generate_feed()
    print(f"Generated items: {len(feed.items)}")
    for item in feed.items:
        print(json.dumps(_json_ready(asdict(item)), ensure_ascii=False))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            render_rss(feed, feed_url=settings.feed_url_for(source.id)),
            encoding="utf-8",
        )
        print(f"Saved RSS document to: {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
