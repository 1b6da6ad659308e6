from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from backend.engine.config import load_config  # noqa: E402
from backend.engine.provider import ZenQuotesClient  # noqa: E402
from backend.engine.quote_source import QuoteSource  # noqa: E402
from backend.engine.ttl_store import MemoryStore  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Print quotes for one keyword as JSON")
    parser.add_argument("keyword")
    parser.add_argument("--limit", type=int, default=50)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    if not args.keyword.strip():
        raise ValueError("keyword must not be blank")

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = load_config()
    source = QuoteSource(config, ZenQuotesClient(config), MemoryStore())
    resolution = asyncio.run(source.get_quotes_for_keyword(args.keyword.strip(), limit=args.limit))

    payload = {
        "keyword": args.keyword.strip(),
        "source": resolution.source,
        "count": len(resolution.data),
        "errors": resolution.errors,
        "quotes": [q.to_dict() for q in resolution.data],
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
