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
from backend.engine.ttl_store import JsonFileStore, MemoryStore  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the provider's keyword index as JSON")
    parser.add_argument("--no-cache", action="store_true", help="Skip the on-disk keyword cache")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = load_config()
    store = MemoryStore() if args.no_cache else JsonFileStore(config.cache_path)
    source = QuoteSource(config, ZenQuotesClient(config), store)

    keywords, origin = asyncio.run(source.get_keywords())
    payload = {
        "source": origin,
        "count": len(keywords),
        "keywords": [k.to_dict() for k in keywords],
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
