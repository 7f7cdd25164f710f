import argparse
import asyncio
import json
import re
import sys
from pathlib import Path
from urllib.parse import quote

from pinscraper.config import SEARCH_URL, Settings
from pinscraper.dispatcher import harvest
from pinscraper.events import setup_logging
from pinscraper.webhook import WebhookClient

PINTEREST_URL_RE = re.compile(r"^(http|https)://(?:[\w-]+\.)*(pinterest\.com|pin\.it)", re.IGNORECASE)


def resolve_target(user_input: str) -> str:
    """A Pinterest URL is used as is; anything else is treated as a search query."""
    if PINTEREST_URL_RE.match(user_input):
        return user_input
    return SEARCH_URL.format(query=quote(user_input, safe=""))


def page_count(value: str) -> int:
    # Unparsable or zero falls back to a single page; negative means "until the feed ends".
    try:
        return int(value) or 1
    except (TypeError, ValueError):
        return 1


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="CLI tool for the Pinterest web scraper")
    p.add_argument("input", help="Pinterest URL or search query")
    p.add_argument("-p", "--page-count", type=page_count, default=1,
                   help="Number of pages to scroll (negative = until the feed ends)")
    p.add_argument("--no-headless", dest="headless", action="store_false",
                   help="Show the browser window")
    p.add_argument("--out-json", type=str, default=None,
                   help="Also write the collected image URLs to this JSON file")
    p.add_argument("--env-file", type=str, default=None, help="Path to a .env file")
    return p.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    settings = Settings.from_env(args.env_file)
    logger = setup_logging(settings.log_dir, settings.log_level)

    target_url = resolve_target(args.input)
    logger.info("Pinterest web scraper has started. Target: %s | Headless: %s", target_url, args.headless)

    result = await harvest(
        target_url,
        settings.credential,
        args.page_count,
        headless=args.headless,
    )

    webhook = WebhookClient(settings.webhook_url, settings.webhook_token)
    await webhook.report(result)

    if not result.ok:
        print(f"[ERROR] {result.error.message}", file=sys.stderr)
        return 1

    if args.out_json:
        Path(args.out_json).parent.mkdir(parents=True, exist_ok=True)
        with open(args.out_json, "w", encoding="utf-8") as f:
            json.dump(result.images, f, ensure_ascii=False, indent=2)

    print(f"[OK] Total {len(result.images)} images collected")
    return 0 if result.images else 1


def run_cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run_cli()
