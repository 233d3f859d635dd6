"""ShipRate-Cache CLI management tool.

Usage:
    python -m cli postcode format "01310-100"
    python -m cli cache key cart.json
    python -m cli cache lookup cart.json
    python -m cli cache status
    python -m cli cache flush

Cart files are JSON objects with ``dest_postcode``, ``coupon_code`` and an
``items`` list, the same shape the ``/api/v1/shipping-cache/key`` endpoint
accepts.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from shiprate.cache import get_cache_manager
from shiprate.config import get_settings
from shiprate.exceptions import CacheSerializationError, CacheStoreUnavailableError
from shiprate.main import configure_logging
from shiprate.models import RateRequest
from shiprate.schemas import RateRequestIn
from shiprate.services.postcode import postcode_normalizer
from shiprate.services.rate_request import rate_request_scope


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shiprate-cli",
        description="ShipRate-Cache CLI",
    )
    sub = parser.add_subparsers(dest="command", help="Top-level command")

    # ── Postcode ─────────────────────────────────────────
    postcode_parser = sub.add_parser("postcode", help="Postcode normalization")
    postcode_sub = postcode_parser.add_subparsers(dest="action")

    fmt = postcode_sub.add_parser("format", help="Normalize postcodes")
    fmt.add_argument("postcodes", nargs="+", help="Raw postcodes")

    # ── Cache ────────────────────────────────────────────
    cache_parser = sub.add_parser("cache", help="Rate cache management")
    cache_sub = cache_parser.add_subparsers(dest="action")

    key = cache_sub.add_parser("key", help="Show the cache key for a cart")
    key.add_argument("file", help="Cart JSON file")

    lookup = cache_sub.add_parser("lookup", help="Look up cached quotes for a cart")
    lookup.add_argument("file", help="Cart JSON file")

    cache_sub.add_parser("status", help="Show cache state")
    cache_sub.add_parser("flush", help="Purge all cached rates")

    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    if not args.command:
        parser.print_help()
        return

    handlers = {
        "postcode": handle_postcode,
        "cache": handle_cache,
    }
    handlers[args.command](args)


# ── Command Handlers ────────────────────────────────────

def load_cart(path_str: str) -> RateRequest:
    path = Path(path_str)
    if not path.exists():
        print(f"File not found: {path_str}")
        sys.exit(1)
    try:
        payload = RateRequestIn.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        print(f"Invalid cart file: {e}")
        sys.exit(1)
    return payload.to_rate_request()


def handle_postcode(args):
    if args.action == "format":
        for raw in args.postcodes:
            print(f"{raw:<20} {postcode_normalizer.format(raw)}")
    else:
        print("Usage: shiprate-cli postcode format POSTCODE [POSTCODE ...]")


def handle_cache(args):
    cache = get_cache_manager()

    if args.action == "key":
        request = load_cart(args.file)
        with rate_request_scope(request) as context:
            try:
                key = cache.key_generator.generate(context)
            except CacheSerializationError as e:
                print(f"Cannot build cache key: {e}")
                sys.exit(1)
        print(key.decode("utf-8"))

    elif args.action == "lookup":
        request = load_cart(args.file)
        with rate_request_scope(request) as context:
            try:
                result = cache.load(context)
            except CacheSerializationError as e:
                print(f"Cannot build cache key: {e}")
                sys.exit(1)
            except CacheStoreUnavailableError as e:
                print(f"Cache unavailable: {e}")
                sys.exit(1)
        print(f"Status: {result.status.value}")
        if result.records:
            print(f"{'Carrier':<15} {'Service':<12} {'Price':<10} {'Days'}")
            print("-" * 45)
            for r in result.records:
                print(f"{r.carrier:<15} {r.service_code:<12} {r.shipping_price!s:<10} {r.delivery_time}")

    elif args.action == "status":
        print(json.dumps({
            "type_identifier": cache.type_identifier,
            "tag": cache.tag,
            "enabled": cache.is_enabled(),
            "backend": get_settings().cache_backend,
        }, indent=2))

    elif args.action == "flush":
        try:
            removed = cache.purge()
        except CacheStoreUnavailableError as e:
            print(f"Cache unavailable: {e}")
            sys.exit(1)
        print(f"Purged {removed} entries tagged {cache.tag}")

    else:
        print("Usage: shiprate-cli cache {key|lookup|status|flush}")


if __name__ == "__main__":
    main()
