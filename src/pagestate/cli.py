# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page State CLI: load the initial state or classify a path against a live backend.

Usage:
    python -m pagestate.cli load PATH [--query Q] [--cookie C] [--locale L] [-o FILE]
    python -m pagestate.cli classify PATH

Backend options (--api-url, --ajax-url, --api-token, --theme-dir, --timeout)
default to PAGESTATE_API_URL, PAGESTATE_AJAX_URL, PAGESTATE_API_TOKEN,
THEME_DIR, PAGESTATE_TIMEOUT.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .config import EngineConfig


def _config_from_args(args: argparse.Namespace) -> EngineConfig:
    config = EngineConfig.from_env().with_overrides(
        api_base_url=args.api_url,
        ajax_base_url=args.ajax_url,
        api_token=args.api_token,
        theme_dir=Path(args.theme_dir) if args.theme_dir else None,
        timeout=args.timeout,
        log_level=args.log_level,
    )
    if args.json_logs:
        config = config.with_overrides(json_logs=True)
    return config


def _emit(payload: dict, output: str | None) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        print(f"Saved to {output}", file=sys.stderr)
    else:
        print(text)


async def _load(config: EngineConfig, args: argparse.Namespace) -> dict:
    from .api_client import StorefrontApi
    from .loader import load_state
    from .locales import ThemeTextStore

    async with StorefrontApi(config) as api:
        result = await load_state(
            args.path,
            args.query,
            args.cookie,
            args.locale,
            services=api.services(ThemeTextStore(config.theme_dir)),
        )
    return result.to_dict()


async def _classify(config: EngineConfig, args: argparse.Namespace) -> dict:
    from .api_client import StorefrontApi
    from .page_classifier import classify

    async with StorefrontApi(config) as api:
        page_ref = await classify(args.path, api.sitemap)
    return page_ref.to_dict()


def _run(args: argparse.Namespace) -> None:
    from .logging_config import configure
    from .problem_details import from_exception

    config = _config_from_args(args)
    configure(json_output=config.json_logs, level=config.log_level)

    runner = _load if args.command == "load" else _classify
    try:
        config.validate(require_theme=args.command == "load")
        payload = asyncio.run(runner(config, args))
    except KeyboardInterrupt:
        raise
    except Exception as e:
        problem = from_exception(e, instance=args.path)
        print(problem.to_cli_text(), file=sys.stderr)
        if args.problem_json:
            print(problem.to_json(), file=sys.stderr)
        sys.exit(1)

    _emit(payload, args.output)


def _add_backend_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--api-url", type=str, metavar="URL", help="Backend REST API base URL")
    parser.add_argument("--ajax-url", type=str, metavar="URL", help="Storefront AJAX API base URL (cart)")
    parser.add_argument("--api-token", type=str, metavar="TOKEN", help="Bearer token for the REST API")
    parser.add_argument("--theme-dir", type=str, metavar="DIR", help="Theme directory (assets/locales/*.json)")
    parser.add_argument("--timeout", type=float, metavar="SEC", help="Per-call timeout in seconds (default: 10)")
    parser.add_argument("--log-level", type=str, default=None, help="Log level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines on stderr")
    parser.add_argument("--problem-json", action="store_true", help="Also print the RFC 9457 problem on failure")
    parser.add_argument("-o", "--output", type=str, metavar="FILE", help="Write JSON to FILE instead of stdout")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Page State CLI",
        prog="python -m pagestate.cli",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_load = subparsers.add_parser(
        "load",
        help="Resolve a storefront request into its initial state",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s /shoes                                  Category page
  %(prog)s /search --query "search=boots&price_to=100"
  %(prog)s /cart --cookie "order_id=..." --locale de""",
    )
    p_load.add_argument("path", help="Request path, e.g. /shoes")
    p_load.add_argument("--query", type=str, default="", help="Raw query string (leading ? optional)")
    p_load.add_argument("--cookie", type=str, default="", help="Session Cookie header value")
    p_load.add_argument("--locale", type=str, default="en", help="Theme locale code (default: en)")
    _add_backend_options(p_load)

    p_classify = subparsers.add_parser("classify", help="Resolve a path to its page type only")
    p_classify.add_argument("path", help="Request path, e.g. /shoes")
    _add_backend_options(p_classify)

    args = parser.parse_args(argv)
    _run(args)


if __name__ == "__main__":
    main()
