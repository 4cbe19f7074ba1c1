"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import requests

from svg_ns_normalizer.config import AppConfig
from svg_ns_normalizer.loaders import SvgFetchError, fetch_and_normalize, to_data_url
from svg_ns_normalizer.logging_setup import setup_logging
from svg_ns_normalizer.normalize.namespace import has_issue, normalize

_log = logging.getLogger("svg_ns_normalizer.cli")


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def _read_or_report(name: str) -> str | None:
    try:
        return _read_input(name)
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: {name}: {e}", file=sys.stderr)
        return None


def _write_output(text: str, out: str | None) -> None:
    if out is None or out == "-":
        sys.stdout.write(text)
        return
    Path(out).write_text(text, encoding="utf-8")


def _cmd_check(args: argparse.Namespace, cfg: AppConfig) -> int:
    found = 0
    for name in args.files:
        text = _read_or_report(name)
        if text is None:
            return 2
        if has_issue(text):
            print(name)
            found += 1
    return 1 if found else 0


def _cmd_fix(args: argparse.Namespace, cfg: AppConfig) -> int:
    strip = bool(args.strip_foreign_prefixes or cfg.strip_foreign_prefixes)
    if args.output and len(args.files) > 1:
        print("error: --output accepts a single input file", file=sys.stderr)
        return 2
    for name in args.files:
        text = _read_or_report(name)
        if text is None:
            return 2
        fixed = normalize(text, strip_foreign_prefixes=strip)
        if args.in_place and name != "-":
            if fixed != text:
                Path(name).write_text(fixed, encoding="utf-8")
                _log.info("fixed path=%s", name)
            continue
        _write_output(fixed, args.output)
    return 0


def _cmd_fetch(args: argparse.Namespace, cfg: AppConfig) -> int:
    timeout = args.timeout if args.timeout is not None else (cfg.request_timeout_s or None)
    try:
        text = fetch_and_normalize(args.url, timeout=timeout)
    except (requests.RequestException, SvgFetchError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    _write_output(text, args.output)
    return 0


def _cmd_data_url(args: argparse.Namespace, cfg: AppConfig) -> int:
    text = _read_or_report(args.file)
    if text is None:
        return 2
    print(to_data_url(text))
    return 0


def _cmd_watch(args: argparse.Namespace, cfg: AppConfig) -> int:
    from svg_ns_normalizer.app import run_app

    run_app()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svg-ns-normalizer",
        description="Repair numbered XLink namespace prefixes (ns1:href) in SVG files.",
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("check", help="List files that bind a numbered prefix to XLink")
    p.add_argument("files", nargs="+", help="SVG files, or - for stdin")
    p.set_defaults(func=_cmd_check)

    p = sub.add_parser("fix", help="Normalize SVG files")
    p.add_argument("files", nargs="+", help="SVG files, or - for stdin")
    dest = p.add_mutually_exclusive_group()
    dest.add_argument("-o", "--output", help="Write to this file instead of stdout")
    dest.add_argument("-i", "--in-place", action="store_true", help="Rewrite files in place")
    p.add_argument(
        "--strip-foreign-prefixes",
        action="store_true",
        help="Also remove numbered prefixes that are not bound to XLink",
    )
    p.set_defaults(func=_cmd_fix)

    p = sub.add_parser("fetch", help="Download an SVG and normalize it")
    p.add_argument("url")
    p.add_argument("-o", "--output", help="Write to this file instead of stdout")
    p.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    p.set_defaults(func=_cmd_fetch)

    p = sub.add_parser("data-url", help="Print the normalized SVG as a data: URL")
    p.add_argument("file", help="SVG file, or - for stdin")
    p.set_defaults(func=_cmd_data_url)

    p = sub.add_parser("watch", help="Normalize SVG text copied to the clipboard")
    p.set_defaults(func=_cmd_watch)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = AppConfig.load()
    if args.command != "watch":
        setup_logging(args.log_level or cfg.log_level)
    return int(args.func(args, cfg))


if __name__ == "__main__":
    raise SystemExit(main())
