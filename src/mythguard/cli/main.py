# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""MythGuard CLI."""

from __future__ import annotations

import argparse
import sys

from ..config import (
    AnalysisSettings,
    HttpSettings,
    load_analysis_settings,
    load_http_settings,
    severity_threshold,
    swc_blacklist,
)
from ..errors import ConfigurationError, MythGuardError
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import AnalysisRun
from ..runtime import MythGuard
from ..scan.report import render_json, render_legacy_report, render_text, render_version, render_yaml, summarize
from ..version import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MythGuard: submit compiled contracts to MythX and report the findings")
    parser.add_argument("build_dir", nargs="?", default=None, help="Directory holding compiled contract JSON artifacts")
    parser.add_argument("--contract", action="append", default=[], help="Only analyze this contract (repeatable)")
    parser.add_argument("--limit", default=None, help="Maximum number of analyses in flight at once")
    parser.add_argument("--uuid", default=None, help="Retrieve the results of an earlier analysis instead")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Output JSON instead of a human-friendly summary")
    output.add_argument("--yaml", action="store_true", help="Output YAML instead of a human-friendly summary")
    parser.add_argument("--debug", action="store_true", help="Log progress and show MythX service logs")
    parser.add_argument("--version", action="store_true", help="Show the MythGuard and MythX service versions, then exit")
    parser.add_argument("--severity-threshold", default=None, choices=["warning", "error"], help="Lowest severity to report")
    parser.add_argument("--swc-blacklist", default=None, help="Comma separated SWC codes to ignore, e.g. 103,111")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds to wait for each analysis")
    parser.add_argument("--initial-delay", type=float, default=None, help="Seconds to wait before the first status poll")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for self-hosted API endpoints)",
    )
    return parser


def _apply_args(args: argparse.Namespace, settings: AnalysisSettings, http_settings: HttpSettings) -> None:
    if args.debug:
        settings.debug = True
    if args.timeout is not None and args.timeout > 0:
        settings.max_wait = args.timeout
    if args.initial_delay is not None and args.initial_delay >= 0:
        settings.initial_delay = args.initial_delay
    if args.ignore_ssl_errors:
        http_settings.verify_ssl = False


def _report(run: AnalysisRun, args: argparse.Namespace, settings: AnalysisSettings) -> int:
    if run.reference is not None:
        text, exit_code = render_legacy_report(run.reference)
        print(text)
        return exit_code

    assert run.result is not None
    summary = summarize(run.result, severity_threshold(args.severity_threshold), swc_blacklist(args.swc_blacklist))
    if args.json:
        print(render_json(summary))
    elif args.yaml:
        print(render_yaml(summary), end="")
    else:
        print(render_text(summary, debug=settings.debug))
    return summary.exit_code


def _print_version(args: argparse.Namespace) -> int:
    print(f"mythguard {__version__}")
    http_settings = load_http_settings()
    if args.ignore_ssl_errors:
        http_settings.verify_ssl = False
    try:
        with MythGuard(http_client=create_default_http_client(http_settings)) as guard:
            versions = guard.service_version()
    except MythGuardError as exc:
        print(f"Could not get the MythX service version: {exc}", file=sys.stderr)
        return 1
    print(render_version(versions))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(debug=args.debug)

    if args.version:
        return _print_version(args)

    if not args.build_dir and not args.uuid:
        parser.error("a build directory is required unless --uuid is given")

    settings = load_analysis_settings()
    http_settings = load_http_settings()
    _apply_args(args, settings, http_settings)

    try:
        http_client = create_default_http_client(http_settings)
        with MythGuard(http_client=http_client, settings=settings) as guard:
            run = guard.analyze(
                args.build_dir,
                contract_names=args.contract,
                limit=args.limit,
                job_reference=args.uuid,
            )
    except (ConfigurationError, FileNotFoundError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    return _report(run, args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
