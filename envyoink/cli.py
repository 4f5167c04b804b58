"""Command line entry point: yoink env variable names from a workspace into an env example file.

Usage:
  envyoink --preset JS                          # writes ./.env.example
  envyoink -p 'getenv\\("([A-Z_]+)"\\)' -d src -o . -e .env.sample
  envyoink --preset Python --preset Go --summary
  envyoink --config envyoink.yaml --stdout
  envyoink --list-presets

Exit codes:
  0 success (including an empty result)
  1 extraction failed (abort policy, or a pattern match without capture group 1)
  2 configuration error (bad/missing pattern or preset, invalid config file)
  3 output could not be written
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from .config.presets import CustomPattern, PatternSource, PresetPattern, preset_table, resolve_patterns
from .config.settings import DEFAULT_EXAMPLE_FILE, ON_ERROR_CHOICES, load_config_file, load_settings
from .metrics.scan_metrics import ScanMetrics
from .scan.aggregator import render, write_output
from .scan.models import ScanReport
from .scan.pipeline import run_scan
from .utils.env_flags import env_str
from .utils.exceptions import ConfigError, ExtractError, OutputError
from .utils.logging_utils import setup_logging
from .version import get_version

logger = logging.getLogger("envyoink")

EXIT_OK = 0
EXIT_EXTRACT = 1
EXIT_CONFIG = 2
EXIT_OUTPUT = 3


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="envyoink",
        description="Tool to grab (yoink) env variables from a workspace into env example file",
    )
    src = ap.add_mutually_exclusive_group()
    src.add_argument('-p', '--pattern', help='Pattern to capture env variables (group 1 is the name)')
    src.add_argument('--preset', action='append', metavar='TAG',
                     help='Named preset (JS, Python, Rust, Go or one from --config); repeatable')
    ap.add_argument('-d', '--workspace', default=None, help='Workspace directory to scan (default ./)')
    ap.add_argument('-o', '--out', default=None, help='Output directory (default ./)')
    ap.add_argument('-e', '--example-file', default=None,
                    help=f'Env example file name (default {DEFAULT_EXAMPLE_FILE})')
    ap.add_argument('--on-error', choices=ON_ERROR_CHOICES, default=None,
                    help='Unreadable/undecodable files: skip and continue (default) or abort the run')
    ap.add_argument('--exclude', action='append', default=[], metavar='NAME',
                    help='Extra directory/file base name to prune (repeatable)')
    ap.add_argument('--config', default=None, help='YAML config file (also ENVYOINK_CONFIG)')
    ap.add_argument('--metrics-file', default=None, help='Write Prometheus textfile metrics here')
    ap.add_argument('--log-level', default=None, help='Logging level (default INFO)')
    ap.add_argument('--log-file', default=None, help='Also log (full format) to this file')
    ap.add_argument('--stdout', action='store_true', help='Print the rendered file instead of writing it')
    ap.add_argument('--summary', action='store_true', help='Print a per-file summary table')
    ap.add_argument('--list-presets', action='store_true', help='List available presets and exit')
    ap.add_argument('--version', action='version', version=f'%(prog)s {get_version()}')
    return ap


def _sources(args: argparse.Namespace) -> list[PatternSource]:
    if args.pattern is not None:
        return [CustomPattern(args.pattern)]
    return [PresetPattern(tag) for tag in args.preset or []]


def render_presets(console: Console, extra: dict[str, list[str]] | None = None) -> None:
    table = Table(title="envyoink presets")
    table.add_column("Preset")
    table.add_column("Pattern(s)")
    for name, patterns in preset_table(extra).items():
        table.add_row(name, "\n".join(patterns))
    console.print(table)


def render_summary(console: Console, report: ScanReport) -> None:
    table = Table(title="envyoink scan", expand=False)
    table.add_column("File")
    table.add_column("Names", justify="right")
    for path in sorted(report.per_file):
        table.add_row(str(path), str(report.per_file[path]))
    for err in report.errors:
        table.add_row(f"[red]{err.path}[/red]", f"[red]{err.kind}[/red]")
    console.print(table)
    console.print(
        f"files={report.files_scanned} matches={report.matches} "
        f"unique={len(report.names)} skipped={len(report.errors)}"
    )
    for w in report.warnings:
        console.print(f"[yellow]warning:[/yellow] {w}")


def main(argv: Sequence[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    setup_logging(args.log_level or env_str('ENVYOINK_LOG_LEVEL') or 'INFO', log_file=args.log_file)

    if args.list_presets:
        try:
            config_path = args.config or env_str('ENVYOINK_CONFIG')
            extra = load_config_file(config_path).get('presets') if config_path else None
            render_presets(Console(), extra)
        except ConfigError as e:
            logger.error("Configuration error: %s", e)
            return EXIT_CONFIG
        return EXIT_OK

    try:
        settings = load_settings(
            workspace_dir=args.workspace,
            output_dir=args.out,
            example_file=args.example_file,
            sources=_sources(args),
            on_error=args.on_error,
            exclude=args.exclude,
            metrics_file=args.metrics_file,
            log_level=args.log_level,
            config_path=args.config,
        )
        # the config file may carry its own log_level
        setup_logging(settings.log_level, log_file=args.log_file)
        patterns = resolve_patterns(settings.sources, settings.extra_presets)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG

    metrics = ScanMetrics()
    try:
        report = run_scan(
            settings.workspace_dir,
            patterns,
            on_error=settings.on_error,
            exclude=settings.exclude,
            metrics=metrics,
        )
    except ExtractError as e:
        logger.error("Extraction failed: %s", e)
        return EXIT_EXTRACT

    text = render(report.names)
    try:
        if args.stdout:
            sys.stdout.write(text)
        else:
            dest = write_output(settings.output_path, text)
            logger.info("Wrote %d name(s) to %s", len(report.names), dest)
        if settings.metrics_file is not None:
            metrics.write_textfile(settings.metrics_file)
    except OutputError as e:
        logger.error("%s", e)
        return EXIT_OUTPUT

    if args.summary:
        render_summary(Console(stderr=True), report)
    return EXIT_OK


if __name__ == '__main__':  # pragma: no cover
    raise SystemExit(main())
