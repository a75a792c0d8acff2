"""
Maps Business Crawler - CLI Runner

Usage:
  python -m mbc.run --category zahnarzt --postal-code 44388 --out ./out

  Missing --category / --postal-code are asked for interactively.

Dry run (validate only):
  python -m mbc.run -k zahnarzt -p 44388 --config config/example.yaml --dry-run

Exit codes:
  0 - success (including a search with zero results)
  1 - config error (file missing or invalid YAML/values)
  2 - input error (invalid category or postal code)
  3 - processing error (navigation failure, export failure)
"""
from __future__ import annotations

import argparse
import platform
import sys
import time
from pathlib import Path
from typing import Callable, Optional

import psutil
import yaml
from pydantic import ValidationError

from mapscrawl.config import CrawlerSettings
from mapscrawl.ops_logger import OpsLogger
from mapscrawl.pipeline.drivers import BrowserSession, NavigationError
from mapscrawl.pipeline.export import ResultExporter, format_record
from mapscrawl.pipeline.search import MapsSearchPipeline
from mapscrawl.schemas import SearchQuery


def load_settings(config_path: Optional[Path]) -> CrawlerSettings:
    if config_path is None:
        return CrawlerSettings()
    if not config_path.exists() or not config_path.is_file():
        print(f"Config error: file not found: {config_path}", file=sys.stderr)
        sys.exit(1)
    try:
        return CrawlerSettings.from_yaml(config_path)
    except (yaml.YAMLError, ValidationError, ValueError) as e:
        print(f"Config error: invalid config in {config_path}: {e}", file=sys.stderr)
        sys.exit(1)


def collect_query(
    category: Optional[str],
    postal_code: Optional[str],
    prompt: Callable[[str], str] = input,
) -> SearchQuery:
    if category is None:
        category = prompt("Business category (e.g. restaurants, zahnarzt, apotheke): ")
    if postal_code is None:
        postal_code = prompt("Postal code (e.g. 44388, 10115): ")
    return SearchQuery(category=category, postal_code=postal_code)


def ensure_out_dir(out_dir: Path) -> None:
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        test_file = out_dir / ".write_test"
        test_file.write_text("ok", encoding="utf-8")
        test_file.unlink(missing_ok=True)
    except OSError as e:
        print(f"Output error: cannot write to {out_dir}: {e}", file=sys.stderr)
        sys.exit(3)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mbc.run", description="Google Maps business crawler")
    parser.add_argument("--category", "-k", default=None, help="Business category to search for")
    parser.add_argument("--postal-code", "-p", default=None, help="Five digit postal code")
    parser.add_argument("--config", "-c", default=None, help="Path to YAML config file (optional)")
    parser.add_argument("--out", "-o", default=".", help="Output directory (default: current directory)")
    parser.add_argument("--output-name", default=None, help="JSON output filename (default from config)")
    parser.add_argument("--csv", action="store_true", default=None, help="Also write a CSV next to the JSON")
    parser.add_argument("--dry-run", action="store_true", help="Validate inputs/config and exit")
    headless = parser.add_mutually_exclusive_group()
    headless.add_argument("--headless", dest="headless", action="store_true", default=None, help="Run the browser headless")
    headless.add_argument("--headed", dest="headless", action="store_false", help="Show the browser window")
    parser.set_defaults(headless=None)
    parser.add_argument("--max-scroll-attempts", type=int, default=None, help="Override scroll.max_attempts")
    parser.add_argument("--nav-timeout", type=int, default=None, help="Override navigation timeout (ms)")
    parser.add_argument("--ops-log", default=None, help="Path to ops JSONL log file (default: <out>/ops.log)")
    parser.add_argument("--ops-stdout", action="store_true", help="Also mirror ops JSON to stdout")
    return parser


def main(argv: list[str] | None = None, *, session_factory=BrowserSession, prompt: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)

    settings = load_settings(Path(args.config) if args.config else None)
    try:
        settings = settings.with_overrides({
            "browser": {"headless": args.headless},
            "scroll": {"max_attempts": args.max_scroll_attempts},
            "navigation": {"timeout_ms": args.nav_timeout},
            "output": {"filename": args.output_name, "csv": args.csv},
        })
    except ValidationError as e:
        print(f"Config error: invalid override: {e}", file=sys.stderr)
        return 1

    print("\n=== Google Maps Crawler ===\n")
    try:
        query = collect_query(args.category, args.postal_code, prompt=prompt)
    except ValidationError as e:
        for err in e.errors():
            print(f"Input error: {err.get('msg')}", file=sys.stderr)
        return 2
    except EOFError:
        print("Input error: no input provided", file=sys.stderr)
        return 2

    out_dir = Path(args.out)
    ensure_out_dir(out_dir)

    if args.dry_run:
        print("✅ Dry-run validation passed")
        print(f" - Query: {query.text}")
        print(f" - Config: {args.config or '(defaults)'}")
        print(f" - Output dir: {out_dir}")
        print(f" - Headless: {settings.browser.headless}, max scroll attempts: {settings.scroll.max_attempts}")
        return 0

    ops_log_path = Path(args.ops_log) if args.ops_log else (out_dir / "ops.log")
    ops_logger = OpsLogger(ops_log_path, also_stdout=bool(args.ops_stdout))

    print(f'Starting search for "{query.category}" in "{query.postal_code}"...\n')
    proc_start = time.perf_counter()
    try:
        with session_factory(settings.browser) as driver:
            pipeline = MapsSearchPipeline(driver, settings, ops_logger=ops_logger)
            result = pipeline.search(query)
    except NavigationError as e:
        print(f"Search failed: {e}", file=sys.stderr)
        return 3
    except Exception as e:
        print(f"Search failed: {e}", file=sys.stderr)
        return 3

    records = result.records()
    print("\n=== RESULTS ===")
    for i, record in enumerate(records, 1):
        print(format_record(record, i))

    exporter = ResultExporter(output_dir=out_dir, indent=settings.output.indent)
    try:
        exporter.to_json(records, filename=settings.output.filename)
        if settings.output.csv:
            exporter.to_csv(records, filename=Path(settings.output.filename).with_suffix(".csv").name)
    except OSError as e:
        print(f"Export error: {e}", file=sys.stderr)
        return 3

    wall_s = max(0.0, time.perf_counter() - proc_start)
    proc = psutil.Process()
    with proc.oneshot():
        rss_mb = round(proc.memory_info().rss / (1024 * 1024), 1)
        cpu_pct = round(proc.cpu_percent(interval=None), 1)
    ops_logger.emit({
        "mbc_ops": 1,
        "summary": True,
        "total_businesses": len(records),
        "with_phone": sum(1 for r in records if r.phone),
        "durations": {"wall_s": round(wall_s, 2)},
        "resources": {"cpu_pct": cpu_pct, "rss_mb": rss_mb},
        "python": platform.python_version(),
        "host": {"platform": platform.system(), "release": platform.release(), "machine": platform.machine()},
    })
    print("🏁 Done.")
    print(f"   Total businesses: {len(records)}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
