#!/usr/bin/env python3
"""
Command line entry point.

    jq2react convert app.js [-o App.jsx]
    jq2react batch ./legacy [-o ./react-components]
    jq2react analyze ./legacy
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from jq2react.config import settings, configure_logging
from jq2react.services.conversion import (
    BatchSummary,
    ConversionError,
    JQueryToReactConverter,
    SourceAnalysis,
    analyze_batch,
    convert_batch,
)

logger = logging.getLogger(__name__)


def print_analysis(name: str, analysis: SourceAnalysis):
    print(name)
    print(f"  Selectors: {analysis.selectors}")
    print(f"  Event Handlers: {analysis.event_handlers}")
    print(f"  DOM Manipulation: {analysis.mutations}")
    print(f"  AJAX Calls: {analysis.remote_calls}")
    print(f"  Animations: {analysis.animations}")
    print(f"  CSS Manipulation: {analysis.style_mutations}")
    print(f"  Complexity: {analysis.complexity.value} ({analysis.score})")
    print()


def print_summary(summary: BatchSummary, show_files: bool = True):
    if show_files:
        for report in summary.files:
            print_analysis(report.path, report.analysis)

    totals = summary.totals
    print("=" * 60)
    print("Totals")
    print(f"  Total Files: {summary.total_files}")
    print(f"  Total Selectors: {totals.selectors}")
    print(f"  Total Event Handlers: {totals.event_handlers}")
    print(f"  Total DOM Manipulations: {totals.mutations}")
    print(f"  Total AJAX Calls: {totals.remote_calls}")
    print(f"  Total Animations: {totals.animations}")
    print(f"  Total CSS Manipulations: {totals.style_mutations}")
    print(f"  Overall Complexity: {totals.complexity.value} ({totals.score})")
    if summary.output_dir is not None:
        print(f"  Converted: {len(summary.converted)}")
        print(f"  Failed: {len(summary.failed)}")
    print("=" * 60)


async def run_convert(source: Path, output: Optional[Path]) -> int:
    print("=" * 60)
    print("jQuery to React Converter")
    print("=" * 60)
    print(f"Input: {source}")

    try:
        result = await JQueryToReactConverter().convert_file(source, output)
    except ConversionError as e:
        print(f"Conversion failed: {e.message}")
        return 1

    snapshot = result.snapshot
    print(f"Output: {result.output_path}")
    print()
    print(f"  Component Name: {result.component_name}")
    print(f"  State Variables: {len(snapshot.states)}")
    print(f"  Refs: {len(snapshot.references)}")
    print(f"  Event Handlers: {len(snapshot.handlers)}")
    print(f"  Functions: {len(snapshot.functions)}")
    print(f"  Effects: {len(snapshot.effects)}")
    print(f"  AJAX Calls: {len(snapshot.remote_calls)}")
    print(f"  Animations: {len(snapshot.animations)}")
    for path in result.written[1:]:
        print(f"  Also wrote: {path}")
    for warning in result.warnings:
        print(f"  Warning: {warning}")
    if snapshot.animations:
        print()
        print("Animations detected - they need CSS or an animation library")
    print()
    print("Next steps: review the component, add JSX structure, address the TODO comments")
    return 0


async def run_batch(root: Path, output: Optional[Path]) -> int:
    output = output or Path(settings.OUTPUT_DIR)
    print("=" * 60)
    print("Batch jQuery to React Conversion")
    print("=" * 60)
    print(f"Input Directory: {root}")
    print(f"Output Directory: {output}")
    print()

    try:
        summary = await convert_batch(root, output)
    except ConversionError as e:
        print(f"Batch conversion failed: {e.message}")
        return 1

    if not summary.files:
        print("No jQuery files found")
        return 0

    for report in summary.files:
        if report.error is not None:
            print(f"Failed: {report.path}: {report.error}")
        else:
            print(f"Converted: {report.path} -> {report.output}")
    print()
    print_summary(summary, show_files=False)
    return 1 if summary.failed else 0


async def run_analyze(root: Path) -> int:
    print("=" * 60)
    print("jQuery Files Analysis")
    print("=" * 60)
    print(f"Directory: {root}")
    print()

    try:
        summary = await analyze_batch(root)
    except ConversionError as e:
        print(f"Analysis failed: {e.message}")
        return 1

    if not summary.files:
        print("No jQuery files found")
        return 0

    print(f"Found {summary.total_files} file(s) with jQuery")
    print()
    print_summary(summary)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='jq2react',
        description='Convert jQuery scripts and pages to React function components'
    )
    parser.add_argument('--log-level', default=None, help=f'Logging level (default: {settings.LOG_LEVEL})')
    subparsers = parser.add_subparsers(dest='command', required=True)

    convert = subparsers.add_parser('convert', help='Convert a single .js or .html file')
    convert.add_argument('source', type=Path, help='Script or page to convert')
    convert.add_argument('--output', '-o', type=Path, default=None,
                         help=f'Component file to write (default: sibling {settings.COMPONENT_EXTENSION} file)')

    batch = subparsers.add_parser('batch', help='Convert every jQuery file under a directory')
    batch.add_argument('root', type=Path, nargs='?', default=Path('.'), help='Directory to convert')
    batch.add_argument('--output', '-o', type=Path, default=None,
                       help=f'Output directory (default: {settings.OUTPUT_DIR})')

    analyze = subparsers.add_parser('analyze', help='Report conversion effort for a directory')
    analyze.add_argument('root', type=Path, nargs='?', default=Path('.'), help='Directory to analyse')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == 'convert':
        return asyncio.run(run_convert(args.source, args.output))
    if args.command == 'batch':
        return asyncio.run(run_batch(args.root, args.output))
    return asyncio.run(run_analyze(args.root))


if __name__ == '__main__':
    sys.exit(main())
