#!/usr/bin/env python3
"""
Main CLI for the Fund Returns Analytics Engine.
Usage: python cli.py analyze [options]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from ingestion.config import load_sources_config, SourcesConfigError
from analysis.analysis_job import run_analysis
from reports.render_report import render_report, render_markdown_report


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Compute fund performance statistics from daily return CSVs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py analyze
  python cli.py analyze --config ./config/sources.yml --output ./data/metrics.json
  python cli.py analyze --report ./out/performance.md --verbose
        """
    )
    subparsers = parser.add_subparsers(dest='command')

    analyze = subparsers.add_parser('analyze', help='Load series and compute statistics')
    analyze.add_argument('--config',
                         help='Sources config file (default: $RETURNS_SOURCES_CONFIG or ./config/sources.yml)')
    analyze.add_argument('--output',
                         type=Path,
                         help='Write metrics JSON to this path')
    analyze.add_argument('--report',
                         type=Path,
                         help='Write Markdown report to this path')
    analyze.add_argument('--verbose', '-v',
                         action='store_true',
                         help='Debug logging')
    analyze.add_argument('--quiet', '-q',
                         action='store_true',
                         help='Minimal output (just success/failure)')

    args = parser.parse_args(argv)

    if args.command != 'analyze':
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        config = load_sources_config(args.config)
    except SourcesConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    result = run_analysis(config, output_path=args.output)

    if result['status'] != 'completed':
        print(f"ERROR: Analysis failed: {result['error_message']}", file=sys.stderr)
        return 1

    if args.report is not None:
        report_result = render_report(result, args.report)
        if report_result['status'] != 'completed':
            print(f"ERROR: Report rendering failed: {report_result['error_message']}", file=sys.stderr)
            return 1

    if args.quiet:
        print("Analysis complete")
        return 0

    print(render_markdown_report(result))

    if result['used_fallback']:
        print("WARNING: No return source was reachable - using inline sample data")
    if result['output_path']:
        print(f"Metrics: {result['output_path']}")
    if args.report is not None:
        print(f"Report: {args.report}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
