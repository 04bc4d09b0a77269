"""
Build the white wine EDA report as a static HTML document.

Usage:
    python build_report.py
    python build_report.py --data wineQualityWhites.csv --output reports/wine.html
    python build_report.py --excel reports/wine_stats.xlsx --offline --verbose
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import config
from utils import load_wine_data, stats_to_excel
from eda_utils import run_eda_for_all_columns
from report_utils import build_report_sections, write_html_report

logger = logging.getLogger("build_report")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render the white wine quality EDA report to HTML."
    )
    parser.add_argument(
        "--data",
        default=config.DATA_PATH,
        help="Wine table, comma or semicolon delimited (default: %(default)s)",
    )
    parser.add_argument(
        "--output",
        default=os.path.join(config.OUTPUT_DIR, config.REPORT_FILENAME),
        help="HTML file to write (default: %(default)s)",
    )
    parser.add_argument(
        "--excel",
        default=None,
        help="Also write per-attribute statistics to this .xlsx workbook",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Embed plotly.js in the document instead of linking the CDN",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s,%(levelname)s,%(name)s,%(message)s",
    )

    try:
        df = load_wine_data(args.data)
    except FileNotFoundError as e:
        logger.error("Input not found: %s", e)
        return 1
    except ValueError as e:
        logger.error("Input rejected: %s", e)
        return 1

    sections = build_report_sections(df)
    output = write_html_report(
        sections,
        args.output,
        include_plotlyjs=True if args.offline else "cdn",
    )
    print(f"Report: {output}")

    if args.excel:
        excel_path = Path(args.excel)
        excel_path.parent.mkdir(parents=True, exist_ok=True)
        buf = stats_to_excel(run_eda_for_all_columns(df), df)
        excel_path.write_bytes(buf.getvalue())
        logger.info("Statistics workbook written to %s", excel_path)
        print(f"Workbook: {excel_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
