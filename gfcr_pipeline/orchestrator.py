"""
Orchestrator - end-to-end GFCR progress run.
Fetches the GFCR export for all programs, screens out programs that never
reported, aggregates the six headline metrics and writes the summary CSV.

Usage:
    cd gfcr-pipeline
    python -m gfcr_pipeline.orchestrator
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .client import GFCRClient, load_report_file
from .config import SUMMARY_FILE
from .metrics import aggregate_all
from .normalize import screen_programs
from .registry import ProgramRegistry
from .summary import display_summary, export_summary, summarize

logger = logging.getLogger(__name__)


def fetch_tables(client: Optional[GFCRClient] = None,
                 registry: Optional[ProgramRegistry] = None) -> Dict[str, pd.DataFrame]:
    """Download the indicator sheets for every registered program."""
    client = client or GFCRClient()
    registry = registry or ProgramRegistry(client=client)
    logger.info(f"Registry has {len(registry)} programs: {registry.get_names()}")
    return client.fetch_report(registry.get_ids())


def build_summary(tables: Dict[str, pd.DataFrame]) -> pd.DataFrame:
    """Screen programs and aggregate all metrics into the summary table."""
    tables, _ = screen_programs(tables)
    return summarize(aggregate_all(tables))


def run_pipeline(tables: Optional[Dict[str, pd.DataFrame]] = None,
                 report_file: Optional[Path] = None,
                 output_path: Optional[Path] = None,
                 show: bool = True) -> pd.DataFrame:
    """Run fetch -> screen -> aggregate -> export.

    Indicator tables may be passed in directly or read from a downloaded
    export workbook; otherwise they are fetched from the platform.
    """
    logger.info("=" * 60)
    logger.info("GFCR PROGRESS PIPELINE")
    logger.info("=" * 60)

    if tables is None:
        if report_file is not None:
            tables = load_report_file(report_file)
        else:
            tables = fetch_tables()

    summary = build_summary(tables)
    path = export_summary(summary, output_path or SUMMARY_FILE)

    _print_summary(summary, path)
    if show:
        display_summary(summary)
    return summary


def _print_summary(summary: pd.DataFrame, path: Path):
    logger.info("\n" + "=" * 60)
    logger.info("PIPELINE SUMMARY")
    logger.info("=" * 60)
    for _, row in summary.iterrows():
        progress = "n/a" if pd.isna(row["Progress"]) else f"{row['Progress']:.1f}%"
        logger.info(
            f"  {row['Response']}: {row['Reported']:,.2f} of {row['Target']:,.2f} ({progress})"
        )
    logger.info(f"Output: {path}")
    logger.info("=" * 60)


def main():
    """Entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    run_pipeline()


if __name__ == "__main__":
    main()
