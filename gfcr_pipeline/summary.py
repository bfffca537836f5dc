"""
Progress summary table: assembly, CSV export and terminal display.
"""

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd
from rich.console import Console
from rich.table import Table

from .config import SUMMARY_COLUMNS, SUMMARY_FILE
from .models import MetricSummary

logger = logging.getLogger(__name__)

# 0.1 + 0.2 km2 is written as 30 ha, whole numbers without a trailing ".0"
CSV_FLOAT_FORMAT = "%.15g"


def summarize(summaries: List[MetricSummary]) -> pd.DataFrame:
    """Build the Response/Reported/Target/Progress table in the given order.

    Progress is Reported / Target * 100, NaN where the target total is zero.
    """
    df = pd.DataFrame([s.to_dict() for s in summaries], columns=SUMMARY_COLUMNS)

    for response in df.loc[df["Progress"].isna(), "Response"]:
        logger.warning(f"{response}: target total is 0, progress left empty")
    return df


def export_summary(df: pd.DataFrame, path: Optional[Path] = None) -> Path:
    """Write the summary table as CSV, replacing any previous file."""
    path = Path(path or SUMMARY_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    df[SUMMARY_COLUMNS].to_csv(path, index=False, na_rep="", float_format=CSV_FLOAT_FORMAT)
    logger.info(f"Progress summary saved: {path} ({len(df)} rows)")
    return path


def _fmt(value: float, digits: int = 0) -> str:
    if pd.isna(value):
        return "-"
    return f"{value:,.{digits}f}"


def display_summary(df: pd.DataFrame, console: Optional[Console] = None, page: bool = True):
    """Render the summary table in the terminal, paged when interactive."""
    console = console or Console()
    table = Table(title="GFCR Progress Summary")
    table.add_column("Response", style="bold")
    table.add_column("Reported", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress (%)", justify="right")

    for _, row in df.iterrows():
        table.add_row(
            str(row["Response"]),
            _fmt(row["Reported"]),
            _fmt(row["Target"]),
            _fmt(row["Progress"], 1),
        )

    if page and console.is_terminal:
        with console.pager():
            console.print(table)
    else:
        console.print(table)
