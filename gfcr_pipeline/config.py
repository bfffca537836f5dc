"""
Configuration and path management for the GFCR progress pipeline.
All paths are relative to the project root (one level above gfcr_pipeline/).
"""

from pathlib import Path

from dotenv import load_dotenv

# Project root: one level up from gfcr_pipeline/
_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = _THIS_DIR.parent

# Credentials may live in a .env file at the project root
load_dotenv(PROJECT_ROOT / ".env")

# ── Output ────────────────────────────────────────────────────────────────────

OUTPUTS_DIR = PROJECT_ROOT / "outputs"
SUMMARY_FILE = OUTPUTS_DIR / "gfcr_progress_summary.csv"

# Optional hand-maintained program list; when absent the API is queried
PROGRAMS_FILE = _THIS_DIR / "programs.json"

# ── HTTP settings ─────────────────────────────────────────────────────────────

API_BASE_URL = "https://api.datamermaid.org/v1"
PROJECTS_ENDPOINT = "projects/"
REPORTS_ENDPOINT = "reports/"
GFCR_REPORT_TYPE = "gfcr"
PAGE_SIZE = 5000
REQUEST_TIMEOUT = 120
REQUEST_HEADERS = {
    "User-Agent": "gfcr-pipeline (GFCR progress reporting)"
}
API_TOKEN_ENV = "MERMAID_API_TOKEN"

# ── Indicator sheets in the GFCR export ──────────────────────────────────────

SHEET_F1 = "F1"
SHEET_F2 = "F2"
SHEET_F6 = "F6"
SHEET_F7 = "F7"
SHEET_BUSINESSES = "BusinessesFinanceSolutions"
SHEET_INVESTMENTS = "Investments"
INDICATOR_SHEETS = [
    SHEET_F1,
    SHEET_F2,
    SHEET_F6,
    SHEET_F7,
    SHEET_BUSINESSES,
    SHEET_INVESTMENTS,
]

# ── Column names ─────────────────────────────────────────────────────────────

COL_PROJECT = "Project"
COL_TITLE = "Title"
COL_REPORTING_DATE = "Reporting Date"
COL_DATA_TYPE = "Data Type"
COL_INDICATOR = "Indicator Name"
COL_VALUE = "Value"
COL_AREA = "Area (km2)"
COL_INVESTMENT_AMOUNT = "Investment Amount"
COL_INVESTMENT_SOURCE = "Investment Source"
COL_INVESTMENT_TYPE = "Investment Type"
COL_BUSINESS = "Business / Finance Solution"
COL_SECTOR = "Sector"
COL_FINANCE_MECHANISM = "Sustainable Finance Mechanisms"

REPORT = "Report"
TARGET = "Target"

# Summary table header, in output order
SUMMARY_COLUMNS = ["Response", "Reported", "Target", "Progress"]

# ── Cleaning rules ───────────────────────────────────────────────────────────

# Synthetic report round left in the platform by the onboarding walkthrough
EXCLUDED_TITLES = ("Test",)

# Areas are stored in km2 upstream and reported in hectares
KM2_TO_HA = 100.0

# Only public and private co-finance counts towards leveraged finance
LEVERAGED_SOURCES = ("Public", "Private")

