"""
MERMAID API client for GFCR reporting data.
Lists GFCR-enabled projects and downloads the GFCR report export,
parsing each indicator sheet into a DataFrame.
"""

import hashlib
import io
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import requests

from .config import (
    API_BASE_URL,
    API_TOKEN_ENV,
    GFCR_REPORT_TYPE,
    INDICATOR_SHEETS,
    PAGE_SIZE,
    PROJECTS_ENDPOINT,
    REPORTS_ENDPOINT,
    REQUEST_HEADERS,
    REQUEST_TIMEOUT,
)
from .models import FetchError, MissingTokenError

logger = logging.getLogger(__name__)

# Project status the platform assigns to sandbox/test projects
TEST_PROJECT_STATUS = 90

# XLSX files are zip archives
_XLSX_MAGIC = b"PK\x03\x04"


def get_api_token() -> str:
    """
    Get the MERMAID API token from the environment.

    Raises:
        MissingTokenError: If MERMAID_API_TOKEN is not set
    """
    token = os.environ.get(API_TOKEN_ENV, "").strip()
    if not token:
        raise MissingTokenError(
            f"{API_TOKEN_ENV} not found. "
            "Add it to your environment or to a .env file at the project root."
        )
    return token


def _compute_sha256(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def parse_report(content: bytes) -> Dict[str, pd.DataFrame]:
    """Parse a GFCR export workbook into {sheet name: DataFrame}.

    Only the indicator sheets the pipeline aggregates are kept.
    """
    if not content[:4] == _XLSX_MAGIC:
        raise FetchError(f"GFCR export is not an XLSX workbook (starts with {content[:20]!r})")

    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None, engine="openpyxl")
    tables = {}
    for name in INDICATOR_SHEETS:
        if name not in sheets:
            logger.warning(f"Sheet '{name}' missing from GFCR export")
            continue
        tables[name] = sheets[name]
        logger.info(f"  {name}: {len(sheets[name])} rows")
    return tables


def load_report_file(path: Path) -> Dict[str, pd.DataFrame]:
    """Parse a GFCR export that was downloaded by hand."""
    path = Path(path)
    logger.info(f"Loading GFCR export from {path}")
    return parse_report(path.read_bytes())


class GFCRClient:
    """Thin wrapper over the MERMAID REST API."""

    def __init__(self, token: Optional[str] = None, base_url: str = API_BASE_URL,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token or get_api_token()
        self.session = session or requests.Session()
        self.session.headers.update(REQUEST_HEADERS)
        self.session.headers["Authorization"] = f"Bearer {self.token}"

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint}"

    def _get(self, url: str, params: Optional[dict] = None) -> dict:
        try:
            resp = self.session.get(url, params=params, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            logger.error(f"Request failed for {url}: {e}")
            raise FetchError(f"GET {url} failed: {e}") from e

    def list_projects(self) -> List[dict]:
        """Return GFCR-enabled, non-test projects as [{"id", "name"}]."""
        url = self._url(PROJECTS_ENDPOINT)
        params = {"limit": PAGE_SIZE, "showall": "true"}
        projects = []
        while url:
            page = self._get(url, params=params)
            projects.extend(page.get("results", []))
            url = page.get("next")
            params = None  # next link already carries the query string

        gfcr = [
            {"id": p["id"], "name": p["name"]}
            for p in projects
            if p.get("includes_gfcr") and p.get("status") != TEST_PROJECT_STATUS
        ]
        logger.info(f"Found {len(gfcr)} GFCR projects out of {len(projects)} visible projects")
        return gfcr

    def fetch_report(self, project_ids: List[str]) -> Dict[str, pd.DataFrame]:
        """Download the GFCR export for the given projects and parse it."""
        if not project_ids:
            raise FetchError("No project ids given for the GFCR export")

        url = self._url(REPORTS_ENDPOINT)
        payload = {"report_type": GFCR_REPORT_TYPE, "project_ids": list(project_ids)}
        logger.info(f"Requesting GFCR export for {len(project_ids)} projects")
        try:
            resp = self.session.post(url, json=payload, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to download GFCR export: {e}")
            raise FetchError(f"POST {url} failed: {e}") from e

        content = resp.content
        logger.info(f"Downloaded {len(content) / 1024:.1f} KB (sha256 {_compute_sha256(content)[:12]})")
        return parse_report(content)
