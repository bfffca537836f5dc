"""
Program registry.
Resolves which GFCR programs to include in a run: a hand-maintained
programs.json when present, otherwise every GFCR project visible to the token.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from .config import PROGRAMS_FILE

logger = logging.getLogger(__name__)


class ProgramRegistry:
    """Holds the programs for one run as [{"id", "name"}]."""

    def __init__(self, client=None, registry_path: Optional[Path] = None):
        self.path = registry_path or PROGRAMS_FILE
        self.client = client
        self.data = self._load()

    def _load(self) -> List[dict]:
        if self.path.exists():
            with open(self.path, "r") as f:
                data = json.load(f)
            logger.info(f"Loaded {len(data)} programs from {self.path}")
            return data
        if self.client is None:
            logger.warning(f"No program file at {self.path} and no client to query")
            return []
        logger.info("No program file found, querying the platform")
        return self.client.list_projects()

    def get_ids(self) -> List[str]:
        return [p["id"] for p in self.data]

    def get_names(self) -> List[str]:
        return [p["name"] for p in self.data]

    def __len__(self) -> int:
        return len(self.data)
