"""
Reads the generated processes.json (recipe slug -> cooking process).
"""

import json
import logging
from pathlib import Path
from typing import Dict, List

from ..models.recipe import CookingProcess

log = logging.getLogger(__name__)


class ProcessNotFound(KeyError):
    pass


class ProcessLoader:
    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, dict]:
        if not self.path.exists():
            log.warning(f"No processes file at {self.path}")
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    @classmethod
    def parse(cls, raw: dict) -> CookingProcess:
        return CookingProcess.model_validate(raw)

    def slugs(self) -> List[str]:
        return sorted(self._read())

    def get(self, slug: str) -> CookingProcess:
        raw = self._read().get(slug)
        if raw is None:
            raise ProcessNotFound(slug)
        return self.parse(raw)
