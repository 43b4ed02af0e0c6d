"""
Slug Store

Maps slugs to destination URLs. Loaded once from a JSON file at startup
and never modified afterwards, so lookups need no locking.
"""

import json
import logging
from typing import Dict, Mapping, Optional

from redirector.core.exceptions import SlugStoreError

logger = logging.getLogger(__name__)


class SlugStore:
    """Read-only slug -> URL lookup."""

    def __init__(self, urls: Optional[Mapping[str, str]] = None):
        self._urls: Dict[str, str] = dict(urls or {})

    @classmethod
    def load(cls, path: str) -> "SlugStore":
        """
        Load slugs from a JSON object of the form {"slug": "https://..."}.

        Raises:
            SlugStoreError: If the file is unreadable or not a string map
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise SlugStoreError(path, e) from e

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise SlugStoreError(path, ValueError("expected a JSON object of strings"))

        logger.info(f"Loaded {len(data)} slugs from {path}")
        return cls(data)

    def get(self, slug: str) -> Optional[str]:
        return self._urls.get(slug)

    def __len__(self) -> int:
        return len(self._urls)
