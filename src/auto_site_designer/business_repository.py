from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from .models.business import BusinessDataContext


class BusinessContextProvider(Protocol):
    def get(self, site_id: str) -> BusinessDataContext:
        ...


class LocalBusinessContextRepository:
    """Reads ``<site_id>.json`` snapshots from a directory."""

    def __init__(self, *, base_path: Path) -> None:
        self._base_path = base_path

    def get(self, site_id: str) -> BusinessDataContext:
        file_path = self._base_path / f"{site_id.replace('/', '-')}.json"
        if not file_path.exists():
            raise FileNotFoundError(f"Business data snapshot not found: {file_path}")
        with file_path.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
        return BusinessDataContext.model_validate(data)


__all__ = ["BusinessContextProvider", "LocalBusinessContextRepository"]
