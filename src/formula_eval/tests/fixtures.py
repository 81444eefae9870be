from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml


@dataclass
class CatalogFiles:
    """Writes catalog and binding payloads into a temp directory."""

    base_dir: Path

    def json(self, payload: Mapping[str, Any], name: str = "catalog.json") -> Path:
        path = self.base_dir / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def yaml(self, payload: Mapping[str, Any], name: str = "catalog.yaml") -> Path:
        path = self.base_dir / name
        path.write_text(yaml.safe_dump(dict(payload), sort_keys=False), encoding="utf-8")
        return path
