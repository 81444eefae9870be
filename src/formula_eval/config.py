"""Environment-driven settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from formula_eval.errors import FormulaError, FormulaErrorCode

CATALOG_ENV = "FORMULA_EVAL_CATALOG"
LOG_LEVEL_ENV = "FORMULA_EVAL_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def resolve_log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise FormulaError(
            FormulaErrorCode.INVALID_CONFIG,
            ctx={"reason": "unknown_log_level", "value": name},
        )
    return level


@dataclass(frozen=True)
class Settings:
    catalog_path: Optional[Path] = None
    log_level: int = logging.WARNING

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        log_level: str | None = None,
    ) -> "Settings":
        """Read settings from ``environ``; an explicit ``log_level`` wins over the env."""
        env = os.environ if environ is None else environ
        catalog = env.get(CATALOG_ENV)
        level = log_level or env.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL
        return cls(
            catalog_path=Path(catalog) if catalog else None,
            log_level=resolve_log_level(level),
        )
