"""Catalog and binding loaders."""

from __future__ import annotations

import json
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd
import yaml

from formula_eval.errors import FormulaError, FormulaErrorCode
from formula_eval.families import get_family
from formula_eval.models import Formula, Term
from formula_eval.parser import parse_formula

logger = logging.getLogger(__name__)


def _load_mapping(data: Any, *, path: Path, code: FormulaErrorCode) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        return data
    raise FormulaError(
        code,
        ctx={"path": str(path), "error": "top-level must be mapping"},
    )


def _parse_file(path: Path, *, code: FormulaErrorCode) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FormulaError(code, ctx={"path": str(path), "error": "unreadable file"}, cause=exc) from exc

    if suffix in {".yaml", ".yml"}:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise FormulaError(code, ctx={"path": str(path), "error": "invalid YAML"}, cause=exc) from exc
        return _load_mapping(data or {}, path=path, code=code)
    if suffix == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FormulaError(code, ctx={"path": str(path), "error": "invalid JSON"}, cause=exc) from exc
        return _load_mapping(data, path=path, code=code)
    raise FormulaError(
        code,
        ctx={"path": str(path), "error": "unsupported file extension"},
    )


def load_catalog(path: Path | str) -> "OrderedDict[str, Formula]":
    """Load a formula catalog file (JSON or YAML)."""

    catalog_path = Path(path)
    data = _parse_file(catalog_path, code=FormulaErrorCode.INVALID_CATALOG)
    catalog = parse_catalog_mapping(data, source=catalog_path)
    logger.debug("loaded %d formulas from %s", len(catalog), catalog_path)
    return catalog


def parse_catalog_mapping(
    data: Mapping[str, Any],
    *,
    source: Path | str | None = None,
) -> "OrderedDict[str, Formula]":
    """Build a catalog from an already-decoded mapping."""

    where = str(source) if source is not None else "<memory>"

    unknown_keys = sorted(map(str, set(data) - {"include", "formulas"}))
    if unknown_keys:
        raise FormulaError(
            FormulaErrorCode.INVALID_CATALOG,
            ctx={"path": where, "error": "unsupported catalog keys", "keys": unknown_keys},
        )

    catalog: OrderedDict[str, Formula] = OrderedDict()

    include = data.get("include", [])
    if isinstance(include, str):
        include = [include]
    if not isinstance(include, list):
        raise FormulaError(
            FormulaErrorCode.INVALID_CATALOG,
            ctx={"path": where, "error": "include must be list of family names"},
        )
    for family in include:
        if not isinstance(family, str):
            raise FormulaError(
                FormulaErrorCode.INVALID_CATALOG,
                ctx={"path": where, "error": "include entries must be family names", "value": family},
            )
        try:
            catalog.update(get_family(family))
        except FormulaError as exc:
            raise FormulaError(
                FormulaErrorCode.INVALID_CATALOG,
                ctx={"path": where, "error": "unknown family", "family": family},
                cause=exc,
            ) from exc

    formulas = data.get("formulas", {})
    if formulas is None:
        formulas = {}
    if not isinstance(formulas, Mapping):
        raise FormulaError(
            FormulaErrorCode.INVALID_CATALOG,
            ctx={"path": where, "error": "formulas must be mapping"},
        )

    for name, payload in formulas.items():
        if not isinstance(name, str) or not name:
            raise FormulaError(
                FormulaErrorCode.INVALID_CATALOG,
                ctx={"path": where, "error": "formula name must be non-empty string"},
            )
        if name in catalog:
            logger.info("catalog %s overrides built-in formula %s", where, name)
        catalog[name] = _parse_formula_entry(name, payload, where=where)

    if not catalog:
        raise FormulaError(
            FormulaErrorCode.INVALID_CATALOG,
            ctx={"path": where, "error": "catalog defines no formulas"},
        )
    return catalog


def _parse_formula_entry(name: str, payload: Any, *, where: str) -> Formula:
    try:
        if isinstance(payload, str):
            return parse_formula(payload)
        if isinstance(payload, Mapping):
            return _parse_structured(payload)
    except FormulaError as exc:
        raise FormulaError(
            FormulaErrorCode.INVALID_CATALOG,
            ctx={"path": where, "formula": name, "error": str(exc)},
            cause=exc,
        ) from exc
    raise FormulaError(
        FormulaErrorCode.INVALID_CATALOG,
        ctx={"path": where, "formula": name, "error": "formula must be string or mapping"},
    )


_FORMULA_KEYS = {"terms", "offset"}
_TERM_KEYS = {"coefficient", "base", "exponent"}


def _parse_structured(payload: Mapping[str, Any]) -> Formula:
    unknown = sorted(map(str, set(payload) - _FORMULA_KEYS))
    if unknown:
        raise FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": "unsupported formula keys", "keys": unknown},
        )
    raw_terms = payload.get("terms", [])
    if not isinstance(raw_terms, list):
        raise FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": "terms must be list"},
        )

    terms: list[Term] = []
    for index, raw in enumerate(raw_terms):
        if not isinstance(raw, Mapping):
            raise FormulaError(
                FormulaErrorCode.INVALID_FORMULA,
                ctx={"error": "term must be mapping", "term": index},
            )
        unknown = sorted(map(str, set(raw) - _TERM_KEYS))
        if unknown:
            raise FormulaError(
                FormulaErrorCode.INVALID_FORMULA,
                ctx={"error": "unsupported term keys", "keys": unknown, "term": index},
            )
        if "base" not in raw:
            raise FormulaError(
                FormulaErrorCode.INVALID_FORMULA,
                ctx={"error": "term.base required", "term": index},
            )
        terms.append(
            Term(
                coefficient=raw.get("coefficient"),
                base=raw["base"],
                exponent=raw.get("exponent", 1),
            )
        )
    return Formula(terms=tuple(terms), offset=payload.get("offset"))


def load_bindings(path: Path | str) -> dict[str, Any]:
    """Load a ``name -> number`` mapping from JSON or YAML."""

    bindings_path = Path(path)
    data = _parse_file(bindings_path, code=FormulaErrorCode.INVALID_BINDING)
    bindings = dict(data)
    for name, value in bindings.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise FormulaError(
                FormulaErrorCode.INVALID_BINDING,
                ctx={"path": str(bindings_path), "variable": name, "error": "value must be number"},
            )
    return bindings


def parse_assignments(pairs: Iterable[str]) -> dict[str, float]:
    """Parse ``NAME=VALUE`` strings into bindings."""

    bindings: dict[str, float] = {}
    for pair in pairs:
        if "=" not in pair:
            raise FormulaError(
                FormulaErrorCode.INVALID_BINDING,
                ctx={"error": "assignment must be NAME=VALUE", "value": pair},
            )
        name, raw_value = pair.split("=", 1)
        name = name.strip()
        if not name:
            raise FormulaError(
                FormulaErrorCode.INVALID_BINDING,
                ctx={"error": "assignment name missing", "value": pair},
            )
        try:
            bindings[name] = float(raw_value)
        except ValueError as exc:
            raise FormulaError(
                FormulaErrorCode.INVALID_BINDING,
                ctx={"error": "assignment value must be number", "value": pair},
                cause=exc,
            ) from exc
    return bindings


def load_frame(path: Path | str) -> pd.DataFrame:
    """Read a CSV of bindings, one row per evaluation."""

    frame_path = Path(path)
    try:
        return pd.read_csv(frame_path)
    except OSError as exc:
        raise FormulaError(
            FormulaErrorCode.INVALID_BINDING,
            ctx={"path": str(frame_path), "error": "unreadable file"},
            cause=exc,
        ) from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise FormulaError(
            FormulaErrorCode.INVALID_BINDING,
            ctx={"path": str(frame_path), "error": "invalid CSV", "pandas_error": str(exc)},
            cause=exc,
        ) from exc
