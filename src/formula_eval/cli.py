"""Command-line entry point for evaluating formula catalogs."""

from __future__ import annotations

import argparse
import json
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Iterable

from formula_eval.batch import evaluate_frame
from formula_eval.config import Settings
from formula_eval.errors import FormulaError, FormulaErrorCode
from formula_eval.evaluator import evaluate_catalog
from formula_eval.families import FAMILIES, get_family
from formula_eval.loader import load_bindings, load_catalog, load_frame, parse_assignments
from formula_eval.models import Formula
from formula_eval.parser import render

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evaluate polynomial formula catalogs")
    parser.add_argument("catalog", nargs="?", help="Path to catalog file (json or yaml)")
    parser.add_argument(
        "--family",
        action="append",
        default=None,
        choices=sorted(FAMILIES),
        help="Include a built-in formula family (may be repeated)",
    )
    parser.add_argument("--bindings", help="JSON/YAML file mapping variable names to numbers")
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=None,
        metavar="NAME=VALUE",
        help="Bind a single variable (may be repeated; overrides --bindings)",
    )
    parser.add_argument(
        "--formula",
        action="append",
        default=None,
        help="Formula name to evaluate (may be repeated; default all)",
    )
    parser.add_argument("--frame", help="CSV of bindings, one row per evaluation")
    parser.add_argument("--out", help="Optional output path (json, or csv with --frame)")
    parser.add_argument("--show", action="store_true", help="Print selected formulas as text")
    parser.add_argument("--log-level", help="Logging level (default from FORMULA_EVAL_LOG_LEVEL)")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env(log_level=args.log_level)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    catalog = _build_catalog(args.catalog or settings.catalog_path, args.family)
    names = args.formula or list(catalog)
    unknown = [name for name in names if name not in catalog]
    if unknown:
        raise FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": "unknown formula", "names": unknown},
        )

    if args.show:
        for name in names:
            print(f"{name}: {render(catalog[name])}")

    if args.frame:
        frame = load_frame(args.frame)
        logger.debug("evaluating %d formulas over %d rows", len(names), len(frame))
        results = evaluate_frame(catalog, frame, names)
        if args.out:
            results.to_csv(args.out, index=False)
        else:
            print(results.to_string(index=False))
        return 0

    bindings: dict[str, float] = {}
    if args.bindings:
        bindings.update(load_bindings(args.bindings))
    if args.assignments:
        bindings.update(parse_assignments(args.assignments))

    if not bindings and args.show:
        return 0

    values = evaluate_catalog(catalog, bindings, names)
    if args.out:
        Path(args.out).write_text(json.dumps(values, indent=2) + "\n", encoding="utf-8")
    else:
        for name, value in values.items():
            print(f"{name} = {value!r}")
    return 0


def _build_catalog(
    catalog_path: str | Path | None,
    families: list[str] | None,
) -> "OrderedDict[str, Formula]":
    catalog: OrderedDict[str, Formula] = OrderedDict()
    for family in families or []:
        catalog.update(get_family(family))
    if catalog_path:
        catalog.update(load_catalog(catalog_path))
    if not catalog:
        raise FormulaError(
            FormulaErrorCode.INVALID_CATALOG,
            ctx={"error": "no catalog given; pass a path, --family, or set FORMULA_EVAL_CATALOG"},
        )
    return catalog


def entrypoint() -> None:  # pragma: no cover - console entry
    try:
        raise SystemExit(main())
    except FormulaError as exc:  # pragma: no cover - console behavior
        raise SystemExit(f"error: {exc}")
