"""Vectorized evaluation over a table of bindings.

Each row of the input frame is one binding; columns are variable names.
Results match :func:`formula_eval.evaluator.evaluate` applied row by row.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from formula_eval.errors import (
    FormulaError,
    FormulaErrorCode,
    InvalidExponent,
    MissingVariable,
)
from formula_eval.models import Catalog, Formula


def _column(frame: pd.DataFrame, name: str) -> np.ndarray:
    series = frame[name]
    if pd.api.types.is_bool_dtype(series) or not pd.api.types.is_numeric_dtype(series):
        raise FormulaError(
            FormulaErrorCode.INVALID_BINDING,
            ctx={"error": "column must be numeric", "variable": name, "dtype": str(series.dtype)},
        )
    return series.to_numpy(dtype=float)


def evaluate_formula_frame(formula: Formula, frame: pd.DataFrame) -> pd.Series:
    """Evaluate one formula for every row of ``frame``."""

    missing = [name for name in formula.variables() if name not in frame.columns]
    if missing:
        raise MissingVariable(missing[0], missing=missing)

    columns = {name: _column(frame, name) for name in formula.variables()}
    total = np.zeros(len(frame), dtype=float)
    with np.errstate(over="raise", invalid="ignore"):
        try:
            for term in formula.terms:
                base = columns[term.base]
                if term.exponent < 0:
                    zero_rows = np.flatnonzero(base == 0)
                    if zero_rows.size:
                        raise InvalidExponent(
                            term.base,
                            term.exponent,
                            rows=frame.index[zero_rows].tolist(),
                        )
                power = np.power(base, term.exponent)
                if term.coefficient is not None:
                    power = columns[term.coefficient] * power
                total = total + power
            if formula.offset is not None:
                total = total + columns[formula.offset]
        except FloatingPointError as exc:
            raise FormulaError(
                FormulaErrorCode.NUMERIC_OVERFLOW,
                ctx={"error": str(exc)},
                cause=exc,
            ) from exc
    return pd.Series(total, index=frame.index, dtype=float)


def evaluate_frame(
    catalog: Catalog,
    frame: pd.DataFrame,
    names: Iterable[str] | None = None,
) -> pd.DataFrame:
    """Evaluate catalog formulas for every row; one output column per formula."""

    selected = list(catalog) if names is None else list(names)
    unknown = [name for name in selected if name not in catalog]
    if unknown:
        raise FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": "unknown formula", "names": unknown},
        )
    results = {name: evaluate_formula_frame(catalog[name], frame) for name in selected}
    return pd.DataFrame(results, index=frame.index, columns=selected)
