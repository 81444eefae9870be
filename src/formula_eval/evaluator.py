"""Numeric evaluation of formulas against variable bindings."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Iterable, Mapping

from formula_eval.errors import (
    FormulaError,
    FormulaErrorCode,
    InvalidExponent,
    MissingVariable,
)
from formula_eval.models import Catalog, Formula


def _overflow(exc: Exception | None = None, **ctx: Any) -> FormulaError:
    return FormulaError(FormulaErrorCode.NUMERIC_OVERFLOW, ctx=ctx, cause=exc)


def _lookup(bindings: Mapping[str, Any], name: str) -> float:
    value = bindings[name]
    if isinstance(value, bool) or not isinstance(value, Real):
        raise FormulaError(
            FormulaErrorCode.INVALID_BINDING,
            ctx={"error": "binding must be a real number", "variable": name, "value": value},
        )
    try:
        return float(value)
    except OverflowError as exc:
        raise _overflow(exc, error="binding out of float range", variable=name) from exc


def _power(base_name: str, base: float, exponent: int) -> float:
    if exponent < 0 and base == 0:
        raise InvalidExponent(base_name, exponent)
    try:
        return base**exponent
    except OverflowError as exc:
        raise _overflow(exc, base=base_name, exponent=exponent) from exc


def _product(coefficient_name: str, coefficient: float, power: float) -> float:
    product = coefficient * power
    if math.isinf(product) and math.isfinite(coefficient) and math.isfinite(power):
        raise _overflow(error="term overflowed", coefficient=coefficient_name)
    return product


def evaluate(formula: Formula, bindings: Mapping[str, Any]) -> float:
    """Evaluate ``formula`` with values taken from ``bindings``.

    The result is the sum of ``coefficient * base ** exponent`` over all
    terms plus the offset value. Only names the formula references are
    inspected; extra bindings are ignored.

    Raises:
        MissingVariable: a referenced name is absent from ``bindings``.
        InvalidExponent: a zero base is raised to a negative exponent.
        FormulaError: a binding is not a real number (``INVALID_BINDING``)
            or a value, power, term or sum leaves the float range
            (``NUMERIC_OVERFLOW``). Infinite bindings propagate as inf or nan.
    """

    missing = [name for name in formula.variables() if name not in bindings]
    if missing:
        raise MissingVariable(missing[0], missing=missing)

    parts: list[float] = []
    for term in formula.terms:
        power = _power(term.base, _lookup(bindings, term.base), term.exponent)
        if term.coefficient is None:
            parts.append(power)
        else:
            coefficient = _lookup(bindings, term.coefficient)
            parts.append(_product(term.coefficient, coefficient, power))
    if formula.offset is not None:
        parts.append(_lookup(bindings, formula.offset))

    if not all(math.isfinite(part) for part in parts):
        # fsum raises on inf + -inf where plain addition gives nan
        return sum(parts)
    try:
        return math.fsum(parts)
    except OverflowError as exc:
        raise _overflow(exc, error="sum overflowed") from exc


def evaluate_catalog(
    catalog: Catalog,
    bindings: Mapping[str, Any],
    names: Iterable[str] | None = None,
) -> dict[str, float]:
    """Evaluate several formulas from ``catalog`` against one binding."""

    selected = list(catalog) if names is None else list(names)
    unknown = [name for name in selected if name not in catalog]
    if unknown:
        raise FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": "unknown formula", "names": unknown},
        )
    return {name: evaluate(catalog[name], bindings) for name in selected}
