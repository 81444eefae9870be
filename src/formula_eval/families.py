"""Built-in formula families.

Each family is a small catalog of formulas over the coordinates ``x1..z2``,
the weights ``w1..w3`` (and their primed counterparts ``w1'..w3'``) and
single-letter coefficients. The formulas are kept exactly as written; no
interpretation of the weight/coordinate scheme is attempted.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Mapping

from formula_eval.errors import FormulaError, FormulaErrorCode
from formula_eval.models import Formula
from formula_eval.parser import parse_formula

WEIGHTED = {
    "fw1": "w1 * x1 + w1 * y1 + w1 * z1 + a",
    "fw2": "w2 * x2 + w2 * y2 + w2 * z2 + b",
    "fw3": "w3 * x1 + w3 * y1 + w3 * z1 + c",
    "fw4": "w1' * x2 + w1' * y2 + w1' * z2 + d",
    "fw5": "w2' * x1 + w2' * y1 + w2' * z1 + e",
    "fw6": "w3' * x2 + w3' * y2 + w3' * z2 + f",
}

# Degree-7 family, one per weight.
HILBERT = {
    "gw1": "w1 ^ 7 + a * w1 ^ 3 + b * w1 ^ 2 + c * w1 + A",
    "gw2": "w2 ^ 7 + a * w2 ^ 3 + b * w2 ^ 2 + c * w2 + B",
    "gw3": "w3 ^ 7 + a * w3 ^ 3 + b * w3 ^ 2 + c * w3 + C",
    "gw4": "w1' ^ 7 + d * w1' ^ 3 + e * w1' ^ 2 + f * w1' + D",
    "gw5": "w2' ^ 7 + d * w2' ^ 3 + e * w2' ^ 2 + f * w2' + E",
    "gw6": "w3' ^ 7 + d * w3' ^ 3 + e * w3' ^ 2 + f * w3' + F",
}

LINEAR = {
    "fx1": "a * x1 + b * x1 + c * x1 + d * x1 + e * x1 + f * w1",
    "fx2": "a * x2 + b * x2 + c * x2 + d * x2 + e * x2 + f * w2",
    "fy1": "a * y1 + b * y1 + c * y1 + d * y1 + e * y1 + f * w3",
    "fy2": "a * y2 + b * y2 + c * y2 + d * y2 + e * y2 + f * w1'",
    "fz1": "a * z1 + b * z1 + c * z1 + d * x1 + e * y1 + f * w2'",
    "fz2": "a * z2 + b * z2 + c * z2 + d * z2 + e * z2 + f * w3'",
}

QUINTIC = {
    "gx1": "A * x1 ^ 5 + B * x1 ^ 4 + C * x1 ^ 3 + D * x1 ^ 2 + E * x1 + w1",
    "gx2": "A * x2 ^ 5 + B * x2 ^ 4 + C * x2 ^ 3 + D * x2 ^ 2 + E * x2 + w2",
    "gy1": "A * y1 ^ 5 + B * y1 ^ 4 + C * y1 ^ 3 + D * y1 ^ 2 + E * y1 + w3",
    "gy2": "A * y2 ^ 5 + B * y2 ^ 4 + C * y2 ^ 3 + D * y2 ^ 2 + E * y2 + w1'",
    "gz1": "A * z1 ^ 5 + B * z1 ^ 4 + C * z1 ^ 3 + D * x1 ^ 2 + E * y1 + w2'",
    "gz2": "A * z2 ^ 5 + B * z2 ^ 4 + C * z2 ^ 3 + D * z2 ^ 2 + E * z2 + w3'",
}

FAMILY_SOURCES: Mapping[str, Mapping[str, str]] = {
    "weighted": WEIGHTED,
    "hilbert": HILBERT,
    "linear": LINEAR,
    "quintic": QUINTIC,
}


def _compile(source: Mapping[str, str]) -> "OrderedDict[str, Formula]":
    return OrderedDict((name, parse_formula(text)) for name, text in source.items())


FAMILIES: Mapping[str, Mapping[str, Formula]] = {
    name: _compile(source) for name, source in FAMILY_SOURCES.items()
}


def get_family(name: str) -> "OrderedDict[str, Formula]":
    """Return a fresh copy of the built-in family ``name``."""

    try:
        family = FAMILIES[name]
    except (KeyError, TypeError):
        raise FormulaError(
            FormulaErrorCode.INVALID_CATALOG,
            ctx={"error": "unknown family", "family": name, "known": sorted(FAMILIES)},
        ) from None
    return OrderedDict(family)
