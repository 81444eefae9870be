"""Evaluate named families of polynomial formulas over variable bindings."""

from .batch import evaluate_frame
from .errors import FormulaError, FormulaErrorCode, InvalidExponent, MissingVariable
from .evaluator import evaluate, evaluate_catalog
from .families import FAMILIES, get_family
from .loader import load_bindings, load_catalog, parse_catalog_mapping
from .models import Formula, Term
from .parser import parse_formula, render

__all__ = [
    "FAMILIES",
    "Formula",
    "FormulaError",
    "FormulaErrorCode",
    "InvalidExponent",
    "MissingVariable",
    "Term",
    "evaluate",
    "evaluate_catalog",
    "evaluate_frame",
    "get_family",
    "load_bindings",
    "load_catalog",
    "parse_catalog_mapping",
    "parse_formula",
    "render",
]
