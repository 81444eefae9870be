"""Data structures backing formula evaluation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from formula_eval.errors import FormulaError, FormulaErrorCode

# Identifier with optional trailing prime marks, e.g. w1'
NAME_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*'*"
_NAME_RE = re.compile(NAME_PATTERN)


def _check_name(value: object, *, role: str) -> None:
    if not isinstance(value, str) or _NAME_RE.fullmatch(value) is None:
        raise FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": f"{role} must be a variable name", "value": value},
        )


@dataclass(frozen=True)
class Term:
    """One ``coefficient * base ^ exponent`` component.

    ``coefficient=None`` stands for an implicit coefficient of 1.
    """

    coefficient: Optional[str]
    base: str
    exponent: int = 1

    def __post_init__(self) -> None:
        if self.coefficient is not None:
            _check_name(self.coefficient, role="term coefficient")
        _check_name(self.base, role="term base")
        if isinstance(self.exponent, bool) or not isinstance(self.exponent, int):
            raise FormulaError(
                FormulaErrorCode.INVALID_FORMULA,
                ctx={"error": "term exponent must be integer", "value": self.exponent},
            )

    def variables(self) -> tuple[str, ...]:
        if self.coefficient is None:
            return (self.base,)
        return (self.coefficient, self.base)


@dataclass(frozen=True)
class Formula:
    """Ordered sum of terms plus an optional constant offset variable."""

    terms: Sequence[Term] = field(default_factory=tuple)
    offset: Optional[str] = None

    def __post_init__(self) -> None:
        terms = tuple(self.terms)
        for term in terms:
            if not isinstance(term, Term):
                raise FormulaError(
                    FormulaErrorCode.INVALID_FORMULA,
                    ctx={"error": "formula terms must be Term instances", "value": term},
                )
        if self.offset is not None:
            _check_name(self.offset, role="formula offset")
        if not terms and self.offset is None:
            raise FormulaError(
                FormulaErrorCode.INVALID_FORMULA,
                ctx={"error": "formula requires at least one term or an offset"},
            )
        object.__setattr__(self, "terms", terms)

    def variables(self) -> tuple[str, ...]:
        """Referenced names in order of first appearance."""
        seen: dict[str, None] = {}
        for term in self.terms:
            for name in term.variables():
                seen.setdefault(name, None)
        if self.offset is not None:
            seen.setdefault(self.offset, None)
        return tuple(seen)


Catalog = Mapping[str, Formula]
