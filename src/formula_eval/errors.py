"""Error types for formula evaluation.

Every failure surfaces as a :class:`FormulaError` carrying an error code and
a small context mapping, so callers can branch on ``err.code`` instead of
parsing messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class FormulaErrorCode(Enum):
    MISSING_VARIABLE = auto()
    INVALID_EXPONENT = auto()
    INVALID_FORMULA = auto()
    INVALID_BINDING = auto()
    NUMERIC_OVERFLOW = auto()
    INVALID_CATALOG = auto()
    INVALID_CONFIG = auto()


@dataclass(eq=False)
class FormulaError(Exception):
    """Structured error raised by the parser, loader and evaluator."""

    code: FormulaErrorCode
    ctx: dict[str, Any] | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        if self.ctx is None:
            self.ctx = {}
        if self.cause is not None:
            self.__cause__ = self.cause
        super().__init__(self.code.name)

    def __str__(self) -> str:
        if not self.ctx:
            return self.code.name
        parts = ", ".join(f"{k}={v!r}" for k, v in self.ctx.items())
        return f"{self.code.name}: {parts}"


class MissingVariable(FormulaError):
    """A referenced variable name has no binding."""

    def __init__(self, variable: str, **ctx: Any) -> None:
        super().__init__(
            FormulaErrorCode.MISSING_VARIABLE,
            ctx={"variable": variable, **ctx},
        )

    @property
    def variable(self) -> str:
        return self.ctx["variable"]


class InvalidExponent(FormulaError):
    """Power is undefined, i.e. zero raised to a negative exponent."""

    def __init__(self, base: str, exponent: int, **ctx: Any) -> None:
        super().__init__(
            FormulaErrorCode.INVALID_EXPONENT,
            ctx={"base": base, "exponent": exponent, **ctx},
        )
