"""Text syntax for formulas.

A formula is a ``+``-separated list of items::

    A * x1 ^ 5 + B * x1 ^ 4 + w1 ^ 7 + w1'

``coef * base [^ int]`` is a term, ``base ^ int`` is a term with an implicit
coefficient of 1, and a bare name is the constant offset (at most one).
``**`` is accepted as a synonym for ``^``. Names may carry trailing prime
marks (``w1'``).
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

from formula_eval.errors import FormulaError, FormulaErrorCode
from formula_eval.models import NAME_PATTERN, Formula, Term

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<name>%s)
  | (?P<int>-?\d+)
  | (?P<pow>\*\*|\^)
  | (?P<star>\*)
  | (?P<plus>\+)
    """
    % NAME_PATTERN,
    re.VERBOSE,
)


class _Token(NamedTuple):
    kind: str
    text: str
    pos: int


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise FormulaError(
                FormulaErrorCode.INVALID_FORMULA,
                ctx={"error": "unexpected character", "text": text, "pos": pos},
            )
        kind = m.lastgroup or ""
        if kind != "ws":
            tokens.append(_Token(kind, m.group(), pos))
        pos = m.end()
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.index = 0

    def _peek(self) -> Optional[_Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _fail(self, error: str) -> FormulaError:
        token = self._peek()
        pos = token.pos if token else len(self.text)
        return FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": error, "text": self.text, "pos": pos},
        )

    def _expect(self, kind: str) -> _Token:
        token = self._peek()
        if token is None or token.kind != kind:
            raise self._fail(f"expected {kind}")
        self.index += 1
        return token

    def _accept(self, kind: str) -> Optional[_Token]:
        token = self._peek()
        if token is not None and token.kind == kind:
            self.index += 1
            return token
        return None

    def _exponent(self) -> int:
        self._expect("pow")
        return int(self._expect("int").text)

    def parse(self) -> Formula:
        if not self.tokens:
            raise self._fail("empty formula")

        terms: list[Term] = []
        offset: Optional[str] = None
        while True:
            first = self._expect("name").text
            if self._accept("star"):
                base = self._expect("name").text
                exponent = self._exponent() if self._peek_kind("pow") else 1
                terms.append(Term(first, base, exponent))
            elif self._peek_kind("pow"):
                terms.append(Term(None, first, self._exponent()))
            else:
                if offset is not None:
                    raise self._fail("formula has more than one offset")
                offset = first

            if self._peek() is None:
                break
            self._expect("plus")

        return Formula(terms=tuple(terms), offset=offset)

    def _peek_kind(self, kind: str) -> bool:
        token = self._peek()
        return token is not None and token.kind == kind


def parse_formula(text: str) -> Formula:
    """Parse formula text into a :class:`Formula`."""

    if not isinstance(text, str):
        raise FormulaError(
            FormulaErrorCode.INVALID_FORMULA,
            ctx={"error": "formula text must be string", "value": text},
        )
    return _Parser(text).parse()


def _render_term(term: Term) -> str:
    if term.coefficient is None:
        # a bare name would read back as the offset
        return f"{term.base} ^ {term.exponent}"
    if term.exponent == 1:
        return f"{term.coefficient} * {term.base}"
    return f"{term.coefficient} * {term.base} ^ {term.exponent}"


def render(formula: Formula) -> str:
    """Render ``formula`` as text accepted by :func:`parse_formula`."""

    items = [_render_term(term) for term in formula.terms]
    if formula.offset is not None:
        items.append(formula.offset)
    return " + ".join(items)
