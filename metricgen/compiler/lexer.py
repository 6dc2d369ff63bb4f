"""Tokenizer and token cursor for metric declaration blocks.

The parsers never look at raw characters: they walk a ``TokenCursor`` and,
for opaque fragments (parameter types, ``description``/``unit``/``cfg``
expressions), ask the cursor for the exact source text spanned by a run of
tokens. That keeps the embedded Python expressions byte-for-byte intact.

Lexical rules:
  * ``///`` starts a doc comment; the token value is the rest of the line,
    verbatim (leading space included).
  * ``//`` starts an ordinary comment, skipped. Inside ``(...)`` and
    ``[...]`` it is only a comment where it cannot be floor division:
    after ``,``, ``(`` or ``[``, or at the start of a line.
  * Python string literals (any prefix, single/double/triple quoted) are a
    single STRING token.
  * ``->`` and ``::`` are single punctuation tokens; every other
    non-space character is a one-character punctuation token.
"""
from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass
from enum import Enum, auto

from metricgen.errors import DeclarationSyntaxError, Location

logger = logging.getLogger(__name__)


class TokType(Enum):
    IDENT = auto()
    STRING = auto()
    NUMBER = auto()
    DOC = auto()
    PUNCT = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    type: TokType
    value: str
    line: int
    col: int
    start: int  # offset of first character
    end: int    # offset one past the last character

    @property
    def location(self) -> Location:
        return Location(self.line, self.col)

    def is_punct(self, value: str) -> bool:
        return self.type is TokType.PUNCT and self.value == value

    def is_ident(self, value: str | None = None) -> bool:
        return self.type is TokType.IDENT and (value is None or self.value == value)

    def describe(self) -> str:
        if self.type is TokType.EOF:
            return "end of input"
        return repr(self.value)


_STRING_RE = re.compile(
    r'''[rRbBuUfF]{0,2}(?:"""(?:\\.|[^\\])*?"""|\'\'\'(?:\\.|[^\\])*?\'\'\'|"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')''',
    re.S,
)
_UNTERMINATED_RE = re.compile(r'''[rRbBuUfF]{0,2}["']''')
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d+)?[jJ]?")
_SPACE_RE = re.compile(r"\s+")

_OPENERS = "([{"
_CLOSERS = ")]}"
_MULTI_PUNCT = ("->", "::")


class _LineIndex:
    """Maps character offsets to 1-based (line, col)."""

    def __init__(self, text: str):
        self._starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    def position(self, offset: int) -> tuple[int, int]:
        idx = bisect.bisect_right(self._starts, offset) - 1
        return idx + 1, offset - self._starts[idx] + 1


def _no_operand_before(tokens: list[Token], text: str, pos: int) -> bool:
    """Whether ``//`` at ``pos`` cannot be floor division.

    True right after ``,``, ``(`` or ``[``, or when it is the first token on
    its line.
    """
    if not tokens:
        return True
    prev = tokens[-1]
    if prev.type is TokType.PUNCT and prev.value in ",([":
        return True
    return "\n" in text[prev.end:pos]


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into tokens, ending with a single EOF token."""
    index = _LineIndex(text)
    tokens: list[Token] = []
    pos = 0
    n = len(text)
    depth = 0  # nesting of ( and [ only

    def add(tt: TokType, start: int, end: int, value: str | None = None) -> None:
        line, col = index.position(start)
        tokens.append(Token(tt, text[start:end] if value is None else value, line, col, start, end))

    while pos < n:
        m = _SPACE_RE.match(text, pos)
        if m:
            pos = m.end()
            continue

        if text.startswith("///", pos) and depth == 0:
            eol = text.find("\n", pos)
            eol = n if eol == -1 else eol
            add(TokType.DOC, pos, eol, value=text[pos + 3:eol].rstrip("\r"))
            pos = eol
            continue

        if text.startswith("//", pos) and (depth == 0 or _no_operand_before(tokens, text, pos)):
            eol = text.find("\n", pos)
            pos = n if eol == -1 else eol
            continue

        m = _STRING_RE.match(text, pos)
        if m:
            add(TokType.STRING, pos, m.end())
            pos = m.end()
            continue

        m = _IDENT_RE.match(text, pos)
        if m:
            # an identifier that is really a string prefix with a broken literal
            if _UNTERMINATED_RE.match(text, pos):
                line, col = index.position(pos)
                raise DeclarationSyntaxError("Unterminated string literal", Location(line, col))
            add(TokType.IDENT, pos, m.end())
            pos = m.end()
            continue

        if text[pos] in "\"'":
            line, col = index.position(pos)
            raise DeclarationSyntaxError("Unterminated string literal", Location(line, col))

        m = _NUMBER_RE.match(text, pos)
        if m and m.end() > pos:
            add(TokType.NUMBER, pos, m.end())
            pos = m.end()
            continue

        multi = next((p for p in _MULTI_PUNCT if text.startswith(p, pos)), None)
        if multi:
            add(TokType.PUNCT, pos, pos + len(multi))
            pos += len(multi)
            continue

        ch = text[pos]
        if ch in "([":
            depth += 1
        elif ch in ")]" and depth > 0:
            depth -= 1
        add(TokType.PUNCT, pos, pos + 1)
        pos += 1

    line, col = index.position(n)
    tokens.append(Token(TokType.EOF, "", line, col, n, n))
    logger.debug("tokenized %s chars into %s tokens", n, len(tokens))
    return tokens


class TokenCursor:
    """Forward-only cursor over a token list with access to the source text.

    ``TokenCursor.from_source(text)`` tokenizes and wraps in one step.
    ``sub_cursor`` hands a delimited region (e.g. a module body) to another
    parser; the sub cursor ends at the closing delimiter.
    """

    def __init__(self, tokens: list[Token], source: str, end: int | None = None):
        self.tokens = tokens
        self.source = source
        self.pos = 0
        self._end = len(tokens) - 1 if end is None else end  # index of the EOF-equivalent token

    @classmethod
    def from_source(cls, text: str) -> TokenCursor:
        return cls(tokenize(text), text)

    # basic utilities
    def peek(self, offset: int = 0) -> Token:
        idx = min(self.pos + offset, self._end)
        tok = self.tokens[idx]
        if idx == self._end and tok.type is not TokType.EOF:
            # closing delimiter of a sub cursor reads as end of input
            return Token(TokType.EOF, "", tok.line, tok.col, tok.start, tok.start)
        return tok

    def is_empty(self) -> bool:
        return self.peek().type is TokType.EOF

    def advance(self) -> Token:
        tok = self.peek()
        if self.pos < self._end:
            self.pos += 1
        return tok

    def error(self, message: str, tok: Token | None = None) -> DeclarationSyntaxError:
        tok = tok or self.peek()
        return DeclarationSyntaxError(message, tok.location)

    def expect_punct(self, value: str, context: str) -> Token:
        tok = self.peek()
        if not tok.is_punct(value):
            raise self.error(f"Expected `{value}` {context}, found {tok.describe()}")
        return self.advance()

    def expect_ident(self, context: str, value: str | None = None) -> Token:
        tok = self.peek()
        if not tok.is_ident(value):
            wanted = f"`{value}`" if value else "identifier"
            raise self.error(f"Expected {wanted} {context}, found {tok.describe()}")
        return self.advance()

    def maybe_punct(self, value: str) -> Token | None:
        if self.peek().is_punct(value):
            return self.advance()
        return None

    def text_between(self, first: Token, last: Token) -> str:
        """Exact source text from ``first`` through ``last`` inclusive."""
        return self.source[first.start:last.end]

    def previous(self) -> Token:
        """The most recently consumed token."""
        return self.tokens[max(self.pos - 1, 0)]

    def collect_until(self, stops: tuple[str, ...], context: str, allow_eof: bool = False) -> list[Token]:
        """Consume a bracket-balanced run of tokens up to a top-level stop punct.

        The stop token itself is not consumed. Reaching the end of input
        (or of the sub cursor) before a stop token is a syntax error unless
        ``allow_eof`` is set.
        """
        run: list[Token] = []
        stack: list[Token] = []
        while True:
            tok = self.peek()
            if tok.type is TokType.EOF:
                if stack:
                    raise self.error(f"Unclosed `{stack[-1].value}` {context}", stack[-1])
                if allow_eof:
                    return run
                raise self.error(f"Expected one of {', '.join(f'`{s}`' for s in stops)} {context}, found end of input")
            if not stack and tok.type is TokType.PUNCT and tok.value in stops:
                return run
            if tok.type is TokType.PUNCT and tok.value in _OPENERS:
                stack.append(tok)
            elif tok.type is TokType.PUNCT and tok.value in _CLOSERS:
                if not stack or _OPENERS.index(stack[-1].value) != _CLOSERS.index(tok.value):
                    raise self.error(f"Unbalanced `{tok.value}` {context}")
                stack.pop()
            run.append(self.advance())

    def sub_cursor(self, opener: str, context: str) -> TokenCursor:
        """Consume ``opener ... closer`` and return a cursor over the inside."""
        open_tok = self.expect_punct(opener, context)
        closer = _CLOSERS[_OPENERS.index(opener)]
        start = self.pos
        self.collect_until((closer,), context, allow_eof=True)
        if not self.peek().is_punct(closer):
            raise self.error(f"Unclosed `{opener}` {context}", open_tok)
        end = self.pos
        self.advance()  # closer
        inner = TokenCursor(self.tokens, self.source, end=end)
        inner.pos = start
        logger.debug("sub cursor %s at %s spans %s tokens", opener, open_tok.location, end - start)
        return inner


__all__ = ["TokType", "Token", "TokenCursor", "tokenize"]
