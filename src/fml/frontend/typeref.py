"""
Type expression parsing and resolution
======================================

Purpose:
- Split a type expression such as `Map<String, List<Int>>` into its
  constructor name and raw inner argument
- Resolve (constructor, inner argument) into a TypeRef, recursing into
  the inner argument for container types

Grammar:
    type-expr := primitive | identifier "<" arg ">"
    primitive := "String" | "Int" | "Boolean"
    arg       := type-expr | type-expr "," type-expr     (Map only)

This module:
- DOES NOT know about user-declared enums or objects
- DOES NOT hold state
- DOES NOT perform I/O
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from fml.errors import (
    MalformedTypeExpression,
    TypeParsingError,
    UnsupportedMapKey,
)
from fml.ir.schema import (
    TypeRef,
    StringType,
    IntType,
    BooleanType,
    BundleTextType,
    BundleImageType,
    EnumType,
    ObjectType,
    ListType,
    OptionType,
    StringMapType,
    EnumMapType,
)


PRIMITIVE_NAMES = ("String", "Int", "Boolean")

# Deepest container nesting accepted in one type expression
MAX_NESTING_DEPTH = 64

_PRIMITIVES = {
    "String": StringType,
    "Int": IntType,
    "Boolean": BooleanType,
}

# Constructors whose argument is a plain name, not a type
_NAMED = {
    "BundleText": BundleTextType,
    "BundleImage": BundleImageType,
    "Enum": EnumType,
    "Object": ObjectType,
}

_CONTAINERS = {
    "List": ListType,
    "Option": OptionType,
}


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TokenKind(str, Enum):
    IDENT = "ident"
    LT    = "<"
    GT    = ">"
    COMMA = ","


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int   # offset into the source expression


_PUNCT = {
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    ",": TokenKind.COMMA,
}


def tokenize(expr: str) -> List[Token]:
    """
    Break a type expression into identifier, `<`, `>` and `,` tokens.

    Whitespace separates tokens and is otherwise ignored. An identifier
    is any run of characters that is neither whitespace nor punctuation.
    """

    tokens: List[Token] = []
    i = 0
    n = len(expr)

    while i < n:
        ch = expr[i]

        if ch.isspace():
            i += 1
            continue

        if ch in _PUNCT:
            tokens.append(Token(_PUNCT[ch], ch, i))
            i += 1
            continue

        start = i
        while i < n and not expr[i].isspace() and expr[i] not in _PUNCT:
            i += 1
        tokens.append(Token(TokenKind.IDENT, expr[start:i], start))

    return tokens


def _match_brackets(tokens: List[Token]) -> Dict[int, int]:
    """Map the index of every `<` to the index of its matching `>`."""

    pairs: Dict[int, int] = {}
    stack: List[int] = []

    for idx, tok in enumerate(tokens):
        if tok.kind == TokenKind.LT:
            stack.append(idx)
        elif tok.kind == TokenKind.GT and stack:
            pairs[stack.pop()] = idx

    return pairs


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

Span = Tuple[int, int]   # [lo, hi) range of token indices


class _TypeExpression:
    """
    One tokenized type expression.

    Tokens are produced once; every nested argument is addressed as a
    span of token indices, so nothing is re-tokenized while recursing.
    """

    def __init__(self, expr: str):
        self.expr = expr
        self.tokens = tokenize(expr)
        self.pairs = _match_brackets(self.tokens)

    def text(self, span: Span) -> str:
        lo, hi = span
        if lo >= hi:
            return ""
        last = self.tokens[hi - 1]
        return self.expr[self.tokens[lo].pos:last.pos + len(last.text)]

    def head(self, span: Span) -> Tuple[str, Optional[Span]]:
        """
        Split a span into its constructor name and the span of its
        argument (None when there are no brackets).
        """

        lo, hi = span
        if lo >= hi:
            raise MalformedTypeExpression(
                f"Missing type in '{self.expr}'" if self.tokens else "Type expression is empty"
            )

        first = self.tokens[lo]
        if first.kind != TokenKind.IDENT:
            raise MalformedTypeExpression(
                f"'{self.text(span)}' does not start with a type name"
            )

        name = first.text
        if name in PRIMITIVE_NAMES or hi - lo == 1:
            return name, None

        opening = lo + 1
        if self.tokens[opening].kind != TokenKind.LT:
            raise MalformedTypeExpression(
                f"Unexpected '{self.tokens[opening].text}' after '{name}' in '{self.expr}'"
            )

        close = self.pairs.get(opening)
        if close is None or close >= hi:
            raise MalformedTypeExpression(f"Unbalanced '<' in '{self.expr}'")

        if close != hi - 1:
            trailing = self.tokens[close + 1]
            raise MalformedTypeExpression(
                f"Unexpected '{trailing.text}' after '{self.expr[:trailing.pos].strip()}'"
            )

        return name, (opening + 1, close)

    def arguments(self, span: Span) -> List[Span]:
        """Split an argument span on its top-level commas."""

        lo, hi = span
        parts: List[Span] = []
        start = lo
        idx = lo

        while idx < hi:
            tok = self.tokens[idx]
            if tok.kind == TokenKind.LT and idx in self.pairs:
                # Commas inside a nested <...> belong to that argument.
                idx = self.pairs[idx] + 1
                continue
            if tok.kind == TokenKind.COMMA:
                parts.append((start, idx))
                start = idx + 1
            idx += 1

        parts.append((start, hi))
        return parts


def parse_type_expression(expr: str) -> Tuple[str, Optional[str]]:
    """
    Split a type expression into (constructor name, inner argument).

    The inner argument is the raw text between the first `<` and its
    matching `>`, or None when the expression has no brackets.
    Primitive names are leaves: anything after them is not inspected.

    Raises:
        MalformedTypeExpression if the brackets do not line up.
    """

    parsed = _TypeExpression(expr)
    name, arg = parsed.head((0, len(parsed.tokens)))
    if arg is None:
        return name, None

    lo, hi = arg
    opening = parsed.tokens[lo - 1]
    closing = parsed.tokens[hi]
    return name, expr[opening.pos + 1:closing.pos]


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def type_ref_from_string(expr: str) -> TypeRef:
    """
    Resolve a type expression string into a TypeRef.

    Raises:
        TypeParsingError (or one of its subclasses) on any failure.
    """
    parsed = _TypeExpression(expr)
    return _resolve(parsed, (0, len(parsed.tokens)), 0)


def resolve_type(name: str, inner: Optional[str]) -> TypeRef:
    """
    Interpret a (constructor, inner argument) pair.

    Raises:
        MalformedTypeExpression if a generic constructor has no argument
        UnsupportedMapKey if a Map key is not String or Enum<...>
        TypeParsingError if the constructor is not recognized
    """
    return type_ref_from_string(name if inner is None else f"{name}<{inner}>")


def _resolve(parsed: _TypeExpression, span: Span, depth: int) -> TypeRef:
    if depth > MAX_NESTING_DEPTH:
        raise MalformedTypeExpression(
            f"Type expression nests deeper than {MAX_NESTING_DEPTH} levels"
        )

    name, arg = parsed.head(span)

    if name in _PRIMITIVES:
        return _PRIMITIVES[name]()

    if name in _NAMED:
        return _NAMED[name](_require_name(parsed, name, arg))

    if name in _CONTAINERS:
        inner = _require_argument(name, arg)
        return _CONTAINERS[name](_resolve(parsed, inner, depth + 1))

    if name == "Map":
        return _resolve_map(parsed, _require_argument(name, arg), depth)

    raise TypeParsingError(f"{name} is not a recognized FML type")


def _require_argument(name: str, arg: Optional[Span]) -> Span:
    if arg is None or arg[0] >= arg[1]:
        raise MalformedTypeExpression(f"{name} requires a type argument: {name}<...>")
    return arg


def _require_name(parsed: _TypeExpression, name: str, arg: Optional[Span]) -> str:
    lo, hi = _require_argument(name, arg)
    tok = parsed.tokens[lo]
    if hi - lo != 1 or tok.kind != TokenKind.IDENT:
        raise MalformedTypeExpression(
            f"{name}<{parsed.text((lo, hi))}> must name a single {name.lower()}"
        )
    return tok.text


def _resolve_map(parsed: _TypeExpression, arg: Span, depth: int) -> TypeRef:
    parts = parsed.arguments(arg)
    if len(parts) != 2 or any(lo >= hi for lo, hi in parts):
        raise MalformedTypeExpression(
            f"Map<{parsed.text(arg)}> requires a key type and a value type"
        )

    key_span, value_span = parts
    key_expr = parsed.text(key_span)

    try:
        key = _resolve(parsed, key_span, depth + 1)
    except (MalformedTypeExpression, UnsupportedMapKey):
        raise
    except TypeParsingError as e:
        raise UnsupportedMapKey(
            f"{key_expr} is not a recognized FML Map key type"
        ) from e

    if isinstance(key, EnumType):
        return EnumMapType(key, _resolve(parsed, value_span, depth + 1))

    if key_expr == "String":
        return StringMapType(_resolve(parsed, value_span, depth + 1))

    raise UnsupportedMapKey(f"{key_expr} is not a recognized FML Map key type")
