"""Reader layer: converts Rill source text into a syntax tree.

Surface syntax::

    ; comment
    (const size 40)
    ($ t 0)
    ($ radius [t] (add size (mul t 2)))
    (defn dot [p] {:shape :circle :at p :r radius :fill #ff8800})
    [(dot <10 20>) (dot <30 40>)]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from .errors import ParseError
from .nodes import Node, NodeKind


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TokenType(Enum):
    OPEN = auto()
    CLOSE = auto()
    STRING = auto()
    COLOR = auto()
    NUMBER = auto()
    SYMBOL = auto()
    ATOM = auto()


@dataclass(slots=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int


_DELIM = r"""[^\s()\[\]{}<>";]"""

_TOKEN_RE = re.compile(
    rf"""
      (?P<skip>\s+|;[^\n]*)
    | (?P<open>[(\[{{<])
    | (?P<close>[)\]}}>])
    | (?P<string>"(?:\\.|[^"\\])*")
    | (?P<color>\#(?:[0-9a-fA-F]{{8}}|[0-9a-fA-F]{{6}}|[0-9a-fA-F]{{3}})(?!{_DELIM}))
    | (?P<number>-?\d+(?:\.\d+)?(?!{_DELIM}))
    | (?P<symbol>:{_DELIM}+)
    | (?P<atom>{_DELIM}+)
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}

_CLOSERS = {"(": ")", "[": "]", "{": "}", "<": ">"}


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0
    while pos < len(source):
        m = _TOKEN_RE.match(source, pos)
        column = pos - line_start + 1
        if m is None:
            raise ParseError(f"unexpected character {source[pos]!r}", line, column)
        kind = m.lastgroup
        text = m.group()
        if kind != "skip":
            tokens.append(Token(TokenType[kind.upper()], text, line, column))
        newlines = text.count("\n")
        if newlines:
            line += newlines
            line_start = pos + text.rindex("\n") + 1
        pos = m.end()
    return tokens


def unescape(literal: str) -> str:
    """Strip the quotes from a string token and resolve backslash escapes."""
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), literal[1:-1])


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def next(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def parse_program(self) -> Node:
        forms: list[Node] = []
        while not self.at_end():
            forms.append(self.parse_expr())
        return Node(NodeKind.PROGRAM, params=forms, line=1, column=1)

    def parse_expr(self) -> Node:
        tok = self.next()
        t = tok.type
        at = {"line": tok.line, "column": tok.column}

        if t is TokenType.NUMBER:
            return Node(NodeKind.NUMBER, value=float(tok.value), **at)
        if t is TokenType.STRING:
            return Node(NodeKind.STRING, value=unescape(tok.value), **at)
        if t is TokenType.COLOR:
            return Node(NodeKind.COLOR, value=tok.value, **at)
        if t is TokenType.SYMBOL:
            return Node(NodeKind.SYMBOL, value=tok.value, **at)
        if t is TokenType.ATOM:
            return Node(NodeKind.VARIABLE, value=tok.value, **at)
        if t is TokenType.CLOSE:
            raise ParseError(f"unexpected {tok.value!r}", tok.line, tok.column)

        items = self.parse_until(tok)
        if tok.value == "[":
            return Node(NodeKind.LIST, values=items, **at)
        if tok.value == "<":
            return Node(NodeKind.VECTOR, values=items, **at)
        if tok.value == "{":
            return Node(NodeKind.MAP, values=items, **at)
        return _build_form(tok, items)

    def parse_until(self, opener: Token) -> list[Node]:
        closer = _CLOSERS[opener.value]
        items: list[Node] = []
        while True:
            if self.at_end():
                raise ParseError(f"missing {closer!r}", opener.line, opener.column)
            tok = self.tokens[self.pos]
            if tok.type is TokenType.CLOSE:
                if tok.value != closer:
                    raise ParseError(
                        f"expected {closer!r}, found {tok.value!r}", tok.line, tok.column
                    )
                self.pos += 1
                return items
            items.append(self.parse_expr())


# ---------------------------------------------------------------------------
# Form construction
# ---------------------------------------------------------------------------

def _expect(cond: bool, message: str, tok: Token) -> None:
    if not cond:
        raise ParseError(message, tok.line, tok.column)


def _name_of(node: Node, form: str, tok: Token) -> str:
    _expect(node.kind == NodeKind.VARIABLE, f"{form}: expected a name", tok)
    return node.value


def _param_list(node: Node, form: str, tok: Token) -> Node:
    _expect(
        node.kind == NodeKind.LIST and all(v.kind == NodeKind.VARIABLE for v in node.values),
        f"{form}: expected a list of names",
        tok,
    )
    return node


def _build_form(tok: Token, items: list[Node]) -> Node:
    """Turn ``( head args... )`` into a form node keyed on *head*."""
    at = {"line": tok.line, "column": tok.column}
    _expect(bool(items), "empty form", tok)
    head, args = items[0], items[1:]
    _expect(head.kind == NodeKind.VARIABLE, "form must start with a name", tok)
    op = head.value

    if op == "fn":
        _expect(len(args) == 2, "fn: expected [params] body", tok)
        return Node(NodeKind.FUNCTION, params=[_param_list(args[0], op, tok), args[1]], **at)

    if op == "defn":
        _expect(len(args) == 3, "defn: expected name [params] body", tok)
        return Node(
            NodeKind.NAMED_FUNCTION,
            name=_name_of(args[0], op, tok),
            params=[_param_list(args[1], op, tok), args[2]],
            **at,
        )

    if op == "if":
        _expect(len(args) in (2, 3), "if: expected guard then [else]", tok)
        return Node(NodeKind.CONDITION, params=args, **at)

    if op == "const":
        _expect(len(args) == 2, "const: expected name expr", tok)
        return Node(NodeKind.CONST, name=_name_of(args[0], op, tok), params=[args[1]], **at)

    if op == "$":
        _expect(len(args) in (2, 3), "$: expected name [watched] body", tok)
        name = _name_of(args[0], op, tok)
        if len(args) == 3:
            return Node(
                NodeKind.STATE, name=name, params=[_param_list(args[1], op, tok), args[2]], **at
            )
        return Node(NodeKind.STATE, name=name, params=[args[1]], **at)

    if op == "param":
        _expect(len(args) == 1, "param: expected one expression", tok)
        return Node(NodeKind.EXPOSED, params=args, **at)

    return Node(NodeKind.CALL, name=op, params=args, **at)


def parse(source: str) -> Node:
    """Parse *source* into a Program node."""
    return _Parser(tokenize(source)).parse_program()
