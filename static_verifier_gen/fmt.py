#!/usr/bin/env python3
"""
Placeholder substitution for constraint condition templates.

Grammar:
    template    = { literal | placeholder }
    placeholder = "$$" | "$" digits | "$" identifier
    identifier  = ( letter | "_" ) { letter | digit | "_" }

`$$` renders a literal dollar sign, `$N` is bound to the N-th positional
parameter and `$name` is looked up in a FmtContext. A `$` that does not start
a placeholder is kept as is. Placeholders without a binding are rendered as
their own spelling followed by NO_SUBST_MARKER, so callers can tell that a
template references something outside the context they provided.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

NO_SUBST_MARKER = "<no-subst-found>"


# ============================================================================
# Substitution context
# ============================================================================

class FmtContext:
    """Named substitutions available while formatting a template.

    The `with_*` and `add_subst` methods return the context so bindings can
    be chained:

        ctx = FmtContext().add_subst("_op", "*op").with_self("attr")
    """

    def __init__(self, substitutions: Optional[Dict[str, str]] = None):
        self._substitutions: Dict[str, str] = dict(substitutions or {})

    def add_subst(self, placeholder: str, subst: str) -> 'FmtContext':
        self._substitutions[placeholder] = subst
        return self

    def with_self(self, subst: str) -> 'FmtContext':
        return self.add_subst("_self", subst)

    def with_op(self, subst: str) -> 'FmtContext':
        return self.add_subst("_op", subst)

    def with_builder(self, subst: str) -> 'FmtContext':
        return self.add_subst("_builder", subst)

    def get_subst_for(self, placeholder: str) -> Optional[str]:
        return self._substitutions.get(placeholder)

    def __repr__(self):
        return f"FmtContext({self._substitutions!r})"


# ============================================================================
# Template elements
# ============================================================================

class FmtElementType(Enum):
    LITERAL = "literal"
    POSITIONAL = "positional"
    NAMED = "named"


@dataclass
class FmtElement:
    type: FmtElementType
    spec: str  # Text as written in the template
    index: int = -1  # Positional placeholders only
    name: str = ""  # Named placeholders only


def _is_ident_start(c: str) -> bool:
    return c == '_' or ('a' <= c <= 'z') or ('A' <= c <= 'Z')


def _is_ident_char(c: str) -> bool:
    return _is_ident_start(c) or c.isdigit()


def parse_format(template: str) -> List[FmtElement]:
    """Split a template into literal and placeholder elements."""
    elements: List[FmtElement] = []
    literal = ""
    pos = 0
    length = len(template)

    while pos < length:
        c = template[pos]
        if c != '$' or pos + 1 >= length:
            literal += c
            pos += 1
            continue

        nxt = template[pos + 1]
        if nxt == '$':
            literal += '$'
            pos += 2
            continue

        if nxt.isdigit() or _is_ident_start(nxt):
            if literal:
                elements.append(FmtElement(FmtElementType.LITERAL, literal))
                literal = ""

            end = pos + 1
            if nxt.isdigit():
                while end < length and template[end].isdigit():
                    end += 1
                spec = template[pos:end]
                elements.append(FmtElement(FmtElementType.POSITIONAL, spec, index=int(spec[1:])))
            else:
                while end < length and _is_ident_char(template[end]):
                    end += 1
                spec = template[pos:end]
                elements.append(FmtElement(FmtElementType.NAMED, spec, name=spec[1:]))
            pos = end
            continue

        # Lone dollar sign
        literal += c
        pos += 1

    if literal:
        elements.append(FmtElement(FmtElementType.LITERAL, literal))

    return elements


def tgfmt(template: str, ctx: Optional[FmtContext] = None, *params: str) -> str:
    """
    Substitute placeholders in a condition template.

    Args:
        template: Condition template, e.g. "$_self.getValue() > 0"
        ctx: Named substitutions (may be None)
        params: Values for positional placeholders $0, $1, ...

    Returns:
        The rendered text. Unbound placeholders are kept and tagged with
        NO_SUBST_MARKER.
    """
    out = []
    for element in parse_format(template):
        if element.type is FmtElementType.LITERAL:
            out.append(element.spec)
        elif element.type is FmtElementType.POSITIONAL:
            if element.index < len(params):
                out.append(params[element.index])
            else:
                out.append(element.spec + NO_SUBST_MARKER)
        else:
            subst = ctx.get_subst_for(element.name) if ctx is not None else None
            if subst is None:
                out.append(element.spec + NO_SUBST_MARKER)
            else:
                out.append(subst)
    return "".join(out)


# ============================================================================
# String escaping
# ============================================================================

def escape_string(value: str) -> str:
    """
    Escape text for embedding inside a C string literal.

    Backslash, tab, newline and double quote get their short escapes;
    every other non-printable byte of the UTF-8 encoding becomes a
    three-digit octal escape.
    """
    out = []
    for byte in value.encode("utf-8"):
        c = chr(byte)
        if c == '\\':
            out.append('\\\\')
        elif c == '\t':
            out.append('\\t')
        elif c == '\n':
            out.append('\\n')
        elif c == '"':
            out.append('\\"')
        elif 0x20 <= byte < 0x7f:
            out.append(c)
        else:
            out.append(f"\\{byte:03o}")
    return "".join(out)
