import ast

import pytest

from static_verifier_gen.fmt import (
    FmtContext,
    FmtElementType,
    NO_SUBST_MARKER,
    escape_string,
    parse_format,
    tgfmt,
)


def test_self_and_op_are_substituted() -> None:
    ctx = FmtContext().add_subst("_op", "*op").with_self("attr")

    assert tgfmt("$_self.getValue() > 0", ctx) == "attr.getValue() > 0"
    assert tgfmt("check($_op, $_self)", ctx) == "check(*op, attr)"


def test_unbound_placeholder_is_marked() -> None:
    ctx = FmtContext().with_self("attr")

    result = tgfmt("$_self == $lhs", ctx)

    assert result == f"attr == $lhs{NO_SUBST_MARKER}"


def test_no_context_marks_every_named_placeholder() -> None:
    assert tgfmt("$_self") == f"$_self{NO_SUBST_MARKER}"


def test_positional_placeholders() -> None:
    assert tgfmt("$0 + $1", None, "a", "b") == "a + b"
    assert tgfmt("$0 + $1", None, "a") == f"a + $1{NO_SUBST_MARKER}"


def test_dollar_escapes_and_lone_dollars() -> None:
    ctx = FmtContext().with_self("type")

    assert tgfmt("$$_self", ctx) == "$_self"
    assert tgfmt("cost $ 5 and $", ctx) == "cost $ 5 and $"


def test_identifier_stops_at_non_identifier_char() -> None:
    elements = parse_format("$_self.foo($_op)")

    assert [e.type for e in elements] == [
        FmtElementType.NAMED,
        FmtElementType.LITERAL,
        FmtElementType.NAMED,
        FmtElementType.LITERAL,
    ]
    assert elements[0].name == "_self"
    assert elements[2].name == "_op"


def test_builder_binding() -> None:
    ctx = FmtContext().with_builder("rewriter").with_op("*op")

    assert tgfmt("$_builder.getI32Type() == $_op.getType()", ctx) == (
        "rewriter.getI32Type() == *op.getType()"
    )


def test_context_rebinding_self() -> None:
    ctx = FmtContext().with_self("type")
    ctx.with_self("attr")

    assert ctx.get_subst_for("_self") == "attr"
    assert ctx.get_subst_for("missing") is None


@pytest.mark.parametrize(
    ("raw", "escaped"),
    [
        ("plain text", "plain text"),
        ('say "hi"', 'say \\"hi\\"'),
        ("a\nb", "a\\nb"),
        ("tab\there", "tab\\there"),
        ("back\\slash", "back\\\\slash"),
        ("bell\x07", "bell\\007"),
    ],
)
def test_escape_string(raw: str, escaped: str) -> None:
    assert escape_string(raw) == escaped


def test_escape_string_encodes_non_ascii_as_octal_bytes() -> None:
    assert escape_string("é") == "\\303\\251"


def test_escaped_summary_round_trips_through_string_literal() -> None:
    summary = 'must be "positive"\nand non-zero'

    literal = '"' + escape_string(summary) + '"'

    assert ast.literal_eval(literal) == summary
