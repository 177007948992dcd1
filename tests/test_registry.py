import pytest

from static_verifier_gen.constraints import ConstraintKind, NamedAttribute, NamedProperty
from static_verifier_gen.registry import (
    ConstraintNotRegisteredError,
    ConstraintRegistry,
    can_unique_attr_constraint,
    can_unique_prop_constraint,
    is_uniquable_attribute,
    is_uniquable_property,
)


def test_register_is_idempotent(positive_attr) -> None:
    registry = ConstraintRegistry("foo")

    first = registry.register(ConstraintKind.ATTR, positive_attr)
    second = registry.register(ConstraintKind.ATTR, positive_attr)

    assert first == second == "__mlir_ods_local_attr_constraint_foo1"
    assert registry.count(ConstraintKind.ATTR) == 1


def test_structurally_equal_constraints_share_a_name(make_constraint) -> None:
    registry = ConstraintRegistry("foo")
    a = make_constraint(ConstraintKind.TYPE, "$_self.isF32()", "f32")
    b = make_constraint(ConstraintKind.TYPE, "$_self.isF32()", "f32")

    assert a is not b
    assert registry.register(ConstraintKind.TYPE, a) == registry.register(ConstraintKind.TYPE, b)


def test_distinct_constraints_get_distinct_dense_names(make_constraint) -> None:
    registry = ConstraintRegistry("foo")
    names = [
        registry.register(ConstraintKind.TYPE, make_constraint(ConstraintKind.TYPE, f"c{i}", "s"))
        for i in range(3)
    ]

    assert names == [
        "__mlir_ods_local_type_constraint_foo1",
        "__mlir_ods_local_type_constraint_foo2",
        "__mlir_ods_local_type_constraint_foo3",
    ]


def test_summary_is_part_of_identity(make_constraint) -> None:
    registry = ConstraintRegistry("foo")
    a = make_constraint(ConstraintKind.TYPE, "$_self.isF32()", "f32")
    b = make_constraint(ConstraintKind.TYPE, "$_self.isF32()", "32-bit float")

    assert registry.register(ConstraintKind.TYPE, a) != registry.register(ConstraintKind.TYPE, b)


def test_ordinals_are_per_kind(make_constraint) -> None:
    registry = ConstraintRegistry("foo")

    registry.register(ConstraintKind.TYPE, make_constraint(ConstraintKind.TYPE, "a"))
    region_name = registry.register(ConstraintKind.REGION, make_constraint(ConstraintKind.REGION, "a"))

    assert region_name == "__mlir_ods_local_region_constraint_foo1"
    assert len(registry) == 2


def test_resolve_does_not_register(positive_attr) -> None:
    registry = ConstraintRegistry("foo")

    assert registry.resolve(ConstraintKind.ATTR, positive_attr) is None
    assert registry.count(ConstraintKind.ATTR) == 0
    assert (ConstraintKind.ATTR, positive_attr) not in registry


def test_lookup_of_unregistered_constraint_raises(i32_type) -> None:
    registry = ConstraintRegistry("foo")

    with pytest.raises(ConstraintNotRegisteredError) as exc_info:
        registry.lookup(ConstraintKind.TYPE, i32_type)

    assert exc_info.value.kind is ConstraintKind.TYPE
    assert isinstance(exc_info.value, LookupError)


def test_entries_keep_insertion_order(make_constraint) -> None:
    registry = ConstraintRegistry("foo")
    constraints = [make_constraint(ConstraintKind.SUCCESSOR, cond) for cond in ("z", "a", "m")]
    for constraint in constraints:
        registry.register(ConstraintKind.SUCCESSOR, constraint)

    assert [c for c, _ in registry.entries(ConstraintKind.SUCCESSOR)] == constraints


def test_attr_referencing_only_self_and_op_is_uniquable(make_constraint) -> None:
    attr = make_constraint(ConstraintKind.ATTR, "$_self.getValue() > 0 && $_op.getNumOperands()")

    assert can_unique_attr_constraint(attr)


def test_attr_referencing_an_operand_is_not_uniquable(make_constraint) -> None:
    attr = make_constraint(ConstraintKind.ATTR, "$_self.getType() == $lhs.getType()")

    assert not can_unique_attr_constraint(attr)


def test_derived_or_unconstrained_attributes_are_not_uniquable(positive_attr, make_constraint) -> None:
    assert is_uniquable_attribute(NamedAttribute("x", positive_attr))
    assert not is_uniquable_attribute(NamedAttribute("x", positive_attr, is_derived=True))
    assert not is_uniquable_attribute(NamedAttribute("x", make_constraint(ConstraintKind.ATTR)))


@pytest.mark.parametrize(
    ("condition", "interface_type", "expected"),
    [
        ("$_self > 0", "int64_t", True),
        ("true", "int64_t", False),
        ("$_self > 0", "", False),
        ("$_self > $other", "int64_t", False),
    ],
)
def test_can_unique_prop_constraint(make_constraint, condition: str, interface_type: str,
                                    expected: bool) -> None:
    prop = make_constraint(ConstraintKind.PROP, condition, "summary", interface_type)

    assert can_unique_prop_constraint(prop) is expected


def test_unconstrained_property_is_not_uniquable(make_constraint) -> None:
    prop = make_constraint(ConstraintKind.PROP, "", "", "int64_t")

    assert not is_uniquable_property(NamedProperty("p", prop))
