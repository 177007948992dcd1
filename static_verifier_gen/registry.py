#!/usr/bin/env python3
"""
Deduplicating constraint registry.

The registry keeps one insertion-ordered map per constraint kind, from a
constraint value to the name of the shared function generated for it. It
also holds the eligibility rules deciding which attribute and property
constraints may be extracted into a shared function at all.
"""

from typing import Dict, Iterator, Optional, Tuple

from .constraints import Constraint, ConstraintKind, NamedAttribute, NamedProperty
from .fmt import FmtContext, NO_SUBST_MARKER, tgfmt
from .naming import DEFAULT_SYMBOL_SCOPE, generate_unique_name


class ConstraintNotRegisteredError(LookupError):
    """A constraint that must have been collected was not found."""

    def __init__(self, kind: ConstraintKind, constraint: Constraint):
        super().__init__(f"expected to find a {kind.label} constraint: {constraint}")
        self.kind = kind
        self.constraint = constraint


# ============================================================================
# Eligibility
# ============================================================================

def can_unique_attr_constraint(attr: Constraint) -> bool:
    """
    Check whether an attribute constraint can live in a shared function.

    A shared function only has the attribute and the operation in scope.
    Conditions referencing anything else (operands, results, other
    attributes) need call-site specific accessors and cannot be shared.
    """
    ctx = FmtContext().with_self("attr").add_subst("_op", "*op")
    test = tgfmt(attr.condition_template, ctx)
    return NO_SUBST_MARKER not in test


def can_unique_prop_constraint(prop: Constraint) -> bool:
    """
    Check whether a property constraint can live in a shared function.

    Same scoping rule as attributes. Additionally the property needs an
    interface type to type the parameter with, and a literal "true" is not
    worth a function.
    """
    ctx = FmtContext().with_self("prop").add_subst("_op", "*op")
    test = tgfmt(prop.condition_template, ctx)
    return (NO_SUBST_MARKER not in test and test != "true"
            and bool(prop.interface_type))


def is_uniquable_attribute(named_attr: NamedAttribute) -> bool:
    return (named_attr.attr.has_predicate and not named_attr.is_derived
            and can_unique_attr_constraint(named_attr.attr))


def is_uniquable_property(named_prop: NamedProperty) -> bool:
    return named_prop.prop.has_predicate and can_unique_prop_constraint(named_prop.prop)


# ============================================================================
# Registry
# ============================================================================

class ConstraintRegistry:
    """Per-kind maps from constraint values to generated function names."""

    def __init__(self, unique_output_label: str, scope: str = DEFAULT_SYMBOL_SCOPE):
        self.unique_output_label = unique_output_label
        self.scope = scope
        self._maps: Dict[ConstraintKind, Dict[Constraint, str]] = {
            kind: {} for kind in ConstraintKind
        }

    def generate_name(self, kind: ConstraintKind, ordinal: int) -> str:
        return generate_unique_name(kind.label, self.unique_output_label, ordinal, self.scope)

    def register(self, kind: ConstraintKind, constraint: Constraint) -> str:
        """
        Register a constraint and return its function name.

        Registering an already known constraint returns the existing name
        without growing the map.
        """
        constraints = self._maps[kind]
        name = constraints.get(constraint)
        if name is None:
            # Ordinals start at 1: the size of the map with the new entry in it
            name = self.generate_name(kind, len(constraints) + 1)
            constraints[constraint] = name
        return name

    def resolve(self, kind: ConstraintKind, constraint: Constraint) -> Optional[str]:
        return self._maps[kind].get(constraint)

    def lookup(self, kind: ConstraintKind, constraint: Constraint) -> str:
        name = self.resolve(kind, constraint)
        if name is None:
            raise ConstraintNotRegisteredError(kind, constraint)
        return name

    def entries(self, kind: ConstraintKind) -> Iterator[Tuple[Constraint, str]]:
        return iter(list(self._maps[kind].items()))

    def count(self, kind: ConstraintKind) -> int:
        return len(self._maps[kind])

    def __len__(self):
        return sum(len(constraints) for constraints in self._maps.values())

    def __contains__(self, item: Tuple[ConstraintKind, Constraint]) -> bool:
        kind, constraint = item
        return constraint in self._maps[kind]
