#!/usr/bin/env python3
"""
Constraint model consumed by the static verifier generator.

A constraint is a boolean condition template plus a human readable summary.
Operations attach constraints to their operands/results, attributes,
properties, successors and regions; rewrite patterns attach them to matcher
leaves. Constraints compare by value, so two independently built constraints
with the same fields are the same constraint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


# ============================================================================
# Constraint kinds
# ============================================================================

class ConstraintKind(Enum):
    TYPE = "type"
    ATTR = "attr"
    PROP = "prop"
    SUCCESSOR = "successor"
    REGION = "region"

    @property
    def label(self) -> str:
        """Kind label used in generated symbol names."""
        return self.value

    @property
    def self_name(self) -> str:
        """Name the receiver is bound to inside a generated routine."""
        return self.value


class LeafKind(Enum):
    OPERAND = "operand"
    ATTR = "attr"
    PROP = "prop"


# Registry each pattern leaf kind feeds.
LEAF_CONSTRAINT_KINDS = {
    LeafKind.OPERAND: ConstraintKind.TYPE,
    LeafKind.ATTR: ConstraintKind.ATTR,
    LeafKind.PROP: ConstraintKind.PROP,
}


# ============================================================================
# Constraints
# ============================================================================

@dataclass(frozen=True)
class Constraint:
    """A single uniquable constraint.

    Equality and hashing cover every field, which makes the instance usable
    as the deduplication key of the registry.
    """
    kind: ConstraintKind
    condition_template: str = ""
    summary: str = ""
    interface_type: str = ""  # Properties only

    @property
    def has_predicate(self) -> bool:
        return bool(self.condition_template)

    def __str__(self):
        return f"{self.kind.label}({self.summary or self.condition_template})"


@dataclass
class NamedTypeConstraint:
    """An operand or result with its type constraint."""
    name: str
    constraint: Constraint

    def has_predicate(self) -> bool:
        return self.constraint.has_predicate


@dataclass
class NamedAttribute:
    name: str
    attr: Constraint
    is_derived: bool = False


@dataclass
class NamedProperty:
    name: str
    prop: Constraint


@dataclass
class NamedSuccessor:
    name: str
    constraint: Constraint


@dataclass
class NamedRegion:
    name: str
    constraint: Constraint


# ============================================================================
# Operation and pattern descriptions
# ============================================================================

@dataclass
class OpDef:
    """Constraint-relevant view of one operation definition."""
    name: str
    cpp_namespace: str = ""
    operands: List[NamedTypeConstraint] = field(default_factory=list)
    results: List[NamedTypeConstraint] = field(default_factory=list)
    attributes: List[NamedAttribute] = field(default_factory=list)
    properties: List[NamedProperty] = field(default_factory=list)
    successors: List[NamedSuccessor] = field(default_factory=list)
    regions: List[NamedRegion] = field(default_factory=list)

    def __str__(self):
        return self.name


@dataclass
class PatternLeaf:
    """A single matcher of a rewrite pattern's source tree."""
    kind: LeafKind
    constraint: Constraint

    def is_operand_matcher(self) -> bool:
        return self.kind is LeafKind.OPERAND

    def is_attr_matcher(self) -> bool:
        return self.kind is LeafKind.ATTR

    def is_prop_matcher(self) -> bool:
        return self.kind is LeafKind.PROP

    def as_constraint(self) -> Constraint:
        return self.constraint
