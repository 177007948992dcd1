"""
Static verifier function generator.

This package provides tools for:
- Collecting the constraints of operation verifiers and rewrite patterns
- Uniquing structurally identical constraints into shared functions
- Emitting those functions as C++ under collision-free names

Example schema:
    constraints:
      PositiveAttr:
        kind: attr
        condition: "$_self.getValue() > 0"
        summary: positive

    ops:
      - name: test.op_a
        cpp_namespace: "::mlir::test"
        attributes:
          - name: x
            constraint: PositiveAttr
"""

__version__ = "0.1.0"

from .constraints import (
    Constraint,
    ConstraintKind,
    LeafKind,
    NamedAttribute,
    NamedProperty,
    NamedRegion,
    NamedSuccessor,
    NamedTypeConstraint,
    OpDef,
    PatternLeaf,
)

from .fmt import (
    FmtContext,
    NO_SUBST_MARKER,
    escape_string,
    tgfmt,
)

from .registry import (
    ConstraintNotRegisteredError,
    ConstraintRegistry,
    can_unique_attr_constraint,
    can_unique_prop_constraint,
)

from .codegen import StaticVerifierFunctionEmitter

from .schema import Schema, load_schema, parse_schema
from .config import EmitterConfig, load_config

__all__ = [
    # Constraint model
    "Constraint",
    "ConstraintKind",
    "LeafKind",
    "NamedAttribute",
    "NamedProperty",
    "NamedRegion",
    "NamedSuccessor",
    "NamedTypeConstraint",
    "OpDef",
    "PatternLeaf",
    # Substitution
    "FmtContext",
    "NO_SUBST_MARKER",
    "escape_string",
    "tgfmt",
    # Registry
    "ConstraintNotRegisteredError",
    "ConstraintRegistry",
    "can_unique_attr_constraint",
    "can_unique_prop_constraint",
    # Code generation
    "StaticVerifierFunctionEmitter",
    # Input
    "Schema",
    "load_schema",
    "parse_schema",
    "EmitterConfig",
    "load_config",
]
