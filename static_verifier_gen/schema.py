#!/usr/bin/env python3
"""
Loader for operation and pattern constraint schemas.

A schema is a YAML document listing reusable named constraints, the
operations whose verifiers use them and the leaves of rewrite patterns:

    constraints:
      PositiveAttr:
        kind: attr
        condition: "$_self.getValue() > 0"
        summary: positive

    ops:
      - name: test.op_a
        cpp_namespace: "::mlir::test"
        operands:
          - name: lhs
            constraint: {condition: "$_self.isInteger(32)", summary: "32-bit integer"}
        attributes:
          - name: x
            constraint: PositiveAttr

    patterns:
      - kind: attr
        constraint: PositiveAttr

A constraint reference is either the name of an entry of `constraints` or an
inline mapping. Inline constraints take their kind from where they are used.
"""

import yaml
import jsonschema
from pathlib import Path
from typing import Any, Dict, List, Union
from dataclasses import dataclass, field

from .constraints import (
    Constraint,
    ConstraintKind,
    LEAF_CONSTRAINT_KINDS,
    LeafKind,
    NamedAttribute,
    NamedProperty,
    NamedRegion,
    NamedSuccessor,
    NamedTypeConstraint,
    OpDef,
    PatternLeaf,
)


_CONSTRAINT_BODY = {
    "type": "object",
    "properties": {
        "condition": {"type": "string", "description": "Condition template"},
        "summary": {"type": "string", "description": "Human readable description"},
        "interface_type": {"type": "string", "description": "C++ type of a property"}
    },
    "additionalProperties": False
}

_CONSTRAINT_REF = {
    "oneOf": [
        {"type": "string", "minLength": 1},
        _CONSTRAINT_BODY
    ]
}

_NAMED_ENTRY = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "constraint": _CONSTRAINT_REF
    },
    "additionalProperties": False
}

_NAMED_ATTRIBUTE = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "constraint": _CONSTRAINT_REF,
        "derived": {"type": "boolean"}
    },
    "additionalProperties": False
}

# JSON Schema for validating constraint schema YAML files
OP_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Operation Constraint Schema",
    "description": "Constraints attached to operations and rewrite pattern leaves",
    "type": "object",
    "properties": {
        "constraints": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["kind"],
                "properties": {
                    "kind": {"type": "string", "enum": [k.value for k in ConstraintKind]},
                    "condition": {"type": "string"},
                    "summary": {"type": "string"},
                    "interface_type": {"type": "string"}
                },
                "additionalProperties": False
            }
        },
        "ops": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "cpp_namespace": {"type": "string"},
                    "operands": {"type": "array", "items": _NAMED_ENTRY},
                    "results": {"type": "array", "items": _NAMED_ENTRY},
                    "attributes": {"type": "array", "items": _NAMED_ATTRIBUTE},
                    "properties": {"type": "array", "items": _NAMED_ENTRY},
                    "successors": {"type": "array", "items": _NAMED_ENTRY},
                    "regions": {"type": "array", "items": _NAMED_ENTRY}
                },
                "additionalProperties": False
            }
        },
        "patterns": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["kind", "constraint"],
                "properties": {
                    "kind": {"type": "string", "enum": [k.value for k in LeafKind]},
                    "constraint": _CONSTRAINT_REF
                },
                "additionalProperties": False
            }
        }
    },
    "additionalProperties": False
}


_SECTION_ENTRY_NAMES = {
    'operands': "operand",
    'results': "result",
    'attributes': "attribute",
    'properties': "property",
    'successors': "successor",
    'regions': "region",
}


@dataclass
class Schema:
    """Operations and pattern leaves of one schema file."""
    ops: List[OpDef] = field(default_factory=list)
    patterns: List[PatternLeaf] = field(default_factory=list)


class _ConstraintResolver:
    """Turns constraint references into Constraint values."""

    def __init__(self, named: Dict[str, Dict[str, Any]], source: str):
        self.named = named
        self.source = source

    def resolve(self, ref: Union[str, Dict[str, Any], None], kind: ConstraintKind,
                where: str) -> Constraint:
        # No constraint: an unconstrained value
        if ref is None:
            return Constraint(kind)

        if isinstance(ref, str):
            body = self.named.get(ref)
            if body is None:
                raise ValueError(f"Invalid schema file {self.source}: unknown constraint '{ref}' in {where}")
            if body['kind'] != kind.value:
                raise ValueError(
                    f"Invalid schema file {self.source}: {body['kind']} constraint '{ref}' "
                    f"used as {kind.value} constraint in {where}")
        else:
            body = ref

        return Constraint(
            kind=kind,
            condition_template=body.get('condition', ""),
            summary=body.get('summary', ""),
            interface_type=body.get('interface_type', "") if kind is ConstraintKind.PROP else "",
        )


def _parse_op(data: Dict[str, Any], resolver: _ConstraintResolver) -> OpDef:
    op_name = data['name']

    def named(section: str, kind: ConstraintKind):
        for entry in data.get(section, []):
            where = f"{op_name} {_SECTION_ENTRY_NAMES[section]} '{entry['name']}'"
            yield entry, resolver.resolve(entry.get('constraint'), kind, where)

    op = OpDef(name=op_name, cpp_namespace=data.get('cpp_namespace', ""))
    op.operands = [NamedTypeConstraint(e['name'], c) for e, c in named('operands', ConstraintKind.TYPE)]
    op.results = [NamedTypeConstraint(e['name'], c) for e, c in named('results', ConstraintKind.TYPE)]
    op.attributes = [NamedAttribute(e['name'], c, e.get('derived', False))
                     for e, c in named('attributes', ConstraintKind.ATTR)]
    op.properties = [NamedProperty(e['name'], c) for e, c in named('properties', ConstraintKind.PROP)]
    op.successors = [NamedSuccessor(e['name'], c) for e, c in named('successors', ConstraintKind.SUCCESSOR)]
    op.regions = [NamedRegion(e['name'], c) for e, c in named('regions', ConstraintKind.REGION)]
    return op


def parse_schema(data: Any, source: str = "<string>") -> Schema:
    """
    Validate and convert a loaded YAML document.

    Raises:
        ValueError: If the document doesn't match OP_SCHEMA or references an
            unknown constraint
    """
    # An empty document describes nothing
    if data is None:
        data = {}

    try:
        jsonschema.validate(instance=data, schema=OP_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ValueError(f"Invalid schema file {source}: {e.message}") from e

    resolver = _ConstraintResolver(data.get('constraints', {}), source)
    schema = Schema()
    schema.ops = [_parse_op(op, resolver) for op in data.get('ops', [])]

    for i, leaf in enumerate(data.get('patterns', []), 1):
        leaf_kind = LeafKind(leaf['kind'])
        constraint = resolver.resolve(leaf['constraint'], LEAF_CONSTRAINT_KINDS[leaf_kind],
                                      f"pattern leaf #{i}")
        schema.patterns.append(PatternLeaf(leaf_kind, constraint))

    return schema


def load_schema(schema_path: Path) -> Schema:
    """Load and validate a constraint schema from a YAML file.

    Raises:
        ValueError: If the file is malformed or invalid
        FileNotFoundError: If file doesn't exist
    """
    with open(schema_path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid schema file {schema_path}: {e}") from e

    return parse_schema(data, str(schema_path))
