#!/usr/bin/env python3
"""
Generate shared static verifier functions from constraint schemas.

This script:
1. Loads the schema describing operations and rewrite pattern leaves
2. Collects every constraint that can be extracted into a shared function,
   uniquing structurally identical constraints
3. Emits one C++ function per unique constraint, named so that several
   generated files can be included together

Other generators look up the function of a constraint with the
get_*_constraint_fn methods and call it instead of inlining the check.
"""

import sys
import argparse
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO

from .config import load_config
from .constraints import Constraint, ConstraintKind, OpDef, PatternLeaf, LEAF_CONSTRAINT_KINDS
from .fmt import FmtContext, escape_string, tgfmt
from .naming import DEFAULT_SYMBOL_SCOPE, get_unique_output_label
from .registry import ConstraintRegistry, is_uniquable_attribute, is_uniquable_property
from .schema import load_schema
from .templates import (
    GENERIC_INTERFACE_TYPE,
    GENERIC_TEMPLATE_DECL,
    NamespaceEmitter,
    OP_CONSTRAINT_CODE,
    PATTERN_CONSTRAINT_CODE,
    PATTERN_RECEIVERS,
)


class StaticVerifierFunctionEmitter:
    """
    Collects constraints and emits one shared verifier function per unique
    constraint.

    One emitter is scoped to one output file. Its registry is plain mutable
    state: collect everything before emitting, and don't share an emitter
    between concurrent runs.
    """

    def __init__(self, os: TextIO, input_filename: str, tag: str = "",
                 scope: str = DEFAULT_SYMBOL_SCOPE):
        self.os = os
        self.unique_output_label = get_unique_output_label(input_filename, tag)
        self.registry = ConstraintRegistry(self.unique_output_label, scope)

    # ------------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------------

    def emit_op_constraints(self, op_defs: Sequence[OpDef]):
        """Collect and emit the constraint functions of op verifiers.

        The functions are wrapped in the C++ namespace of the first op.
        """
        if not op_defs:
            return

        self.collect_op_constraints(op_defs)
        with NamespaceEmitter(self.os, op_defs[0].cpp_namespace):
            for kind in ConstraintKind:
                self._emit_constraints(kind)

    def emit_pattern_constraints(self, leaves: Sequence[PatternLeaf]):
        """Collect and emit the constraint functions of rewrite pattern guards."""
        self.collect_pattern_constraints(leaves)
        self._emit_pattern_constraints()

    # ------------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------------

    def get_type_constraint_fn(self, constraint: Constraint) -> str:
        return self.registry.lookup(ConstraintKind.TYPE, constraint)

    def get_attr_constraint_fn(self, constraint: Constraint) -> Optional[str]:
        """Not every attribute constraint can be uniqued; None means inline it."""
        return self.registry.resolve(ConstraintKind.ATTR, constraint)

    def get_prop_constraint_fn(self, constraint: Constraint) -> Optional[str]:
        """Not every property constraint can be uniqued; None means inline it."""
        return self.registry.resolve(ConstraintKind.PROP, constraint)

    def get_successor_constraint_fn(self, constraint: Constraint) -> str:
        return self.registry.lookup(ConstraintKind.SUCCESSOR, constraint)

    def get_region_constraint_fn(self, constraint: Constraint) -> str:
        return self.registry.lookup(ConstraintKind.REGION, constraint)

    # ------------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------------

    def _collect_constraint(self, kind: ConstraintKind, constraint: Constraint):
        self.registry.register(kind, constraint)

    def collect_op_constraints(self, op_defs: Iterable[OpDef]):
        for op in op_defs:
            for value in list(op.operands) + list(op.results):
                if value.has_predicate():
                    self._collect_constraint(ConstraintKind.TYPE, value.constraint)

            for named_attr in op.attributes:
                if is_uniquable_attribute(named_attr):
                    self._collect_constraint(ConstraintKind.ATTR, named_attr.attr)

            # Trivial and call-site specific property constraints stay inline
            for named_prop in op.properties:
                if is_uniquable_property(named_prop):
                    self._collect_constraint(ConstraintKind.PROP, named_prop.prop)

            for successor in op.successors:
                if successor.constraint.has_predicate:
                    self._collect_constraint(ConstraintKind.SUCCESSOR, successor.constraint)

            for region in op.regions:
                if region.constraint.has_predicate:
                    self._collect_constraint(ConstraintKind.REGION, region.constraint)

    def collect_pattern_constraints(self, leaves: Iterable[PatternLeaf]):
        """
        Register the constraints of pattern matcher leaves.

        Leaves share the registry with op verifiers, so a pattern guard and an
        op verifier checking the same constraint call the same function.
        """
        for leaf in leaves:
            kind = LEAF_CONSTRAINT_KINDS.get(leaf.kind)
            if kind is None:
                raise ValueError(f"Pattern leaf is not an operand, attribute or property matcher: {leaf}")

            constraint = leaf.as_constraint()
            if constraint.has_predicate:
                self._collect_constraint(kind, constraint)

    # ------------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------------

    def _emit_constraints(self, kind: ConstraintKind):
        ctx = FmtContext().add_subst("_op", "*op").with_self(kind.self_name)
        code_template = OP_CONSTRAINT_CODE[kind]

        for constraint, name in self.registry.entries(kind):
            fields = dict(
                name=name,
                condition=tgfmt(constraint.condition_template, ctx),
                summary=escape_string(constraint.summary),
            )
            if kind is ConstraintKind.PROP:
                fields.update(self._interface_type_fields(constraint))
            self.os.write(code_template.format(**fields))

    def _emit_pattern_constraints(self):
        ctx = FmtContext().add_subst("_op", "*op").with_builder("rewriter")

        for kind in (ConstraintKind.TYPE, ConstraintKind.ATTR, ConstraintKind.PROP):
            ctx.with_self(kind.self_name)
            for constraint, name in self.registry.entries(kind):
                fields = dict(template_decl="")
                if kind is ConstraintKind.PROP:
                    fields.update(self._interface_type_fields(constraint))
                    receiver = f"{fields.pop('interface_type')} prop"
                else:
                    receiver = PATTERN_RECEIVERS[kind]

                self.os.write(PATTERN_CONSTRAINT_CODE.format(
                    name=name,
                    condition=tgfmt(constraint.condition_template, ctx),
                    summary=escape_string(constraint.summary),
                    receiver=receiver,
                    **fields,
                ))

    @staticmethod
    def _interface_type_fields(constraint: Constraint) -> dict:
        # Constraints that are generic over multiple interface types are
        # templatized under the assumption that they'll be used correctly.
        if constraint.interface_type:
            return dict(interface_type=constraint.interface_type, template_decl="")
        return dict(interface_type=GENERIC_INTERFACE_TYPE, template_decl=GENERIC_TEMPLATE_DECL)


def format_registry(registry: ConstraintRegistry) -> List[str]:
    """One line per registered constraint, for verbose output."""
    lines = []
    for kind in ConstraintKind:
        for constraint, name in registry.entries(kind):
            lines.append(f"  {name}: {constraint.summary or constraint.condition_template}")
    return lines


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description='Generate shared static verifier functions from a constraint schema'
    )
    parser.add_argument(
        'input_file', help='YAML schema describing ops and pattern leaves')
    parser.add_argument(
        'output_file', help="Output C++ file ('-' for stdout)")
    parser.add_argument('--config', type=Path,
                        help='Emitter configuration YAML file (default: builtin defaults)')
    parser.add_argument('--tag',
                        help='Tag distinguishing emitters over the same schema')
    only_group = parser.add_mutually_exclusive_group()
    only_group.add_argument('--ops-only', action='store_true',
                            help='Only emit op verifier constraint functions')
    only_group.add_argument('--patterns-only', action='store_true',
                            help='Only emit rewrite pattern constraint functions')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='List every uniqued constraint')

    args = parser.parse_args(argv)
    to_stdout = args.output_file == '-'
    # Status output goes to stderr when the code itself goes to stdout
    log = sys.stderr if to_stdout else sys.stdout

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=log)
        return 1

    if args.tag is not None:
        config.tag = args.tag
    if args.ops_only:
        config.emit_patterns = False
    if args.patterns_only:
        config.emit_ops = False

    input_path = Path(args.input_file)
    print(f"Parsing {input_path}...", file=log)
    try:
        schema = load_schema(input_path)
    except FileNotFoundError:
        print(f"Error: File '{input_path}' not found", file=log)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=log)
        return 1

    print(f"Found {len(schema.ops)} ops and {len(schema.patterns)} pattern leaves", file=log)
    if not config.emit_ops and not config.emit_patterns:
        print("Warning: Both op and pattern emission are disabled, output will be empty", file=log)

    out = sys.stdout if to_stdout else open(args.output_file, 'w')
    try:
        emitter = StaticVerifierFunctionEmitter(
            out, config.label_filename(input_path), config.tag, config.symbol_scope)
        if config.emit_ops:
            emitter.emit_op_constraints(schema.ops)
        if config.emit_patterns:
            emitter.emit_pattern_constraints(schema.patterns)
    finally:
        if not to_stdout:
            out.close()

    counts = ", ".join(f"{emitter.registry.count(kind)} {kind.label}" for kind in ConstraintKind)
    print(f"Uniqued {len(emitter.registry)} constraints ({counts})", file=log)
    if args.verbose:
        for line in format_registry(emitter.registry):
            print(line, file=log)

    if not to_stdout:
        print(f"Successfully wrote verifier functions to {args.output_file}", file=log)
    return 0


if __name__ == '__main__':
    sys.exit(main())
