#!/usr/bin/env python3
"""
CLI entry point for static-verifier-gen package.

Allows running the tools via: python -m static_verifier_gen <command>
"""

import io
import sys
import argparse
from pathlib import Path


SELF_TEST_SCHEMA = """
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
"""


def run_self_test() -> int:
    """Push the built-in schema through the emitter."""
    from .schema import parse_schema
    from .codegen import StaticVerifierFunctionEmitter
    import yaml

    try:
        schema = parse_schema(yaml.safe_load(SELF_TEST_SCHEMA), "self-test")
        out = io.StringIO()
        emitter = StaticVerifierFunctionEmitter(out, "SelfTest.td")
        emitter.emit_op_constraints(schema.ops)
        emitter.emit_pattern_constraints(schema.patterns)
    except ValueError as e:
        print(f"✗ Test failed: {e}")
        return 1

    if len(emitter.registry) != 2:
        print(f"✗ Test failed: expected 2 uniqued constraints, found {len(emitter.registry)}")
        return 1
    print(f"✓ Built-in test passed! Uniqued {len(emitter.registry)} constraints")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="static-verifier-gen",
        description="Shared static verifier function generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a schema file
  python -m static_verifier_gen parse ops.yaml

  # Generate shared verifier functions
  python -m static_verifier_gen codegen ops.yaml OpsVerifiers.cpp.inc

  # Generate pattern guards only, under their own tag
  python -m static_verifier_gen codegen --patterns-only --tag Rewrites ops.yaml Rewrites.cpp.inc
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Parse command
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse and validate a schema file"
    )
    parse_parser.add_argument("input_file", help="Schema file to parse")
    parse_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed parse output"
    )

    # Codegen command
    codegen_parser = subparsers.add_parser(
        "codegen",
        help="Generate shared verifier functions from a schema"
    )
    codegen_parser.add_argument("input_file", help="Schema file to process")
    codegen_parser.add_argument("output_file", help="Output C++ file ('-' for stdout)")
    codegen_parser.add_argument("--config", help="Emitter configuration YAML file")
    codegen_parser.add_argument("--tag", help="Tag distinguishing emitters over the same schema")
    only_group = codegen_parser.add_mutually_exclusive_group()
    only_group.add_argument("--ops-only", action="store_true",
                            help="Only emit op verifier constraint functions")
    only_group.add_argument("--patterns-only", action="store_true",
                            help="Only emit rewrite pattern constraint functions")
    codegen_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="List every uniqued constraint"
    )

    # Test command
    subparsers.add_parser(
        "test",
        help="Run built-in tests"
    )

    # Version command
    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to appropriate handler
    if args.command == "parse":
        return parse_command(Path(args.input_file), args.verbose)

    elif args.command == "codegen":
        from .codegen import main as codegen_main
        codegen_argv = [args.input_file, args.output_file]
        if args.config:
            codegen_argv.extend(["--config", args.config])
        if args.tag is not None:
            codegen_argv.extend(["--tag", args.tag])
        if args.ops_only:
            codegen_argv.append("--ops-only")
        if args.patterns_only:
            codegen_argv.append("--patterns-only")
        if args.verbose:
            codegen_argv.append("-v")
        return codegen_main(codegen_argv)

    elif args.command == "test":
        return run_self_test()

    elif args.command == "version":
        from . import __version__
        print(f"static-verifier-gen version {__version__}")
        return 0

    return 0


def parse_command(input_path: Path, verbose: bool) -> int:
    from .schema import load_schema

    try:
        schema = load_schema(input_path)
    except FileNotFoundError:
        print(f"Error: File '{input_path}' not found")
        return 1
    except ValueError as e:
        print(f"✗ Parse error: {e}")
        return 1

    print(f"✓ Parsed {input_path} successfully!")
    print(f"Found {len(schema.ops)} ops and {len(schema.patterns)} pattern leaves")

    if verbose:
        for i, op in enumerate(schema.ops, 1):
            print(f"\n{i}. {op.name} ({op.cpp_namespace or 'global namespace'}):")
            for value in op.operands:
                print(f"   operand {value.name}: {value.constraint}")
            for value in op.results:
                print(f"   result {value.name}: {value.constraint}")
            for named_attr in op.attributes:
                derived = " (derived)" if named_attr.is_derived else ""
                print(f"   attribute {named_attr.name}: {named_attr.attr}{derived}")
            for named_prop in op.properties:
                print(f"   property {named_prop.name}: {named_prop.prop}")
            for successor in op.successors:
                print(f"   successor {successor.name}: {successor.constraint}")
            for region in op.regions:
                print(f"   region {region.name}: {region.constraint}")
        for i, leaf in enumerate(schema.patterns, 1):
            print(f"\nPattern leaf {i}: {leaf.kind.value} {leaf.constraint}")
    else:
        print("\nUse -v for detailed output")

    return 0


if __name__ == "__main__":
    sys.exit(main())
