import io
from collections.abc import Callable
from pathlib import Path

import pytest

from static_verifier_gen.codegen import StaticVerifierFunctionEmitter
from static_verifier_gen.constraints import (
    Constraint,
    ConstraintKind,
    NamedAttribute,
    NamedProperty,
    NamedRegion,
    NamedSuccessor,
    NamedTypeConstraint,
    OpDef,
)


@pytest.fixture
def make_constraint() -> Callable[..., Constraint]:
    def _make_constraint(
        kind: ConstraintKind,
        condition: str = "",
        summary: str = "",
        interface_type: str = "",
    ) -> Constraint:
        return Constraint(
            kind=kind,
            condition_template=condition,
            summary=summary,
            interface_type=interface_type,
        )

    return _make_constraint


@pytest.fixture
def positive_attr(make_constraint) -> Constraint:
    return make_constraint(ConstraintKind.ATTR, "$_self.getValue() > 0", "positive")


@pytest.fixture
def i32_type(make_constraint) -> Constraint:
    return make_constraint(ConstraintKind.TYPE, "$_self.isInteger(32)", "32-bit integer")


@pytest.fixture
def make_op() -> Callable[..., OpDef]:
    def _make_op(
        name: str = "test.op",
        *,
        cpp_namespace: str = "::mlir::test",
        operands: tuple[Constraint, ...] = (),
        results: tuple[Constraint, ...] = (),
        attributes: tuple[Constraint, ...] = (),
        properties: tuple[Constraint, ...] = (),
        successors: tuple[Constraint, ...] = (),
        regions: tuple[tuple[str, Constraint], ...] = (),
    ) -> OpDef:
        return OpDef(
            name=name,
            cpp_namespace=cpp_namespace,
            operands=[NamedTypeConstraint(f"operand{i}", c) for i, c in enumerate(operands)],
            results=[NamedTypeConstraint(f"result{i}", c) for i, c in enumerate(results)],
            attributes=[NamedAttribute(f"attr{i}", c) for i, c in enumerate(attributes)],
            properties=[NamedProperty(f"prop{i}", c) for i, c in enumerate(properties)],
            successors=[NamedSuccessor(f"succ{i}", c) for i, c in enumerate(successors)],
            regions=[NamedRegion(name, c) for name, c in regions],
        )

    return _make_op


@pytest.fixture
def make_emitter() -> Callable[..., tuple[StaticVerifierFunctionEmitter, io.StringIO]]:
    def _make_emitter(
        input_filename: str = "TestOps.td", tag: str = ""
    ) -> tuple[StaticVerifierFunctionEmitter, io.StringIO]:
        out = io.StringIO()
        return StaticVerifierFunctionEmitter(out, input_filename, tag), out

    return _make_emitter


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write_yaml(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write_yaml
