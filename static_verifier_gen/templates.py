#!/usr/bin/env python3
"""
C++ code templates for shared constraint functions.

Every template is a str.format() string taking:

    {name}:      the unique function name
    {condition}: the substituted condition expression
    {summary}:   the escaped constraint summary

The property templates additionally take {interface_type} and
{template_decl}, the latter being empty or a "template <typename T>" line
for properties that are generic over their interface type. The pattern
template takes {receiver}, the typed receiver parameter.
"""

from typing import List, TextIO

from .constraints import ConstraintKind

GENERIC_INTERFACE_TYPE = "T"
GENERIC_TEMPLATE_DECL = f"template <typename {GENERIC_INTERFACE_TYPE}>\n"

# Type constraints may be called on the type of either operands or results.
TYPE_CONSTRAINT_CODE = """
static ::llvm::LogicalResult {name}(
    ::mlir::Operation *op, ::mlir::Type type, ::llvm::StringRef valueKind,
    unsigned valueIndex) {{
  if (!({condition})) {{
    return op->emitOpError(valueKind) << " #" << valueIndex
        << " must be {summary}, but got " << type;
  }}
  return ::mlir::success();
}}
"""

# Attribute constraints are called from ops only and may only reference
# `$_self` and `$_op`.
ATTR_CONSTRAINT_CODE = """
static ::llvm::LogicalResult {name}(
    ::mlir::Attribute attr, ::llvm::StringRef attrName, llvm::function_ref<::mlir::InFlightDiagnostic()> emitError) {{
  if (attr && !({condition}))
    return emitError() << "attribute '" << attrName
        << "' failed to satisfy constraint: {summary}";
  return ::mlir::success();
}}
static ::llvm::LogicalResult {name}(
    ::mlir::Operation *op, ::mlir::Attribute attr, ::llvm::StringRef attrName) {{
  return {name}(attr, attrName, [op]() {{
    return op->emitOpError();
  }});
}}
"""

PROP_CONSTRAINT_CODE = """
{template_decl}static ::llvm::LogicalResult {name}(
    {interface_type} prop, ::llvm::StringRef propName, llvm::function_ref<::mlir::InFlightDiagnostic()> emitError) {{
  if (!({condition}))
    return emitError() << "property '" << propName
        << "' failed to satisfy constraint: {summary}";
  return ::mlir::success();
}}
{template_decl}static ::llvm::LogicalResult {name}(
    ::mlir::Operation *op, {interface_type} prop, ::llvm::StringRef propName) {{
  return {name}(prop, propName, [op]() {{
    return op->emitOpError();
  }});
}}
"""

SUCCESSOR_CONSTRAINT_CODE = """
static ::llvm::LogicalResult {name}(
    ::mlir::Operation *op, ::mlir::Block *successor,
    ::llvm::StringRef successorName, unsigned successorIndex) {{
  if (!({condition})) {{
    return op->emitOpError("successor #") << successorIndex << " ('"
        << successorName << ")' failed to verify constraint: {summary}";
  }}
  return ::mlir::success();
}}
"""

# Callers pass in the region's name for the error message; unnamed regions
# drop the quoted name.
REGION_CONSTRAINT_CODE = """
static ::llvm::LogicalResult {name}(
    ::mlir::Operation *op, ::mlir::Region &region, ::llvm::StringRef regionName,
    unsigned regionIndex) {{
  if (!({condition})) {{
    return op->emitOpError("region #") << regionIndex
        << (regionName.empty() ? " " : " ('" + regionName + "') ")
        << "failed to verify constraint: {summary}";
  }}
  return ::mlir::success();
}}
"""

# Pattern guards report a match failure instead of an op diagnostic.
# {receiver} is "::mlir::Type type", "::mlir::Attribute attr" or "<T> prop".
PATTERN_CONSTRAINT_CODE = """
{template_decl}static ::llvm::LogicalResult {name}(
    ::mlir::PatternRewriter &rewriter, ::mlir::Operation *op, {receiver},
    ::llvm::StringRef failureStr) {{
  if (!({condition})) {{
    return rewriter.notifyMatchFailure(op, [&](::mlir::Diagnostic &diag) {{
      diag << failureStr << ": {summary}";
    }});
  }}
  return ::mlir::success();
}}
"""

OP_CONSTRAINT_CODE = {
    ConstraintKind.TYPE: TYPE_CONSTRAINT_CODE,
    ConstraintKind.ATTR: ATTR_CONSTRAINT_CODE,
    ConstraintKind.PROP: PROP_CONSTRAINT_CODE,
    ConstraintKind.SUCCESSOR: SUCCESSOR_CONSTRAINT_CODE,
    ConstraintKind.REGION: REGION_CONSTRAINT_CODE,
}

# Receiver parameter of pattern guards, by kind.
PATTERN_RECEIVERS = {
    ConstraintKind.TYPE: "::mlir::Type type",
    ConstraintKind.ATTR: "::mlir::Attribute attr",
}


class NamespaceEmitter:
    """Wrap emitted code in the C++ namespaces of a qualified name.

    Used as a context manager:

        with NamespaceEmitter(os, "::mlir::test"):
            os.write(code)
    """

    def __init__(self, os: TextIO, cpp_namespace: str):
        self.os = os
        self.namespaces: List[str] = [ns for ns in cpp_namespace.split("::") if ns]

    def __enter__(self) -> 'NamespaceEmitter':
        for ns in self.namespaces:
            self.os.write(f"namespace {ns} {{\n")
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            return False
        for ns in reversed(self.namespaces):
            self.os.write(f"}} // namespace {ns}\n")
        return False
