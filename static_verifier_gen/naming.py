#!/usr/bin/env python3
"""
Symbol names for generated verifier functions.

Generated files can be included into the same translation unit, so every
name carries a label derived from the input file name. Two emitters over
files with different base names, or with different tags, never produce the
same symbol.
"""

from pathlib import PurePath

DEFAULT_SYMBOL_SCOPE = "mlir_ods"


def _is_label_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == '_')


def get_unique_output_label(input_filename: str, tag: str = "") -> str:
    """
    Build the output scope label for one emitter.

    Args:
        input_filename: Path of the schema the output is generated from
        tag: Free text distinguishing emitters over the same file

    Returns:
        tag followed by the sanitized base name (directory and extension
        dropped). Bytes that are not alphanumeric or '_' are replaced by
        their uppercase hex value, e.g. "my-ops.td" -> "my2Dops".
    """
    base = PurePath(input_filename).stem if input_filename else ""

    label = tag
    for c in base:
        if _is_label_char(c):
            label += c
        else:
            label += "".join(f"{byte:X}" for byte in c.encode("utf-8"))
    return label


def generate_unique_name(kind_label: str, label: str, ordinal: int,
                         scope: str = DEFAULT_SYMBOL_SCOPE) -> str:
    """Name of the `ordinal`-th constraint function of a kind."""
    return f"__{scope}_local_{kind_label}_constraint_{label}{ordinal}"
