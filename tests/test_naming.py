import pytest

from static_verifier_gen.naming import generate_unique_name, get_unique_output_label


@pytest.mark.parametrize(
    ("filename", "tag", "label"),
    [
        ("foo.td", "", "foo"),
        ("include/mlir/Dialect/Foo.td", "", "Foo"),
        ("foo.td", "Ops", "Opsfoo"),
        ("my-ops.td", "", "my2Dops"),
        ("my.ops.td", "", "my2Eops"),
        ("snake_case.td", "", "snake_case"),
        ("", "Tag", "Tag"),
    ],
)
def test_get_unique_output_label(filename: str, tag: str, label: str) -> None:
    assert get_unique_output_label(filename, tag) == label


def test_label_hex_encodes_non_ascii() -> None:
    assert get_unique_output_label("é.td") == "C3A9"


def test_generate_unique_name_format() -> None:
    assert generate_unique_name("attr", "Opsfoo", 3) == "__mlir_ods_local_attr_constraint_Opsfoo3"
    assert generate_unique_name("type", "foo", 1, scope="my_scope") == (
        "__my_scope_local_type_constraint_foo1"
    )


def test_different_files_give_different_labels() -> None:
    assert get_unique_output_label("foo.td", "X") != get_unique_output_label("bar.td", "X")
    assert get_unique_output_label("foo.td", "A") != get_unique_output_label("foo.td", "B")
