from __future__ import annotations

from pathlib import Path

import pytest

from src.field_bldr.errors import SpecError, ValidationErrorKind
from src.field_bldr.field_types import FieldType, OrderPolicy
from src.field_bldr.spec_reader import SpecReader, apply_instruction

SPEC = """
field:
  label: Sales Region
  type: Multi-Select
  required: true
  default: Asia
  choices:
    - Europe
    - "  Americas "
    - Europe
    - "   "
  order: alphabetical
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "field.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_read_path_builds_instruction(tmp_path):
    path = _write(tmp_path, SPEC)
    instr = SpecReader().read_path(path)

    assert instr.source_path == path
    assert instr.label == "Sales Region"
    assert instr.field_type == FieldType.MULTI_SELECT
    assert instr.order_policy == OrderPolicy.ALPHABETICAL
    assert instr.required is True
    assert instr.default_value == "Asia"
    assert instr.choices == ["Europe", "  Americas ", "Europe", "   "]


def test_defaults_when_keys_missing():
    instr = SpecReader().parse({"field": {"label": "Region"}})
    assert instr.field_type == FieldType.MULTI_SELECT
    assert instr.order_policy == OrderPolicy.ALPHABETICAL
    assert instr.required is False
    assert instr.default_value == ""
    assert instr.choices == []


def test_numeric_choices_become_text():
    instr = SpecReader().parse({"field": {"label": "Size", "choices": [1, 2.5]}})
    assert instr.choices == ["1", "2.5"]


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [],
        {"fields": {}},
        {"field": {"type": "dropdown"}},
        {"field": {"order": "random"}},
        {"field": {"choices": "Europe"}},
        {"field": {"required": "yes"}},
    ],
)
def test_malformed_specs_raise(raw):
    with pytest.raises(SpecError):
        SpecReader().parse(raw)


def test_invalid_yaml_raises_spec_error(tmp_path):
    path = _write(tmp_path, "field: [unclosed")
    with pytest.raises(SpecError):
        SpecReader().read_path(path)


def test_non_utf8_file_raises_spec_error(tmp_path):
    path = tmp_path / "field.yml"
    path.write_bytes(b"field:\n  label: R\xe9gion\n")

    with pytest.raises(SpecError, match="not UTF-8 text"):
        SpecReader().read_path(path)


def test_apply_instruction_replays_and_collects_failures(controller, tmp_path):
    controller.set_label("old")
    controller.buffer_choice_input("leftover")
    instr = SpecReader().read_path(_write(tmp_path, SPEC))

    failures = apply_instruction(controller, instr)

    snap = controller.snapshot
    assert snap.label == "Sales Region"
    assert snap.default_value == "Asia"
    assert snap.required is True
    assert snap.choices == ("Europe", "Americas")
    assert snap.pending_choice_input == ""
    assert [(f["choice_index"], f["kind"]) for f in failures] == [
        (2, ValidationErrorKind.DUPLICATE),
        (3, ValidationErrorKind.BLANK_INPUT),
    ]
    assert all(f["source"].endswith("field.yml") for f in failures)


def test_bundled_example_spec_loads():
    path = Path(__file__).resolve().parents[1] / "src" / "specs" / "sales_region.yml"
    instr = SpecReader().read_path(path)
    assert instr.label == "Sales Region"
    assert "Asia" not in instr.choices
