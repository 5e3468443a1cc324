# src/field_bldr/serialization.py

from __future__ import annotations

import json
from typing import Iterable, TYPE_CHECKING

from .field_types import FIELD_TYPES, ORDER_POLICIES
from .types import SubmissionDocument

if TYPE_CHECKING:
    from .field_definition import FieldDefinition


def render_choices_preview(choices: Iterable[str]) -> str:
    """
    Text shown in the read-only choices box: one choice per line,
    each followed by a newline (so a non-empty preview always ends in "\\n").
    """
    return "".join(f"{choice}\n" for choice in choices)


def parse_choices_preview(text: str) -> list[str]:
    """Inverse of render_choices_preview."""
    if not text:
        return []
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts = parts[:-1]
    return parts


def build_submission_document(definition: FieldDefinition) -> SubmissionDocument:
    """
    Map a (validated) field definition onto the collector's wire format.

    The caller is responsible for validation and for folding the default
    value into choices beforehand; this only reshapes.
    """
    return {
        "labelValue": definition.label,
        "typeValue": FIELD_TYPES[definition.field_type].wire_value,
        "required": definition.required,
        "defaultValue": definition.default_value,
        "choices": list(definition.choices),
        "order": ORDER_POLICIES[definition.order_policy].wire_value,
    }


def encode_document(document: SubmissionDocument) -> str:
    return json.dumps(document, ensure_ascii=False)
