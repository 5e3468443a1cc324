# src/field_bldr/validation.py

from __future__ import annotations

from typing import Sequence

from .errors import ValidationError, ValidationErrorKind
from .field_definition import FieldDefinition
from .field_types import FIELD_TYPES


def is_blank(text: str | None) -> bool:
    return not (text or "").strip()


def check_choice_addition(choices: Sequence[str], raw_input: str, *, max_choices: int) -> str:
    """
    Validate a buffered choice against the committed list.

    Returns the trimmed value to append. Checks run in a fixed priority:
    duplicate, then list full, then blank.
    """
    attempted = (raw_input or "").strip()

    if attempted in choices:
        raise ValidationError(ValidationErrorKind.DUPLICATE)

    if len(choices) >= max_choices:
        raise ValidationError(ValidationErrorKind.TOO_MANY, max_choices=max_choices)

    if not attempted:
        raise ValidationError(ValidationErrorKind.BLANK_INPUT)

    return attempted


def check_choice_removal(choices: Sequence[str]) -> None:
    if len(choices) <= 0:
        raise ValidationError(ValidationErrorKind.EMPTY_LIST)


def check_submission(definition: FieldDefinition) -> tuple[str, ...]:
    """
    Validate a definition for submission and return the final choices list.

    The default value is appended to the choices when it is not already one
    of them; nothing else about the definition is changed.
    """
    spec = FIELD_TYPES[definition.field_type]
    label = definition.label
    default_value = definition.default_value
    choices = tuple(definition.choices)

    if is_blank(label):
        raise ValidationError(ValidationErrorKind.MISSING_LABEL)

    if is_blank(default_value):
        raise ValidationError(ValidationErrorKind.MISSING_DEFAULT)

    # Unreachable while the default value is mandatory; kept as written.
    if len(choices) < spec.min_choices and not default_value:
        raise ValidationError(ValidationErrorKind.TOO_FEW_CHOICES)

    if default_value not in choices:
        if len(choices) >= spec.max_choices:
            raise ValidationError(ValidationErrorKind.TOO_MANY, max_choices=spec.max_choices)
        choices = choices + (default_value,)

    return choices
