# src/field_bldr/field_definition.py

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from .field_types import FieldType, OrderPolicy
from .serialization import render_choices_preview


@dataclass(frozen=True)
class FieldDefinition:
    """
    Immutable snapshot of the field being edited.

    The controller never mutates a snapshot; every command publishes a new
    one with ``version`` bumped, so views can hold on to what they rendered
    without it changing underneath them.
    """
    label: str = ""
    field_type: FieldType = FieldType.MULTI_SELECT
    required: bool = False
    default_value: str = ""
    choices: tuple[str, ...] = ()
    pending_choice_input: str = ""
    choices_preview_text: str = ""
    order_policy: OrderPolicy = OrderPolicy.ALPHABETICAL
    version: int = 0

    @classmethod
    def initial(cls, *, version: int = 0) -> FieldDefinition:
        return cls(version=version)

    def with_choices(self, choices: Iterable[str]) -> FieldDefinition:
        """Replace choices and keep the preview text in step with them."""
        new_choices = tuple(choices)
        return replace(
            self,
            choices=new_choices,
            choices_preview_text=render_choices_preview(new_choices),
        )

    def evolve(self, **changes) -> FieldDefinition:
        return replace(self, **changes)
