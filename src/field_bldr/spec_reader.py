# src/field_bldr/spec_reader.py

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml  # ensure PyYAML is installed

from .controller import FieldDefinitionController
from .errors import SpecError, ValidationError
from .field_types import FieldType, OrderPolicy
from .types import ReplayFailure


@dataclass
class FieldInstruction:
    """
    A field definition read from a YAML spec, ready to be replayed as
    controller commands.
    """
    source_path: Optional[Path]
    label: str = ""
    field_type: FieldType = FieldType.MULTI_SELECT
    required: bool = False
    default_value: str = ""
    choices: List[str] = field(default_factory=list)
    order_policy: OrderPolicy = OrderPolicy.ALPHABETICAL

    def __post_init__(self):
        if self.choices is None:
            self.choices = []


# Accept a few spellings for the enum-valued keys.
FIELD_TYPE_ALIASES: Dict[str, FieldType] = {
    "multi_select": FieldType.MULTI_SELECT,
    "multi-select": FieldType.MULTI_SELECT,
    "multiselect": FieldType.MULTI_SELECT,
}

ORDER_POLICY_ALIASES: Dict[str, OrderPolicy] = {
    "alphabetical": OrderPolicy.ALPHABETICAL,
    "display choices in alphabetical order": OrderPolicy.ALPHABETICAL,
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class SpecReader:
    """
    Reads field specs of the form::

        field:
          label: Sales Region
          type: multi_select
          required: true
          default: Asia
          choices: [Europe, Americas]
          order: alphabetical
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("field_bldr")

    def read_path(self, path: Union[str, Path]) -> FieldInstruction:
        p = Path(path)
        try:
            raw = yaml.safe_load(p.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise SpecError(f"{p}: not UTF-8 text ({e})") from e
        except yaml.YAMLError as e:
            raise SpecError(f"{p}: not valid YAML ({e})") from e
        instr = self.parse(raw, source_path=p)
        self.logger.info("Read field spec %r from %s (%d choices)", instr.label, p, len(instr.choices))
        return instr

    def parse(self, raw: Any, *, source_path: Optional[Path] = None) -> FieldInstruction:
        where = source_path or "<spec>"
        if not isinstance(raw, dict) or not isinstance(raw.get("field"), dict):
            raise SpecError(f"{where}: expected a top-level 'field' mapping")
        component: Dict[str, Any] = raw["field"]

        type_key = _as_text(component.get("type", FieldType.MULTI_SELECT.value)).strip().lower()
        if type_key not in FIELD_TYPE_ALIASES:
            raise SpecError(f"{where}: unsupported field type {type_key!r}")

        order_key = _as_text(component.get("order", OrderPolicy.ALPHABETICAL.value)).strip().lower()
        if order_key not in ORDER_POLICY_ALIASES:
            raise SpecError(f"{where}: unsupported order {order_key!r}")

        choices = component.get("choices") or []
        if not isinstance(choices, list):
            raise SpecError(f"{where}: 'choices' must be a list, got {type(choices).__name__}")

        required = component.get("required", False)
        if not isinstance(required, bool):
            raise SpecError(f"{where}: 'required' must be true/false, got {required!r}")

        return FieldInstruction(
            source_path=source_path,
            label=_as_text(component.get("label")),
            field_type=FIELD_TYPE_ALIASES[type_key],
            required=required,
            default_value=_as_text(component.get("default")),
            choices=[_as_text(c) for c in choices],
            order_policy=ORDER_POLICY_ALIASES[order_key],
        )


def apply_instruction(controller: FieldDefinitionController, instr: FieldInstruction) -> List[ReplayFailure]:
    """
    Reset the controller and replay a FieldInstruction as commands.

    Rejected choices are collected rather than aborting the replay, so the
    operator sees everything that was accepted plus a list of what wasn't.
    """
    source = instr.source_path.as_posix() if instr.source_path else None
    failures: List[ReplayFailure] = []

    controller.reset()
    controller.set_label(instr.label)
    controller.set_default_value(instr.default_value)
    controller.set_required(instr.required)

    for idx, choice in enumerate(instr.choices):
        controller.buffer_choice_input(choice)
        try:
            controller.add_buffered_choice()
        except ValidationError as e:
            failures.append({
                "source": source,
                "choice": choice,
                "choice_index": idx,
                "kind": e.kind,
                "reason": str(e),
            })

    return failures
