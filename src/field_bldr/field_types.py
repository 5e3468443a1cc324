from dataclasses import dataclass
from enum import Enum

from .. import config


class FieldType(str, Enum):
    MULTI_SELECT = "multi_select"


class OrderPolicy(str, Enum):
    ALPHABETICAL = "alphabetical"


@dataclass(frozen=True)
class FieldTypeSpec:
    key: FieldType                # internal key, also the YAML "type" value
    display_name: str             # human label (for logging / the type dropdown)
    wire_value: str               # value of "typeValue" in the submission document
    max_choices: int              # hard cap on committed choices
    min_choices: int              # choices needed to make sense of the field type


@dataclass(frozen=True)
class OrderPolicySpec:
    key: OrderPolicy              # internal key, also the YAML "order" value
    wire_value: str               # value of "order" in the submission document


FIELD_TYPES: dict[FieldType, FieldTypeSpec] = {
    FieldType.MULTI_SELECT: FieldTypeSpec(
        key=FieldType.MULTI_SELECT,
        display_name="Multi-Select",
        wire_value=config.MULTI_SELECT_WIRE,
        max_choices=config.MAX_CHOICES,
        min_choices=2,
    ),
}

ORDER_POLICIES: dict[OrderPolicy, OrderPolicySpec] = {
    OrderPolicy.ALPHABETICAL: OrderPolicySpec(
        key=OrderPolicy.ALPHABETICAL,
        wire_value=config.ALPHABETICAL_ORDER_WIRE,
    ),
}
