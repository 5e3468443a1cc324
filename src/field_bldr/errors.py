from enum import Enum


class ValidationErrorKind(str, Enum):
    DUPLICATE = "duplicate"
    TOO_MANY = "too_many"
    BLANK_INPUT = "blank_input"
    EMPTY_LIST = "empty_list"
    MISSING_LABEL = "missing_label"
    MISSING_DEFAULT = "missing_default"
    TOO_FEW_CHOICES = "too_few_choices"


# User-facing messages, shown verbatim by the editor views.
VALIDATION_MESSAGES: dict[ValidationErrorKind, str] = {
    ValidationErrorKind.DUPLICATE: "Duplicate choices: fields may not have duplicate choices.",
    ValidationErrorKind.TOO_MANY: "Too many choices: Each field is only allowed up to {max_choices} choices.",
    ValidationErrorKind.BLANK_INPUT: "Blank or null input not permitted for field choices.",
    ValidationErrorKind.EMPTY_LIST: "No more choices to remove",
    ValidationErrorKind.MISSING_LABEL: "Submit error: 'Field Label' field is required. Form not submitted.",
    ValidationErrorKind.MISSING_DEFAULT: "Submit error: 'Field Default Value' field is required. Form not submitted.",
    ValidationErrorKind.TOO_FEW_CHOICES: (
        "Submit error: 'Field Choices' must have at least 2 elements to produce a multi-select field. "
        "Form not submitted."
    ),
}


class ValidationError(RuntimeError):
    """Raised when a command is rejected; the field definition stays valid."""

    def __init__(self, kind: ValidationErrorKind, message: str | None = None, *, max_choices: int = 50):
        self.kind = kind
        if message is None:
            message = VALIDATION_MESSAGES[kind].format(max_choices=max_choices)
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class SpecError(ValueError):
    """Raised when a YAML field spec cannot be turned into a FieldInstruction."""
    pass


class TransportError(RuntimeError):
    """Raised inside the submission transport when a POST attempt fails."""

    def __init__(self, message: str, *, status_code: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable
