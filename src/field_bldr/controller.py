# controller.py
from __future__ import annotations

from typing import Callable

from .errors import ValidationError
from .field_definition import FieldDefinition
from .field_types import FIELD_TYPES
from .instrumentation import Cat, Signals
from .serialization import build_submission_document, encode_document
from .submission_dump import SubmissionDumper
from .timing import phase_timer
from .transport import SubmissionTransport
from .types import SubmissionCallback, SubmissionDocument
from .validation import check_choice_addition, check_choice_removal, check_submission

SnapshotListener = Callable[[FieldDefinition], None]


class FieldDefinitionController:
    """
    Owns the FieldDefinition being edited and applies commands to it.

    Commands run one at a time. Each one leaves a valid definition behind,
    publishes the resulting snapshot to every subscriber (rejected commands
    included) and then, on rejection, raises ValidationError.
    """

    def __init__(
        self,
        transport: SubmissionTransport,
        *,
        signals: Signals | None = None,
        dumper: SubmissionDumper | None = None,
    ):
        self.transport = transport
        self.signals = signals or Signals()
        self.dumper = dumper
        self._state = FieldDefinition.initial()
        self._listeners: list[SnapshotListener] = []

    # --- observation ---

    @property
    def snapshot(self) -> FieldDefinition:
        return self._state

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, new_state: FieldDefinition, *, cmd: str) -> FieldDefinition:
        self._state = new_state.evolve(version=self._state.version + 1)
        self.signals.counters.inc(f"cmd.{cmd}")
        self.signals.emit_trace(Cat.EDIT, "Snapshot published", cmd=cmd, v=self._state.version)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _reject(self, state: FieldDefinition, err: ValidationError, *, cmd: str, cat: Cat) -> None:
        self.signals.counters.inc(f"rejected.{err.kind.value}")
        self.signals.emit_signal(cat, f"Rejected: {err}", level="warning", cmd=cmd, kind=err.kind.value)
        self._commit(state, cmd=cmd)

    # --- setters ---

    def set_label(self, text: str) -> FieldDefinition:
        return self._commit(self._state.evolve(label=text or ""), cmd="set_label")

    def set_default_value(self, text: str) -> FieldDefinition:
        return self._commit(self._state.evolve(default_value=text or ""), cmd="set_default_value")

    def set_required(self, required: bool) -> FieldDefinition:
        return self._commit(self._state.evolve(required=bool(required)), cmd="set_required")

    def buffer_choice_input(self, text: str) -> FieldDefinition:
        self.signals.emit_diag(Cat.CHOICE, "Buffer updated", key="CHOICE.buffer", n=len(text or ""))
        return self._commit(self._state.evolve(pending_choice_input=text or ""), cmd="buffer_choice_input")

    # --- choices ---

    def add_buffered_choice(self) -> FieldDefinition:
        state = self._state
        cleared = state.evolve(pending_choice_input="")
        spec = FIELD_TYPES[state.field_type]
        try:
            value = check_choice_addition(
                state.choices,
                state.pending_choice_input,
                max_choices=spec.max_choices,
            )
        except ValidationError as e:
            self._reject(cleared, e, cmd="add_buffered_choice", cat=Cat.CHOICE)
            raise

        self.signals.emit_signal(Cat.CHOICE, f"Added choice {value!r}", n=len(state.choices) + 1)
        return self._commit(cleared.with_choices(state.choices + (value,)), cmd="add_buffered_choice")

    def remove_last_choice(self) -> FieldDefinition:
        state = self._state
        cleared = state.evolve(pending_choice_input="")
        try:
            check_choice_removal(state.choices)
        except ValidationError as e:
            self._reject(cleared, e, cmd="remove_last_choice", cat=Cat.CHOICE)
            raise

        removed = state.choices[-1]
        self.signals.emit_signal(Cat.CHOICE, f"Removed choice {removed!r}", n=len(state.choices) - 1)
        return self._commit(cleared.with_choices(state.choices[:-1]), cmd="remove_last_choice")

    def reset(self) -> FieldDefinition:
        self.signals.emit_signal(Cat.RESET, "Field definition cleared")
        return self._commit(FieldDefinition.initial(), cmd="reset")

    # --- submission ---

    def submit(self, on_result: SubmissionCallback | None = None) -> SubmissionDocument:
        """
        Validate the definition and hand the resulting document to the transport.

        The default value is folded into the choices (and stays there) when it
        is missing from them. The transport result goes to ``on_result``, not
        back into the controller; state is left as-is after a successful submit.
        """
        state = self._state
        cleared = state.evolve(pending_choice_input="")
        try:
            final_choices = check_submission(state)
        except ValidationError as e:
            self._reject(cleared, e, cmd="submit", cat=Cat.SUBMIT)
            raise

        if final_choices != state.choices:
            self.signals.emit_signal(
                Cat.SUBMIT,
                f"Default value {state.default_value!r} appended to choices",
                n=len(final_choices),
            )
            cleared = cleared.with_choices(final_choices)

        committed = self._commit(cleared, cmd="submit")
        document = build_submission_document(committed)
        self.signals.emit_signal(Cat.SUBMIT, encode_document(document), v=committed.version)

        if self.dumper is not None:
            self.dumper.dump(document)

        with phase_timer(self.signals, "hand-off to transport", cat=Cat.SUBMIT):
            self.transport.send(document, on_result=on_result)
        return document
