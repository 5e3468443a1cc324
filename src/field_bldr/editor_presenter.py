# src/field_bldr/editor_presenter.py

from __future__ import annotations

import queue
from pathlib import Path
from typing import Callable

from .controller import FieldDefinitionController
from .errors import SpecError, ValidationError
from .instrumentation import Cat, Signals
from .spec_reader import SpecReader, apply_instruction
from .types import SubmissionResult

Alert = Callable[[str], None]
Dispatch = Callable[[Callable[[], None]], None]

SUBMITTED_MESSAGE = "Form Submitted"
CANCEL_MESSAGE = "This is where we'd return to the app, if we had one!"


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class QueuedDispatch:
    """
    Dispatch target for GUIs: worker threads put callbacks on a queue and
    the GUI loop runs them from drain(), on its own thread.
    """

    def __init__(self) -> None:
        self._pending: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()

    def __call__(self, fn: Callable[[], None]) -> None:
        self._pending.put(fn)

    def drain(self) -> int:
        ran = 0
        while True:
            try:
                fn = self._pending.get_nowait()
            except queue.Empty:
                return ran
            fn()
            ran += 1


class FieldBuilderPresenter:
    """
    Translates user intents from a view into controller commands.

    Views own no field state of their own: they subscribe to the controller
    and redraw from each snapshot. Rejections come back as alerts carrying
    the user-facing message; submission results arrive through ``dispatch``
    so a GUI can hop back onto its own thread before alerting.
    """

    def __init__(
        self,
        controller: FieldDefinitionController,
        *,
        alert: Alert,
        reader: SpecReader | None = None,
        dispatch: Dispatch | None = None,
        on_close: Callable[[], None] | None = None,
        signals: Signals | None = None,
    ) -> None:
        self.controller = controller
        self.alert = alert
        self.reader = reader or SpecReader()
        self.dispatch = dispatch or _call_now
        self.on_close = on_close
        self.signals = signals or controller.signals
        self.last_result: SubmissionResult | None = None

    # --- plain inputs ---

    def on_label_changed(self, text: str) -> None:
        self.controller.set_label(text)

    def on_default_changed(self, text: str) -> None:
        self.controller.set_default_value(text)

    def on_required_toggled(self, checked: bool) -> None:
        self.controller.set_required(checked)

    def on_choice_typed(self, text: str) -> None:
        self.controller.buffer_choice_input(text)

    # --- buttons ---

    def on_add_choice(self) -> bool:
        try:
            self.controller.add_buffered_choice()
        except ValidationError as e:
            self.alert(str(e))
            return False
        return True

    def on_remove_choice(self) -> bool:
        try:
            self.controller.remove_last_choice()
        except ValidationError as e:
            self.alert(str(e))
            return False
        return True

    def on_save(self) -> bool:
        try:
            self.controller.submit(on_result=self._on_submission_result)
        except ValidationError as e:
            self.alert(str(e))
            return False
        return True

    def on_clear(self) -> None:
        self.controller.reset()

    def on_cancel(self) -> None:
        if self.on_close is not None:
            self.on_close()
            return
        self.alert(CANCEL_MESSAGE)

    def load_spec(self, path: str | Path) -> bool:
        try:
            instr = self.reader.read_path(path)
        except (OSError, SpecError) as e:
            self.signals.emit_signal(Cat.SPEC, f"Could not load spec: {e}", level="warning")
            self.alert(f"Could not load field spec: {e}")
            return False

        failures = apply_instruction(self.controller, instr)
        self.signals.emit_signal(
            Cat.SPEC,
            f"Loaded field spec {instr.label!r}",
            n=len(instr.choices),
            failed=len(failures) or None,
        )
        if failures:
            lines = [f"- {f['choice']!r}: {f['reason']}" for f in failures]
            self.alert("Some choices from the field spec were not added:\n" + "\n".join(lines))
        return True

    # --- transport callback (worker thread) ---

    def _on_submission_result(self, result: SubmissionResult) -> None:
        self.dispatch(lambda: self._show_result(result))

    def _show_result(self, result: SubmissionResult) -> None:
        self.last_result = result
        if result.ok:
            self.alert(SUBMITTED_MESSAGE)
        else:
            self.alert(f"Submit error: {result.error}. Form not delivered.")
