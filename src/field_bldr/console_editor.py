# src/field_bldr/console_editor.py

from __future__ import annotations

from typing import Callable

from .controller import FieldDefinitionController
from .editor_presenter import FieldBuilderPresenter
from .field_definition import FieldDefinition
from .field_types import FIELD_TYPES, ORDER_POLICIES
from .spec_reader import SpecReader

HELP_TEXT = """Commands:
  label <text>       set the field label
  default <text>     set the default value
  required on|off    toggle the required flag
  choice <text>      type into the choice box (not committed yet)
  add [text]         commit the typed choice (or <text>)
  remove             remove the most recently added choice
  save               submit the field definition
  clear              clear the whole form
  load <path>        prefill from a YAML field spec
  show               print the current field
  cancel             leave the editor"""


def render_snapshot(snap: FieldDefinition) -> str:
    spec = FIELD_TYPES[snap.field_type]
    order = ORDER_POLICIES[snap.order_policy]
    lines = [
        f"Label:          {snap.label}",
        f"Field Type:     {spec.display_name}" + ("  [required]" if snap.required else ""),
        f"Default Value:  {snap.default_value}",
        f"Choice input:   {snap.pending_choice_input}",
        f"Order:          {order.wire_value}",
        f"Choices ({len(snap.choices)}/{spec.max_choices}):",
    ]
    preview = snap.choices_preview_text or "(Added choices will display here!)\n"
    lines.extend(f"  {line}" for line in preview.splitlines())
    return "\n".join(lines)


class ConsoleEditor:
    """
    Line-oriented fallback for when Tk is unavailable or HEADLESS is set.
    """

    def __init__(
        self,
        controller: FieldDefinitionController,
        *,
        reader: SpecReader | None = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.controller = controller
        self.input_fn = input_fn
        self.output_fn = output_fn
        self._running = False
        self.presenter = FieldBuilderPresenter(
            controller,
            alert=lambda msg: self.output_fn(f"! {msg}"),
            reader=reader,
            on_close=self.stop,
        )

    def stop(self) -> None:
        self._running = False

    def handle(self, line: str) -> None:
        cmd, _, arg = line.strip().partition(" ")
        cmd = cmd.lower()
        p = self.presenter

        if cmd == "":
            return
        if cmd == "label":
            p.on_label_changed(arg)
        elif cmd == "default":
            p.on_default_changed(arg)
        elif cmd == "required":
            p.on_required_toggled(arg.strip().lower() in ("on", "yes", "true", "1"))
        elif cmd == "choice":
            p.on_choice_typed(arg)
        elif cmd == "add":
            if arg:
                p.on_choice_typed(arg)
            p.on_add_choice()
        elif cmd == "remove":
            p.on_remove_choice()
        elif cmd == "save":
            p.on_save()
        elif cmd == "clear":
            p.on_clear()
        elif cmd == "load":
            p.load_spec(arg.strip("\"' "))
        elif cmd == "show":
            self.output_fn(render_snapshot(self.controller.snapshot))
        elif cmd in ("cancel", "quit", "exit"):
            p.on_cancel()
        elif cmd == "help":
            self.output_fn(HELP_TEXT)
        else:
            self.output_fn(f"Unknown command {cmd!r}. Type 'help' for a list.")

    def run(self) -> None:
        self.output_fn("Field Builder (console). Type 'help' for commands.")
        self.output_fn(render_snapshot(self.controller.snapshot))
        self._running = True
        while self._running:
            try:
                line = self.input_fn("> ")
            except EOFError:
                break
            self.handle(line)
