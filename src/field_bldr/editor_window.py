# src/field_bldr/editor_window.py

from __future__ import annotations

from tkinter import Tk, StringVar, BooleanVar, Text, END
from tkinter import messagebox, ttk
from tkinter.filedialog import askopenfilename

from .. import config
from .controller import FieldDefinitionController
from .editor_presenter import FieldBuilderPresenter, QueuedDispatch
from .field_definition import FieldDefinition
from .field_types import FIELD_TYPES, ORDER_POLICIES
from .instrumentation import Cat
from .spec_reader import SpecReader

# Transport results land on a worker thread; Tk is only touched from here.
RESULT_POLL_MS = 100


class FieldBuilderWindow:
    """
    Tk front end for the field builder.

    Every widget is redrawn from the controller's snapshot; the Tk variables
    only forward keystrokes. ``_rendering`` stops the redraw from feeding
    back into the controller through the variable traces.
    """

    def __init__(self, controller: FieldDefinitionController, *, reader: SpecReader | None = None):
        self.controller = controller
        self.signals = controller.signals
        self.root = Tk()
        self.root.title("Field Builder")
        self._rendering = False
        self._dispatch = QueuedDispatch()
        self._poll_job: str | None = None

        self.presenter = FieldBuilderPresenter(
            controller,
            alert=self._alert,
            reader=reader,
            dispatch=self._dispatch,
            on_close=self.close,
        )

        self.label_var = StringVar(self.root)
        self.default_var = StringVar(self.root)
        self.choice_var = StringVar(self.root)
        self.required_var = BooleanVar(self.root)

        self._build()
        self._unsubscribe = controller.subscribe(self.render)
        self.render(controller.snapshot)

    # --- layout ---

    def _build(self) -> None:
        spec = FIELD_TYPES[self.controller.snapshot.field_type]
        order = ORDER_POLICIES[self.controller.snapshot.order_policy]

        body = ttk.Frame(self.root, padding=12)
        body.grid(sticky="nsew")
        ttk.Label(body, text="Field Builder", font=("TkDefaultFont", 14, "bold")).grid(
            row=0, column=0, columnspan=3, sticky="w", pady=(0, 8)
        )

        ttk.Label(body, text="Label").grid(row=1, column=0, sticky="w")
        ttk.Entry(body, textvariable=self.label_var, width=40).grid(row=1, column=1, sticky="ew", pady=2)

        ttk.Label(body, text="Field Type").grid(row=2, column=0, sticky="w")
        type_row = ttk.Frame(body)
        type_row.grid(row=2, column=1, sticky="w", pady=2)
        type_box = ttk.Combobox(type_row, values=[spec.display_name], state="readonly", width=16)
        type_box.set(spec.display_name)
        type_box.pack(side="left")
        ttk.Checkbutton(
            type_row,
            text="This field requires input",
            variable=self.required_var,
            command=lambda: self._forward(self.presenter.on_required_toggled, self.required_var.get()),
        ).pack(side="left", padx=8)

        ttk.Label(body, text="Field Default Value").grid(row=3, column=0, sticky="w")
        ttk.Entry(body, textvariable=self.default_var, width=40).grid(row=3, column=1, sticky="ew", pady=2)

        ttk.Label(body, text="Field Choices").grid(row=4, column=0, sticky="nw")
        choices_col = ttk.Frame(body)
        choices_col.grid(row=4, column=1, sticky="ew", pady=2)
        choice_entry = ttk.Entry(choices_col, textvariable=self.choice_var, width=40)
        choice_entry.pack(fill="x")
        choice_entry.bind("<Return>", lambda _e: self.presenter.on_add_choice())
        self.preview = Text(choices_col, height=6, width=40, state="disabled")
        self.preview.pack(fill="x", pady=(4, 0))

        buttons = ttk.Frame(body)
        buttons.grid(row=4, column=2, sticky="n", padx=(8, 0))
        ttk.Button(buttons, text="Add Choice", command=self.presenter.on_add_choice).pack(fill="x")
        ttk.Button(buttons, text="Remove Choice", command=self.presenter.on_remove_choice).pack(fill="x", pady=(4, 0))

        ttk.Label(body, text="Order of Choices").grid(row=5, column=0, sticky="w")
        order_box = ttk.Combobox(body, values=[order.wire_value], state="readonly", width=38)
        order_box.set(order.wire_value)
        order_box.grid(row=5, column=1, sticky="ew", pady=2)

        actions = ttk.Frame(body)
        actions.grid(row=6, column=1, sticky="ew", pady=(12, 0))
        ttk.Button(actions, text="Save Changes", command=self.presenter.on_save).pack(fill="x")
        ttk.Button(actions, text="Cancel", command=self.presenter.on_cancel).pack(fill="x", pady=(4, 0))
        ttk.Button(actions, text="Clear Form", command=self.presenter.on_clear).pack(fill="x", pady=(4, 0))
        ttk.Button(actions, text="Load Spec...", command=self._pick_spec).pack(fill="x", pady=(4, 0))

        self.label_var.trace_add("write", lambda *_: self._forward(self.presenter.on_label_changed, self.label_var.get()))
        self.default_var.trace_add("write", lambda *_: self._forward(self.presenter.on_default_changed, self.default_var.get()))
        self.choice_var.trace_add("write", lambda *_: self._forward(self.presenter.on_choice_typed, self.choice_var.get()))

        self.root.protocol("WM_DELETE_WINDOW", self.close)

    def _forward(self, handler, value) -> None:
        if self._rendering:
            return
        handler(value)

    # --- rendering ---

    def render(self, snap: FieldDefinition) -> None:
        self.signals.emit_diag(Cat.UI, "Render", key="UI.render", v=snap.version)
        self._rendering = True
        try:
            for var, value in (
                (self.label_var, snap.label),
                (self.default_var, snap.default_value),
                (self.choice_var, snap.pending_choice_input),
            ):
                if var.get() != value:
                    var.set(value)
            if self.required_var.get() != snap.required:
                self.required_var.set(snap.required)

            self.preview.configure(state="normal")
            self.preview.delete("1.0", END)
            self.preview.insert("1.0", snap.choices_preview_text)
            self.preview.configure(state="disabled")
        finally:
            self._rendering = False

    def _alert(self, message: str) -> None:
        messagebox.showinfo("Field Builder", message, parent=self.root)

    def _pick_spec(self) -> None:
        path = askopenfilename(
            parent=self.root,
            title="Select YAML field spec",
            initialdir=config.SPECS_DIR,
            filetypes=[("YAML files", "*.yml *.yaml"), ("All files", "*.*")],
        )
        if path:
            self.presenter.load_spec(path)

    # --- lifecycle ---

    def _poll_results(self) -> None:
        self._dispatch.drain()
        self._poll_job = self.root.after(RESULT_POLL_MS, self._poll_results)

    def run(self) -> None:
        self._poll_results()
        self.root.mainloop()

    def close(self) -> None:
        if self._poll_job is not None:
            self.root.after_cancel(self._poll_job)
            self._poll_job = None
        self._unsubscribe()
        self.root.destroy()
