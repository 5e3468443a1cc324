from __future__ import annotations

from contextlib import contextmanager
from typing import Any
import time

from .instrumentation import Cat, Signals


@contextmanager
def phase_timer(
    signals: Signals | None,
    label: str,
    *,
    cat: Cat = Cat.SUBMIT,
    ctx: dict[str, Any] | None = None,
):
    if signals is None:
        raise RuntimeError("phase_timer requires a Signals instance")
    start = time.perf_counter()
    merged_ctx: dict[str, Any] = {"a": label}
    if ctx:
        merged_ctx.update(ctx)
    signals.emit_diag(cat, f"START phase: {label}", **merged_ctx)
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        merged_ctx["elapsed_s"] = round(elapsed, 3)
        if elapsed >= 5:
            signals.emit_signal(
                cat,
                f"END phase: {label} ({elapsed:.2f} seconds, slow)",
                level="warning",
                **merged_ctx,
            )
        else:
            signals.emit_diag(cat, f"END phase: {label} ({elapsed:.2f} seconds)", **merged_ctx)
