import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .instrumentation import Cat, Signals
from .types import SubmissionDocument


class SubmissionDumper:
    """
    Writes each submitted document to ./runs/<run_id>/submissions/<n>.json
    and keeps a small run_meta.json next to it.
    """

    def __init__(self, runs_dir: Path | str, *, signals: Signals | None = None, run_id: str | None = None):
        self.signals = signals or Signals()
        self.run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_dir = Path(runs_dir) / self.run_id
        self.count = 0

    def _emit(self, level: str, msg: str, **ctx: Any) -> None:
        self.signals.emit_signal(Cat.DUMP, msg, level=level, **ctx)

    def init_run_dir(self) -> Path:
        (self.run_dir / "submissions").mkdir(parents=True, exist_ok=True)
        (self.run_dir / "logs").mkdir(parents=True, exist_ok=True)
        meta = {
            "run_id": self.run_id,
            "started_at": datetime.now().isoformat(timespec="seconds"),
            "submission_count": 0,
        }
        (self.run_dir / "run_meta.json").write_text(json.dumps(meta, indent=2), encoding="utf-8")
        return self.run_dir

    def _update_run_meta(self, **updates) -> None:
        meta_path = self.run_dir / "run_meta.json"
        try:
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            meta = {}
        meta.update(updates)
        meta_path.write_text(json.dumps(meta, indent=2), encoding="utf-8")

    def dump(self, document: SubmissionDocument) -> Path | None:
        self.count += 1
        out_path = self.run_dir / "submissions" / f"{self.count:03d}.json"
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(
                json.dumps(document, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            self._update_run_meta(
                submission_count=self.count,
                last_submitted_at=datetime.now().isoformat(timespec="seconds"),
            )
        except OSError as e:
            self._emit("warning", f"Could not write submission dump. Message: {e!r}", n=self.count)
            return None
        self._emit("info", f"Wrote submission dump to: {out_path.as_posix()}", n=self.count)
        return out_path
