import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .field_bldr.console_editor import ConsoleEditor
from .field_bldr.context import AppContext
from .field_bldr.controller import FieldDefinitionController
from .field_bldr.instrumentation import Cat, InstrumentPolicy, Signals, parse_log_mode
from .field_bldr.spec_reader import SpecReader
from .field_bldr.submission_dump import SubmissionDumper
from .field_bldr.transport import HttpSubmissionTransport


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    logger = setup_logging()
    ctx = build_context(logger)
    ctx.signals.emit_signal(
        Cat.STARTUP,
        "Field builder initialized",
        log_mode=ctx.signals.policy.mode.value,
        collector=config.COLLECTOR_URL,
        headless=config.HEADLESS,
    )

    try:
        run_editor(ctx, spec_path=argv[0] if argv else None)
    except Exception as e:
        logger.error("Well that seems to have failed. Message %r.", e)
        return 1
    finally:
        ctx.transport.close()
        logger.info("Counters at exit: %s", ctx.signals.counters.snapshot())

    return 0


def build_context(logger: logging.Logger) -> AppContext:
    signals = Signals(
        logger,
        policy=InstrumentPolicy(
            mode=parse_log_mode(config.LOG_MODE),
            include_ctx=True,
            rate_limits_s=config.LOG_RATE_LIMITS_S,
        ),
    )

    dumper = None
    if config.DUMP_SUBMISSIONS:
        dumper = SubmissionDumper(config.RUNS_DIR, signals=signals)
        run_dir = dumper.init_run_dir()
        attach_run_file_logger(logger, run_dir)
        logger.info("Run output dir: %s", run_dir.as_posix())

    transport = HttpSubmissionTransport(config.COLLECTOR_URL, signals=signals)
    controller = FieldDefinitionController(transport, signals=signals, dumper=dumper)

    return AppContext(
        logger=logger,
        signals=signals,
        transport=transport,
        controller=controller,
        reader=SpecReader(logger),
        dumper=dumper,
    )


def run_editor(ctx: AppContext, *, spec_path: Optional[str] = None) -> None:
    """
    Prefer the Tk window. If HEADLESS is set or Tk fails (no display,
    no tkinter), fall back to the console editor.
    """
    if not config.HEADLESS:
        try:
            from .field_bldr.editor_window import FieldBuilderWindow
            window = FieldBuilderWindow(ctx.controller, reader=ctx.reader)
        except Exception as e:
            ctx.logger.warning("Editor window unavailable; falling back to console editor: %s", e)
        else:
            if spec_path:
                window.presenter.load_spec(spec_path)
            window.run()
            return

    console = ConsoleEditor(ctx.controller, reader=ctx.reader)
    if spec_path:
        console.presenter.load_spec(spec_path)
    console.run()


def setup_logging(verbose_console: bool = False):
    logger = logging.getLogger("field_bldr")
    logger.setLevel(logging.DEBUG)  # emit everything; handlers will filter

    # Clear existing handlers if this is called multiple times
    logger.handlers.clear()
    logger.propagate = False  # don't double-log via root

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    formatter = logging.Formatter(fmt)

    # --- Console: WARNING (or DEBUG if verbose_console=True) ---
    console_handler = logging.StreamHandler()
    console_level = logging.DEBUG if verbose_console else logging.WARNING
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)

    # --- File: DEBUG, truncated each run ---
    file_handler = logging.FileHandler("field_builder.log", mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    file_handler.name = "default_file"

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    return logger


def attach_run_file_logger(logger: logging.Logger, run_dir: Path) -> None:
    log_path = run_dir / "logs" / f"{run_dir.name}.log"

    # Remove the default file handler if present (prevents double logging)
    for h in list(logger.handlers):
        if getattr(h, "name", "") == "default_file":
            h.flush()
            h.close()
            logger.removeHandler(h)

    run_fh = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    run_fh.setLevel(logging.DEBUG)
    run_fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    run_fh.name = "run_file"

    logger.addHandler(run_fh)
    logger.info("File logging redirected to: %s", log_path.as_posix())


if __name__ == "__main__":
    raise SystemExit(main())
