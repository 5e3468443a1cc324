from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from collections import defaultdict
from time import perf_counter
from typing import Any


class LogMode(str, Enum):
    LIVE = "live"
    DEBUG = "debug"
    TRACE = "trace"


class Cat(str, Enum):
    STARTUP = "STARTUP"
    EDIT = "EDIT"
    CHOICE = "CHOICE"
    RESET = "RESET"
    SUBMIT = "SUBMIT"
    TRANSPORT = "TRANSPORT"
    SPEC = "SPEC"
    DUMP = "DUMP"
    UI = "UI"


@dataclass(frozen=True)
class InstrumentPolicy:
    mode: LogMode = LogMode.LIVE

    # If True, include ctx keys in all emitted lines.
    include_ctx: bool = True

    # Rate limits for noisy events (key -> seconds).
    rate_limits_s: dict[str, float] = field(default_factory=dict)


@dataclass
class Counters:
    _c: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def inc(self, key: str, n: int = 1) -> None:
        self._c[key] += n

    def get(self, key: str) -> int:
        return self._c.get(key, 0)

    def snapshot(self) -> dict[str, int]:
        return dict(self._c)


@dataclass
class RateLimiter:
    _last: dict[str, float] = field(default_factory=dict)

    def allow(self, key: str, every_s: float) -> bool:
        now = perf_counter()
        last = self._last.get(key)
        if last is None or (now - last) >= every_s:
            self._last[key] = now
            return True
        return False


def format_ctx(**ctx: Any) -> str:
    # Stable ordering makes grep life easier
    order = ["cmd", "kind", "v", "n", "a"]
    parts = []
    for k in order:
        v = ctx.get(k)
        if v is None:
            continue
        parts.append(f"{k}={v}")
    # include any extras in alpha order
    extras = sorted((k, v) for k, v in ctx.items() if k not in order and v is not None)
    parts.extend([f"{k}={v}" for k, v in extras])
    return " ".join(parts)


def parse_log_mode(raw: str | None) -> LogMode:
    if raw in ("live", "debug", "trace"):
        return LogMode(raw)
    return LogMode.LIVE


class Signals:
    """
    Category-prefixed logging shared by the controller, transport and views.

    - emit_signal: always logged at the requested level.
    - emit_diag: only in DEBUG/TRACE mode, optionally rate limited.
    - emit_trace: only in TRACE mode.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        policy: InstrumentPolicy | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("field_bldr")
        self.policy = policy or InstrumentPolicy()
        self.counters = Counters()
        self._rate = RateLimiter()

    def _format(self, cat: Cat, msg: str, ctx: dict[str, Any]) -> str:
        prefix = f"[{cat.value}]"
        if self.policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        return f"{prefix} {msg}"

    def _rate_ok(self, key: str | None, every_s: float | None) -> bool:
        if key and every_s is None:
            every_s = self.policy.rate_limits_s.get(key)
        if key and every_s:
            return self._rate.allow(key, every_s)
        return True

    def emit_signal(self, cat: Cat, msg: str, *, level: str | int = "info", **ctx: Any) -> None:
        line = self._format(cat, msg, ctx)
        if isinstance(level, int):
            self.logger.log(level, line)
            return
        lvl = (level or "info").lower()
        if lvl in ("warn", "warning"):
            self.logger.warning(line)
        elif lvl in ("error", "err", "critical", "fatal"):
            self.logger.error(line)
        elif lvl in ("debug", "trace"):
            self.logger.debug(line)
        else:
            self.logger.info(line)

    def emit_diag(self, cat: Cat, msg: str, *, key: str | None = None, every_s: float | None = None, **ctx: Any) -> None:
        if self.policy.mode == LogMode.LIVE:
            return
        if not self._rate_ok(key, every_s):
            return
        self.logger.debug(self._format(cat, msg, ctx))

    def emit_trace(self, cat: Cat, msg: str, *, key: str | None = None, every_s: float | None = None, **ctx: Any) -> None:
        if self.policy.mode != LogMode.TRACE:
            return
        if not self._rate_ok(key, every_s):
            return
        self.logger.debug(self._format(cat, msg, ctx))
