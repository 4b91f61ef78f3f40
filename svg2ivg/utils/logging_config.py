"""Logging configuration for applications embedding the converter.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed by the host application through ``setup_logging``.

Provides:
    - Console handler with an optional file handler
    - JSON output mode for log ingestion
    - Contextual fields (e.g. the source file being converted)

Public API:
    setup_logging(**cfg.logging.as_kwargs(), context={"app": "icons"})
    teardown_logging()
    push_context(source="home.svg")
    pop_context(keys=["source"])
    with log_context(source="home.svg"): ...

Format examples:
    Human: 2025-10-28T13:45:12.345Z | INFO     | source=home.svg | Message
    JSON:  {"t":"2025-10-28T13:45:12.345+00:00","lvl":"INFO","source":"home.svg","msg":"..."}

Context uses contextvars, so concurrent conversions never see each
other's fields.  Repeated ``setup_logging`` calls replace the handlers
installed by the previous call rather than duplicating them.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

_context_var: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "svg2ivg_logging_context", default={}
)

_installed: list[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Formatter that appends the current contextual fields.

    Parameters
    ----------
    fmt_mode : str
        ``"human"`` or ``"json"``.
    use_color : bool
        Colour the level name (only honoured on a TTY).
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt_mode: str = "human", use_color: bool = True) -> None:
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown format mode: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(
        self, record: logging.LogRecord, ts: datetime, context: dict[str, Any]
    ) -> str:
        entry: dict[str, Any] = {
            "t": ts.isoformat(),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        entry.update(context)
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry)

    def _format_human(
        self, record: logging.LogRecord, ts: datetime, context: dict[str, Any]
    ) -> str:
        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        parts = [ts_str, "|", level, "|"]
        if context:
            parts.append(" ".join(f"{k}={v}" for k, v in context.items()))
            parts.append("|")
        parts.append(record.getMessage())

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: str | None = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    context: dict[str, Any] | None = None,
) -> list[logging.Handler]:
    """Configure the root logger (idempotent).

    Parameters
    ----------
    log_level : str
        ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"`` or ``"CRITICAL"``.
    log_file : str, optional
        Also write to this file (parent directories are created).
    json : bool
        Emit JSON lines instead of the human format.
    color : bool
        Colour console level names.
    to_stderr : bool
        Install a console handler.
    context : dict, optional
        Initial contextual fields.

    Returns
    -------
    list[logging.Handler]
        Handlers installed on the root logger.
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    teardown_logging()
    root = logging.getLogger()
    root.setLevel(level)

    fmt_mode = "json" if json else "human"
    handlers: list[logging.Handler] = []

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter(fmt_mode, use_color=color))
        handlers.append(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(ContextFormatter(fmt_mode, use_color=False))
        handlers.append(file_handler)

    for handler in handlers:
        root.addHandler(handler)
    _installed.extend(handlers)

    if context:
        push_context(**context)

    return handlers


def teardown_logging() -> None:
    """Remove and close the handlers installed by ``setup_logging``.

    Handlers added to the root logger by anything else are left alone.
    """
    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()


def push_context(**kwargs: Any) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(source="home.svg")
    >>> logger.info("Encoded")  # -> "... | source=home.svg | Encoded"
    """
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: list[str] | None = None) -> None:
    """Remove contextual fields; ``None`` clears them all."""
    if keys is None:
        _context_var.set({})
        return
    current = dict(_context_var.get())
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)


def current_context() -> dict[str, Any]:
    """Return a copy of the active contextual fields."""
    return dict(_context_var.get())


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Push contextual fields for the duration of a ``with`` block.

    The previous context is restored on exit, including fields that were
    overridden inside the block.
    """
    token = _context_var.set({**_context_var.get(), **kwargs})
    try:
        yield
    finally:
        _context_var.reset(token)
