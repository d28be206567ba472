"""Console output, run logging and the JSON step log.

Each ``print_*`` helper writes one styled line to the terminal and the
same text to the run log (once :func:`init_logging` has been called), so
a run can be followed on screen and reviewed from ``logs/`` afterwards.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, NoReturn, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

console = Console()

# Shared by every log file written during one process
TIMESTAMP = datetime.now().strftime("%Y-%m-%d-%H%M%S")

_logger = logging.getLogger("anf_snapshot_policy")
_handler: Optional[logging.FileHandler] = None


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _default_log_dir() -> Path:
    return Path.cwd() / "logs"


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------

# kind -> (glyph, rich style, log level or None to skip the run log)
_KINDS: dict[str, tuple[str, str, Optional[int]]] = {
    "step": ("▶", "bold cyan", logging.INFO),
    "info": ("ℹ", "blue", logging.DEBUG),
    "success": ("✔", "bold green", logging.INFO),
    "warning": ("⚠", "bold yellow", logging.WARNING),
    "error": ("✖", "bold red", logging.ERROR),
}


def _emit(kind: str, msg: str) -> None:
    glyph, style, level = _KINDS[kind]
    console.print(f"{glyph} {msg}", style=style, highlight=False)
    if level is not None:
        _logger.log(level, msg)


def print_header(title: str) -> None:
    console.print()
    console.print(Panel(title, style="bold", border_style="blue"))
    console.print()


def print_step(msg: str) -> None:
    _emit("step", msg)


def print_info(msg: str) -> None:
    _emit("info", msg)


def print_success(msg: str) -> None:
    _emit("success", msg)


def print_warning(msg: str) -> None:
    _emit("warning", msg)


def print_error(msg: str) -> None:
    _emit("error", msg)


def print_detail(msg: str) -> None:
    console.print(f"  {msg}", highlight=False)


def die(msg: str, code: int = 1) -> NoReturn:
    """Report a fatal error and end the process with the usual closing line."""
    print_error(msg)
    print_info("Exiting")
    sys.exit(code)


def confirm(msg: str, default: bool = False) -> bool:
    return Confirm.ask(f"[bold]{msg}[/bold]", default=default)


# ---------------------------------------------------------------------------
# Run log
# ---------------------------------------------------------------------------


def init_logging(prefix: str = "anf-sample", log_dir: Optional[Path] = None) -> Path:
    """Send the package logger to ``<log_dir>/<prefix>-<timestamp>.log``.

    Calling it again moves logging to the new file.
    """
    global _handler

    log_dir = log_dir or _default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    if _handler is not None:
        _logger.removeHandler(_handler)
        _handler.close()

    log_file = log_dir / f"{prefix}-{TIMESTAMP}.log"
    _handler = logging.FileHandler(log_file, encoding="utf-8")
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"))
    _logger.setLevel(logging.DEBUG)
    _logger.addHandler(_handler)
    return log_file


# ---------------------------------------------------------------------------
# JSON step log
# ---------------------------------------------------------------------------


class TransactionLog:
    """Step-by-step JSON record of one provisioning or cleanup run.

    The file is rewritten after every change, so it is complete up to the
    last step even when the process dies. With ``persist=False`` the
    record is only kept in memory.
    """

    def __init__(self, operation: str, log_dir: Optional[Path] = None, persist: bool = True):
        self.operation = operation
        self.path: Optional[Path] = None
        if persist:
            log_dir = log_dir or _default_log_dir()
            log_dir.mkdir(parents=True, exist_ok=True)
            self.path = log_dir / f"{operation}-{TIMESTAMP}.json"

        self._data: dict[str, Any] = {
            "operation": operation,
            "status": "in_progress",
            "started_at": _utcnow(),
            "steps": [],
        }
        self._current: Optional[dict[str, Any]] = None
        self._write()

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    @property
    def steps(self) -> list[dict[str, Any]]:
        return self._data["steps"]

    def step(self, step_id: str, description: str) -> None:
        """Start a new step; a step still in progress is closed as done."""
        self._close()
        self._current = {
            "id": step_id,
            "description": description,
            "status": "in_progress",
            "started_at": _utcnow(),
        }
        self.steps.append(self._current)
        self._write()

    def step_update(self, status: str = "done", detail: str = "") -> None:
        if self._current is not None:
            self._current.update(status=status, ended_at=_utcnow())
            if detail:
                self._current["detail"] = detail
        self._write()

    def finalize(self, status: str = "success", message: str = "") -> None:
        self._close()
        self._data.update(status=status, ended_at=_utcnow())
        if message:
            self._data["message"] = message
        self._write()

    def _close(self) -> None:
        if self._current is not None and self._current["status"] == "in_progress":
            self._current.update(status="done", ended_at=_utcnow())

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.write_text(json.dumps(self._data, indent=2) + "\n", encoding="utf-8")
