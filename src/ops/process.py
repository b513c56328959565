"""
Process management: one renderer per machine, clean shutdown on signals.

Only one process may hold the camera, so a second launch refuses to start
while the first is alive. SIGTERM/SIGINT stop the render loop so the camera
is released through the normal stop path.
"""

from __future__ import annotations

import atexit
import logging
import os
import signal
from pathlib import Path
from typing import Callable, Optional

DEFAULT_PID_FILE = "data/border.pid"


def get_pid_file_path(pid_file: Optional[str] = None) -> Path:
    return Path(pid_file or DEFAULT_PID_FILE)


def read_pid_file(pid_file: Optional[str] = None) -> Optional[int]:
    """Return the PID recorded in the file, or None if missing or unreadable."""
    path = get_pid_file_path(pid_file)
    if not path.exists():
        return None

    try:
        return int(path.read_text().strip())
    except (ValueError, OSError):
        return None


def is_process_running(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by another user
        return True
    except OSError:
        return False
    return True


def remove_pid_file(pid_file: Optional[str] = None) -> None:
    path = get_pid_file_path(pid_file)
    try:
        if path.exists():
            path.unlink()
            logging.debug(f"Removed PID file: {path}")
    except OSError as e:
        logging.warning(f"Failed to remove PID file: {e}")


def ensure_single_instance(pid_file: Optional[str] = None) -> bool:
    """
    Claim the PID file for this process.

    Returns False if another live instance holds it. A stale file (process
    gone) is replaced. The file is removed again at interpreter exit.
    """
    existing_pid = read_pid_file(pid_file)
    if existing_pid is not None and existing_pid != os.getpid():
        if is_process_running(existing_pid):
            logging.error(
                f"Another instance is already running (PID {existing_pid}). "
                f"Stop it first; only one process can own the camera."
            )
            return False
        logging.info(f"Removing stale PID file (PID {existing_pid} not running)")
        remove_pid_file(pid_file)

    path = get_pid_file_path(pid_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(str(os.getpid()))
    logging.debug(f"Wrote PID {os.getpid()} to {path}")
    atexit.register(remove_pid_file, pid_file)
    return True


def install_stop_handlers(stop: Callable[[], None]) -> None:
    """Route SIGTERM and SIGINT to `stop` instead of killing mid-frame."""

    def _handler(signum, _frame):
        logging.info(f"Received signal {signal.Signals(signum).name}, stopping")
        stop()

    signal.signal(signal.SIGTERM, _handler)
    signal.signal(signal.SIGINT, _handler)
