from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "/var/log/risc0-gpu-setup.log"
FALLBACK_LOG_NAME = "risc0-gpu-setup.log"

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    verbose: bool = False,
    also_console: bool = True,
) -> str:
    """Attach a file handler (and console handler) to the root logger.

    The log file is the operator's record of a phase that may end in a reboot,
    so it is written under /var/log when possible. An unwritable location
    falls back to ./risc0-gpu-setup.log in the working directory.

    Returns the log file path actually in use. Safe to call more than once.
    """

    root = logging.getLogger()
    if getattr(root, "_risc0_setup_configured", False):
        return getattr(root, "_risc0_setup_log_path", log_path)

    root.setLevel(logging.DEBUG if verbose else level)

    file_handler: Optional[logging.Handler] = None
    chosen_path = log_path
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        chosen_path = str(Path.cwd() / FALLBACK_LOG_NAME)
        file_handler = logging.FileHandler(chosen_path)

    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(console)

    setattr(root, "_risc0_setup_configured", True)
    setattr(root, "_risc0_setup_log_path", chosen_path)

    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen_path, log_path)
    return chosen_path


def flush_logging() -> None:
    """Flush every root handler; called right before the host reboots."""
    for handler in logging.getLogger().handlers:
        handler.flush()
