# tuiedit/utils/logging_config.py
"""tuiedit.utils.logging_config
==============================

Application-wide logging setup for tuiedit.

Two module-level loggers exist from import time on and stay silent until
``setup_logging`` attaches handlers:

    logger: Main application logger ("tuiedit").
    KEY_LOGGER: Raw key/pointer trace ("tuiedit.keyevents"), enabled only
        when the ``TUIEDIT_KEYTRACE`` environment variable is ``1/true/yes``.

Handlers installed by ``setup_logging``:
    - Rotating ``editor.log`` (2 MiB x 5) at ``file_level``.
    - Optional ``stderr`` console handler at ``console_level``. Off by
      default, since console output would tear the curses screen.
    - Optional rotating ``error.log`` with ERROR and CRITICAL records only.
    - Optional rotating ``keytrace.log`` on ``KEY_LOGGER``.

All files go to ``log_dir`` (default: the current directory). If that
directory cannot be created the system temp directory is used instead.
``setup_logging`` never raises; problems are reported on stderr.

    >>> from tuiedit.utils import logging_config
    >>> logging_config.setup_logging({"logging": {"file_level": "INFO"}})
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


logger = logging.getLogger("tuiedit")
KEY_LOGGER = logging.getLogger("tuiedit.keyevents")

KEYTRACE_ENV = "TUIEDIT_KEYTRACE"

_FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
_CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"


def _resolve_log_dir(raw_dir: str) -> str:
    """Expands and creates ``raw_dir``; falls back to the temp directory."""
    log_dir = os.path.expanduser(raw_dir) if raw_dir else ""
    if log_dir and not os.path.isdir(log_dir):
        try:
            os.makedirs(log_dir, exist_ok=True)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            log_dir = tempfile.gettempdir()
            print(f"Logging to temporary directory: '{log_dir}'", file=sys.stderr)
    return log_dir


def _rotating_handler(
    path: str, level: int, max_bytes: int, backups: int, formatter: logging.Formatter
) -> Optional[logging.Handler]:
    try:
        handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except Exception as e_fh:
        print(f"Error setting up log file '{path}': {e_fh}. File logging may be impaired.", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures root and key-trace logging from the ``[logging]`` config section.

    Args:
        config (dict | None): Application configuration. Recognised keys under
            ``["logging"]``:

            - ``file_level`` (str): Level for editor.log. Default ``"DEBUG"``.
            - ``console_level`` (str): Level for stderr. Default ``"WARNING"``.
            - ``log_to_console`` (bool): Attach the stderr handler. Default ``False``.
            - ``separate_error_log`` (bool): Also write error.log. Default ``False``.
            - ``log_dir`` (str): Directory for all log files. Default: cwd.

    Side Effects:
        Replaces every handler on the root logger and on ``tuiedit.keyevents``,
        so calling it twice (e.g. from tests) never duplicates records.
    """
    logging_section = (config or {}).get("logging", {})

    file_level_name = str(logging_section.get("file_level", "DEBUG")).upper()
    file_level = getattr(logging, file_level_name, logging.DEBUG)
    log_dir = _resolve_log_dir(str(logging_section.get("log_dir", "")))
    file_formatter = logging.Formatter(_FILE_FORMAT)

    main_log = os.path.join(log_dir, "editor.log")
    file_handler = _rotating_handler(main_log, file_level, 2 * 1024 * 1024, 5, file_formatter)

    console_handler = None
    if logging_section.get("log_to_console", False):
        console_level_name = str(logging_section.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        console_handler.setLevel(getattr(logging, console_level_name, logging.WARNING))

    error_handler = None
    if logging_section.get("separate_error_log", False):
        error_handler = _rotating_handler(
            os.path.join(log_dir, "error.log"), logging.ERROR, 1024 * 1024, 3, file_formatter
        )

    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in (file_handler, console_handler, error_handler):
        if handler is not None:
            root_logger.addHandler(handler)
    root_logger.setLevel(file_level)

    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV, "").lower() in {"1", "true", "yes"}:
        trace_path = os.path.join(log_dir, "keytrace.log")
        trace_handler = _rotating_handler(
            trace_path, logging.DEBUG, 1024 * 1024, 3, logging.Formatter("%(asctime)s - %(message)s")
        )
        if trace_handler is not None:
            KEY_LOGGER.addHandler(trace_handler)
            logging.info("Key event tracing enabled, logging to '%s'.", trace_path)
        else:
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root level: %s, file: %s",
        logging.getLevelName(root_logger.level),
        main_log if file_handler else "<none>",
    )
