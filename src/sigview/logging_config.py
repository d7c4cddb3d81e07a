import sys
import os
from pathlib import Path
from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, force=False):
    """
    Configures the global logger.

    stdout carries query output, so console logging goes to stderr and is
    off unless a level is requested through the arguments or the
    SIGVIEW_LOG_LEVEL environment variable. File logging is opt-in via
    SIGVIEW_FILE_LOGGING=1 or enable_file_logging=True.

    Args:
        level: Logging level for the console sink (default: SIGVIEW_LOG_LEVEL or WARNING)
        suppress_console: If True, no console sink. If None, enabled only when a level was requested.
        enable_file_logging: If True, enable file logging. If None, check SIGVIEW_FILE_LOGGING env var.
        force: Reconfigure even if logging was already set up.
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    env_level = os.getenv("SIGVIEW_LOG_LEVEL")
    if suppress_console is None:
        suppress_console = level is None and not env_level
    if level is None:
        level = env_level or "WARNING"

    # Stream 1: Human-readable console output on stderr
    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level.upper(),
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
            colorize=True
        )

    # Stream 2: File logging is OPT-IN only
    if enable_file_logging is None:
        enable_file_logging = _env_flag("SIGVIEW_FILE_LOGGING")

    if enable_file_logging:
        log_dir = Path.home() / ".sigview" / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "sigview.log",
            level="INFO",
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
            serialize=False
        )


# Configure the logger on import (console stays quiet unless requested)
setup_logging()
