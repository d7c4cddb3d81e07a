"""
CLI Configuration

Centralized configuration for the sigview CLI subsystem.
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    PROGRAM_NAME = "sigview"

    _verbose: Optional[bool] = None

    @classmethod
    def set_verbose(cls, enabled: bool) -> None:
        """Enable debug logging on stderr"""
        cls._verbose = enabled

    @classmethod
    def is_verbose(cls) -> bool:
        """
        Check if verbose mode is active.

        --verbose wins; otherwise SIGVIEW_VERBOSE opts in.
        """
        if cls._verbose is not None:
            return cls._verbose
        return os.getenv("SIGVIEW_VERBOSE", "").lower() in ("1", "true", "yes")

    @classmethod
    def reset(cls) -> None:
        cls._verbose = None
