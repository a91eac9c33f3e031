"""Debug logging for the lux CLI.

With ``--debug`` the CLI writes verbose client logs to a file and mirrors
everything it prints to the terminal into that same file, so one log shows
both what the user saw and which requests, refreshes and retries ran.
"""

import io
import logging
import re
from typing import Optional
from rich.console import Console as RichConsole

ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

DEBUG_LOGGER_NAME = "lux.debug"


class DebugCapturingConsole(RichConsole):
    """Rich console that also writes a plain-text copy of its output to a logger"""

    def __init__(self, debug_logger: logging.Logger, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_plain(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"[CONSOLE] {plain_text}")

    def _render_plain(self, *objects, **kwargs) -> str:
        buffer = io.StringIO()
        RichConsole(file=buffer, force_terminal=False, width=self.width).print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create the console the CLI prints through.

    Args:
        debug_enabled: Whether debug mode is enabled
        debug_logger: Logger that receives the captured output

    Returns:
        DebugCapturingConsole in debug mode, a plain rich Console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger)
    return RichConsole()


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Send DEBUG records from the client packages and the console to a file
    instead of the terminal.

    Args:
        log_file: Path to debug log file

    Returns:
        Logger used for captured console output
    """
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    for name in ("api_client", "endpoints", "utils", "config", DEBUG_LOGGER_NAME):
        package_logger = logging.getLogger(name)
        package_logger.setLevel(logging.DEBUG)
        # Remove existing file handlers to avoid duplicates on repeated setup
        for handler in package_logger.handlers[:]:
            if isinstance(handler, logging.FileHandler):
                package_logger.removeHandler(handler)
        package_logger.addHandler(file_handler)
        # Verbose records go to the file only, never to the terminal handler on root
        package_logger.propagate = False

    return logging.getLogger(DEBUG_LOGGER_NAME)
