"""
Progress reporting for the sync pipeline.

The reporter only observes: it prints progress lines for the operator and
mirrors each one as a debug-level structlog event. Nothing in the
pipeline reads back from it.
"""

import sys
from typing import Iterable, List, Optional, TextIO, Tuple

import structlog

logger = structlog.get_logger()


def printable(text: str) -> str:
    """Replace undecodable path bytes (surrogate escapes) so the text can be printed."""
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


class Reporter:
    """Prints classified progress messages."""

    def __init__(
        self,
        verbose: bool = False,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        self.verbose = verbose
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.messages: List[Tuple[str, str]] = []

    def _emit(self, level: str, message: str, stream: TextIO, prefix: str = ""):
        self.messages.append((level, message))
        print(f"{prefix}{printable(message)}", file=stream, flush=True)

    def info(self, message: str):
        self._emit("info", message, self.out, "INFO: ")
        logger.debug("report", message=printable(message))

    def success(self, message: str):
        self._emit("success", message, self.out, "SUCCESS: ")
        logger.debug("report_success", message=printable(message))

    def warning(self, message: str):
        self._emit("warning", message, self.out, "WARNING: ")
        logger.debug("report_warning", message=printable(message))

    def error(self, message: str):
        self._emit("error", message, self.err, "ERROR: ")
        logger.debug("report_error", message=printable(message))

    def detail(self, message: str):
        """Only shown with --verbose."""
        if self.verbose:
            self._emit("detail", message, self.out, "  ")
        logger.debug("report_detail", message=printable(message))

    def section(self, title: str, lines: Iterable[str]):
        """Print a titled block of indented lines."""
        lines = list(lines)
        self._emit("section", title, self.out, "\n")
        for line in lines:
            self._emit("line", line, self.out, "  ")
        logger.debug("report_section", title=printable(title), lines=len(lines))
