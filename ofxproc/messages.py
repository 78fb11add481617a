"""Diagnostic channels used while parsing.

The parser reports what it is doing through six channels: a parser trace,
debug output, status messages, informational messages, warnings and errors.
Which channels are enabled is decided once, before a parse starts, by a
`DiagnosticOptions` value; it is never changed while a parse is running.

Enabled messages are forwarded to the `ofxproc` logger and also recorded on
the `Diagnostics` object so that they can be returned to the caller with the
parse result.
"""

from typing import List, NamedTuple, Tuple
import logging

PARSER = 5
STATUS = 15

logging.addLevelName(PARSER, 'PARSER')
logging.addLevelName(STATUS, 'STATUS')

logger = logging.getLogger('ofxproc')

LEVEL_NAMES = {
    PARSER: 'PARSER',
    logging.DEBUG: 'DEBUG',
    STATUS: 'STATUS',
    logging.INFO: 'INFO',
    logging.WARNING: 'WARNING',
    logging.ERROR: 'ERROR',
}


class DiagnosticOptions(NamedTuple):
    """Which channels are enabled.

    The defaults match the `ofxdump` utility: the parser trace and debug
    channels are off, everything else is on.
    """
    parser: bool = False
    debug: bool = False
    status: bool = True
    info: bool = True
    warning: bool = True
    error: bool = True


Message = Tuple[str, str]


def options_for_level(level: int) -> DiagnosticOptions:
    """Enables every channel at or above the `logging` level `level`.

    The error channel is always enabled.
    """
    return DiagnosticOptions(
        parser=level <= PARSER,
        debug=level <= logging.DEBUG,
        status=level <= STATUS,
        info=level <= logging.INFO,
        warning=level <= logging.WARNING,
        error=True)


class Diagnostics(object):
    """Per-parse message sink."""

    def __init__(self, options: DiagnosticOptions = DiagnosticOptions()) -> None:
        self.options = options
        self.messages = []  # type: List[Message]
        self._enabled = {
            PARSER: options.parser,
            logging.DEBUG: options.debug,
            STATUS: options.status,
            logging.INFO: options.info,
            logging.WARNING: options.warning,
            logging.ERROR: options.error,
        }

    def enabled(self, level: int) -> bool:
        return self._enabled.get(level, False)

    def emit(self, level: int, message: str) -> None:
        if not self._enabled.get(level, False):
            return
        self.messages.append((LEVEL_NAMES[level], message))
        logger.log(level, message)

    def parser(self, message: str) -> None:
        self.emit(PARSER, message)

    def debug(self, message: str) -> None:
        self.emit(logging.DEBUG, message)

    def status(self, message: str) -> None:
        self.emit(STATUS, message)

    def info(self, message: str) -> None:
        self.emit(logging.INFO, message)

    def warning(self, message: str) -> None:
        self.emit(logging.WARNING, message)

    def error(self, message: str) -> None:
        self.emit(logging.ERROR, message)
