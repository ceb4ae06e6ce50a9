import sys

from PySide6.QtCore import QObject, Signal
from loguru import logger

class LogHandler(QObject):
    """Loguru sink forwarding formatted records to Qt (status bar, log panel)."""
    log_signal = Signal(str)

    def write(self, message):
        text = message.strip()
        if text:
            self.log_signal.emit(text)

# Global instance to be used by UI to connect
qt_log_handler = LogHandler()


def configure_logging(level="INFO", qt_sink=True):
    # Remove default handler and add ours
    logger.remove()
    logger.add(sys.stderr, format="{time} {level} {message}", level=level)
    if qt_sink:
        logger.add(qt_log_handler, format="{time:HH:mm:ss} <level>{message}</level>", level=level)
