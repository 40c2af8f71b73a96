import logging


logger = logging.getLogger(__name__)


class Notifier:
    """Transient operator notifications. The base implementation only logs."""

    def notify(self, level: str, message: str) -> None:
        log_level = logging.ERROR if level == "error" else logging.INFO
        logger.log(log_level, "[%s] %s", level, message)

    def success(self, message: str) -> None:
        self.notify("success", message)

    def info(self, message: str) -> None:
        self.notify("info", message)

    def error(self, message: str) -> None:
        self.notify("error", message)
