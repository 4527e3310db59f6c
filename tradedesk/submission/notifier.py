from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List
import structlog

logger = structlog.get_logger()

@dataclass(frozen=True)
class Notice:
    level: str  # 'loading', 'success', 'error'
    message: str

class Notifier(ABC):
    """Transient user notifications"""

    @abstractmethod
    def loading(self, message: str) -> None:
        pass

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass

class LoggingNotifier(Notifier):
    """Routes notices to the structured log"""

    def loading(self, message: str) -> None:
        logger.info("Notice", level="loading", message=message)

    def success(self, message: str) -> None:
        logger.info("Notice", level="success", message=message)

    def error(self, message: str) -> None:
        logger.warning("Notice", level="error", message=message)

class RecordingNotifier(Notifier):
    """Keeps notices in memory, in emission order"""

    def __init__(self):
        self.notices: List[Notice] = []

    def loading(self, message: str) -> None:
        self.notices.append(Notice('loading', message))

    def success(self, message: str) -> None:
        self.notices.append(Notice('success', message))

    def error(self, message: str) -> None:
        self.notices.append(Notice('error', message))

    def messages(self, level: str) -> List[str]:
        return [notice.message for notice in self.notices if notice.level == level]
