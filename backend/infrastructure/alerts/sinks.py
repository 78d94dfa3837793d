"""Alert sinks for environments without a UI."""

import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


class LoggingAlertSink:
    """Writes alerts to the log at WARNING level."""

    def show_alert(self, title: str, message: str) -> None:
        logger.warning(
            "User alert",
            extra={"alert_title": title, "alert_message": message},
        )


@dataclass(frozen=True)
class RecordedAlert:
    title: str
    message: str


class RecordingAlertSink:
    """
    Keeps alerts in memory, in emission order.

    Example:
        >>> sink = RecordingAlertSink()
        >>> sink.show_alert("Error", "Failed to analyze image. Please try again.")
        >>> sink.titles()
        ['Error']
    """

    def __init__(self) -> None:
        self.alerts: List[RecordedAlert] = []

    def show_alert(self, title: str, message: str) -> None:
        self.alerts.append(RecordedAlert(title=title, message=message))

    def titles(self) -> List[str]:
        return [alert.title for alert in self.alerts]

    def messages(self) -> List[str]:
        return [alert.message for alert in self.alerts]
