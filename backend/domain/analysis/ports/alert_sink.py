"""Port for user-facing alerts."""

from typing import Protocol


class IAlertSink(Protocol):
    """
    Destination of the title/message alerts raised on failed requests.

    The mobile client shows a native dialog; the service layer logs or
    records them.
    """

    def show_alert(self, title: str, message: str) -> None:
        ...
