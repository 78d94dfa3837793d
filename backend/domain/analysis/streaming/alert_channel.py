"""Separation of analysis text and medication alerts in the analysis stream.

The analysis endpoint answers with pseudo-SSE lines::

    data: {"type": "content", "content": "Category: Mixed\\n"}
    data: {"type": "separator", "content": "MEDICATION_ALERT_START"}
    data: {"type": "medication_alert", "content": "Avoid grapefruit..."}
    data: {"type": "separator", "content": "MEDICATION_ALERT_END"}
    data: [DONE]

Alerts are recognized both by their chunk type and by the sentinel
separators, so losing either signal does not leak alerts into the analysis.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "
SSE_DONE = "[DONE]"
MEDICATION_ALERT_START = "MEDICATION_ALERT_START"
MEDICATION_ALERT_END = "MEDICATION_ALERT_END"


class ChunkType(str, Enum):
    CONTENT = "content"
    SEPARATOR = "separator"
    MEDICATION_ALERT = "medication_alert"


class ChannelState(str, Enum):
    MAIN = "main"
    ALERTS = "alerts"


@dataclass(frozen=True)
class StreamChunk:
    type: str
    content: str


@dataclass(frozen=True)
class ChannelOutput:
    analysis: str
    medication_alerts: Optional[List[str]]


def decode_sse_line(line: str) -> Optional[StreamChunk]:
    """
    Decode one "data: {...}" line.

    Returns None for non-data lines, the [DONE] terminator, undecodable JSON
    and chunks without content.
    """
    line = line.rstrip("\r")
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    data = line[len(SSE_DATA_PREFIX):].strip()
    if not data or data == SSE_DONE:
        return None
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        logger.warning("Skipping undecodable stream chunk", extra={"chunk": data[:200]})
        return None
    if not isinstance(payload, dict):
        return None
    content = payload.get("content")
    if not content:
        return None
    return StreamChunk(type=str(payload.get("type") or ChunkType.CONTENT.value), content=str(content))


class MedicationAlertChannel:
    """
    Accumulator for one analysis stream.

    Build a fresh channel per request; there is no reset.

    Example:
        >>> channel = MedicationAlertChannel()
        >>> channel.feed(StreamChunk("content", "Category: Mixed"))
        >>> channel.feed(StreamChunk("separator", MEDICATION_ALERT_START))
        >>> channel.feed(StreamChunk("medication_alert", "Avoid grapefruit"))
        >>> channel.feed(StreamChunk("separator", MEDICATION_ALERT_END))
        >>> channel.output()
        ChannelOutput(analysis='Category: Mixed', medication_alerts=['Avoid grapefruit'])
    """

    def __init__(self) -> None:
        self.state = ChannelState.MAIN
        self._analysis_parts: List[str] = []
        self._alerts: List[str] = []

    def feed(self, chunk: StreamChunk) -> None:
        if chunk.type == ChunkType.SEPARATOR.value:
            self._on_separator(chunk.content)
        elif chunk.type == ChunkType.MEDICATION_ALERT.value:
            logger.debug("Medication alert received")
            self._alerts.append(chunk.content)
        elif self.state is ChannelState.MAIN:
            self._analysis_parts.append(chunk.content)

    def feed_line(self, line: str) -> None:
        chunk = decode_sse_line(line)
        if chunk is not None:
            self.feed(chunk)

    def feed_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.feed_line(line)

    def feed_body(self, body: str) -> None:
        """Consume a fully buffered response body."""
        self.feed_lines(body.split("\n"))

    def _on_separator(self, content: str) -> None:
        if MEDICATION_ALERT_START in content:
            self.state = ChannelState.ALERTS
        elif MEDICATION_ALERT_END in content:
            self.state = ChannelState.MAIN

    @property
    def analysis_text(self) -> str:
        return "".join(self._analysis_parts)

    @property
    def medication_alerts(self) -> Optional[List[str]]:
        return list(self._alerts) or None

    def output(self) -> ChannelOutput:
        return ChannelOutput(analysis=self.analysis_text, medication_alerts=self.medication_alerts)
