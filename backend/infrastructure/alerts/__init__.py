"""IAlertSink adapters."""

from infrastructure.alerts.sinks import LoggingAlertSink, RecordedAlert, RecordingAlertSink

__all__ = ["LoggingAlertSink", "RecordedAlert", "RecordingAlertSink"]
