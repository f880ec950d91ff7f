"""
Audit Logger module for the domain resolver.

Records structured entries for source refreshes, cache activity and
rejected hosts, and writes them as JSON lines, human-readable lines or
both. The resolver core takes a logger as an optional collaborator and
never writes anywhere on its own.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, TextIO

from domain_resolver.enums import LogLevel
from domain_resolver.exceptions import DomainResolverError


LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}


@dataclass
class LogEntry:
    """One recorded event."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "component": self.component,
            "message": self.message,
            "data": self.data,
        }


def format_json(entry: LogEntry) -> str:
    return json.dumps(entry.to_dict(), ensure_ascii=False, default=str)


def format_text(entry: LogEntry) -> str:
    # [TIMESTAMP] LEVEL [component] message {data}
    line = f"[{entry.timestamp}] {entry.level.value.upper()} [{entry.component}] {entry.message}"
    if entry.data:
        line += " " + json.dumps(entry.data, ensure_ascii=False, default=str)
    return line


FORMATTERS: dict[str, tuple[Callable[[LogEntry], str], ...]] = {
    "json": (format_json,),
    "text": (format_text,),
    "both": (format_json, format_text),
}


class AuditLogger:
    """
    Structured logger with JSON and text output.

    Entries below the minimum level are dropped before they are stored or
    written.
    """

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        min_level: LogLevel = LogLevel.INFO,
    ):
        """
        Initialize the audit logger.

        Args:
            output_format: 'json', 'text', or 'both'
            output_stream: Where lines are written (defaults to sys.stderr)
            min_level: Lowest level that is recorded

        Raises:
            ValueError: If output_format is unknown
        """
        if output_format not in FORMATTERS:
            raise ValueError(f"Invalid output_format: {output_format}")

        self._formatters = FORMATTERS[output_format]
        self._format_name = output_format
        self._stream = output_stream or sys.stderr
        self._min_level = min_level
        self._recorded: list[LogEntry] = []

    @property
    def output_format(self) -> str:
        return self._format_name

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._recorded)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return LEVEL_ORDER[level] >= LEVEL_ORDER[self._min_level]

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Record an entry and write it in every configured format.

        Returns:
            The new LogEntry, or None if the level is filtered out
        """
        if not self.is_enabled_for(level):
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=dict(data or {}),
        )
        self._recorded.append(entry)

        for formatter in self._formatters:
            self._stream.write(formatter(entry) + "\n")
        self._stream.flush()

        return entry

    def debug(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, component, message, data)

    def info(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, component, message, data)

    def warn(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, component, message, data)

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[Exception] = None,
        source_url: Optional[str] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Record an error together with the exception and the source it concerns.

        DomainResolverError instances also contribute their error code.
        """
        context = dict(additional_data or {})

        if error is not None:
            context["error_message"] = str(error)
            context["error_type"] = type(error).__name__
            if isinstance(error, DomainResolverError):
                context["error_code"] = error.code

        if source_url is not None:
            context["source_url"] = source_url

        return self.log(LogLevel.ERROR, component, message, context)

    def clear_entries(self) -> None:
        self._recorded.clear()


def create_logger(output_format: str = "text", level: str = "info", output_stream: Optional[TextIO] = None) -> AuditLogger:
    """
    Build a logger from the string values used in LoggingConfig.

    Raises:
        ValueError: If the format or level is unknown
    """
    return AuditLogger(output_format, output_stream, LogLevel(level))
