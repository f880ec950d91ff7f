"""
Property-based tests for Audit Logger module.

Uses Hypothesis for property-based testing of the dual-format output, the
minimum level filter and the error context.
"""

import json
from io import StringIO

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_resolver.audit_logger import LEVEL_ORDER, AuditLogger, create_logger
from domain_resolver.enums import LogLevel
from domain_resolver.exceptions import RulesUnavailable


# Strategies for generating valid test data

@st.composite
def log_level_strategy(draw) -> LogLevel:
    """Generate valid LogLevel values."""
    return draw(st.sampled_from(list(LogLevel)))


@st.composite
def component_name_strategy(draw) -> str:
    """Generate valid component names."""
    return draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_-"),
        min_size=1,
        max_size=30,
    ))


@st.composite
def message_strategy(draw) -> str:
    """Generate valid log messages."""
    return draw(st.text(
        alphabet=st.characters(
            whitelist_categories=('L', 'N', 'P', 'S', 'Z'),
            blacklist_characters='\x00\n\r',
        ),
        min_size=1,
        max_size=200,
    ))


@st.composite
def data_strategy(draw) -> dict:
    return draw(st.dictionaries(
        st.text(alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_"), min_size=1, max_size=20),
        st.one_of(st.integers(), st.text(max_size=50), st.booleans(), st.none()),
        max_size=5,
    ))


class TestLogOutputProperty:
    """Property-based tests for the JSON and text formats."""

    @given(
        level=log_level_strategy(),
        component=component_name_strategy(),
        message=message_strategy(),
        data=data_strategy(),
    )
    @settings(max_examples=100)
    def test_json_output_holds_every_field(self, level: LogLevel, component: str, message: str, data: dict) -> None:
        """
        *For any* log entry, the JSON line SHALL hold the timestamp, level,
        component, message and data.
        """
        stream = StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream, min_level=LogLevel.DEBUG)

        entry = logger.log(level, component, message, data)

        parsed = json.loads(stream.getvalue())
        assert parsed["timestamp"] == entry.timestamp
        assert parsed["level"] == level.value
        assert parsed["component"] == component
        assert parsed["message"] == message
        assert parsed["data"] == data

    @given(
        level=log_level_strategy(),
        component=component_name_strategy(),
        message=message_strategy(),
    )
    @settings(max_examples=100)
    def test_text_output_is_one_readable_line(self, level: LogLevel, component: str, message: str) -> None:
        """
        *For any* log entry, the text line SHALL contain the uppercase level,
        the bracketed component and the message.
        """
        stream = StringIO()
        logger = AuditLogger(output_format="text", output_stream=stream, min_level=LogLevel.DEBUG)

        logger.log(level, component, message)

        line = stream.getvalue()
        assert line.count("\n") == 1
        assert level.value.upper() in line
        assert f"[{component}]" in line
        assert message in line

    def test_both_formats(self) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="both", output_stream=stream)

        logger.info("manager", "Cache miss", {"key": "PSL_FULL_x"})

        json_line, text_line = stream.getvalue().splitlines()
        assert json.loads(json_line)["data"] == {"key": "PSL_FULL_x"}
        assert text_line.endswith('Cache miss {"key": "PSL_FULL_x"}')

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger(output_format="xml")


class TestLevelFilterProperty:
    """Property-based tests for minimum level filtering."""

    @given(level=log_level_strategy(), min_level=log_level_strategy())
    @settings(max_examples=100)
    def test_entries_below_min_level_are_dropped(self, level: LogLevel, min_level: LogLevel) -> None:
        """
        *For any* level and minimum level, an entry SHALL be recorded and
        written iff its level is at least the minimum.
        """
        stream = StringIO()
        logger = AuditLogger(output_format="text", output_stream=stream, min_level=min_level)

        entry = logger.log(level, "resolver", "message")

        if LEVEL_ORDER[level] >= LEVEL_ORDER[min_level]:
            assert entry is not None
            assert logger.entries == [entry]
            assert stream.getvalue()
        else:
            assert entry is None
            assert logger.entries == []
            assert stream.getvalue() == ""

    def test_level_shortcuts(self) -> None:
        logger = AuditLogger(output_stream=StringIO(), min_level=LogLevel.DEBUG)

        logger.debug("resolver", "Host is not a domain name", {"host": "192.168.1.1"})
        logger.info("manager", "Cache miss")
        logger.warn("manager", "Slow source")

        assert [entry.level for entry in logger.entries] == [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN]
        assert logger.entries[0].data == {"host": "192.168.1.1"}

    def test_clear_entries(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        logger.warn("resolver", "first")

        logger.clear_entries()

        assert logger.entries == []


class TestErrorContextProperty:
    """Tests for log_error."""

    def test_domain_error_context(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=StringIO())
        error = RulesUnavailable("https://psl.example/list.dat")

        entry = logger.log_error("manager", "Source refresh failed", error, "https://psl.example/list.dat", {"key": "k"})

        assert entry.level is LogLevel.ERROR
        assert entry.data == {
            "key": "k",
            "error_message": str(error),
            "error_type": "RulesUnavailable",
            "error_code": error.code,
            "source_url": "https://psl.example/list.dat",
        }

    def test_plain_exception_has_no_code(self) -> None:
        logger = AuditLogger(output_stream=StringIO())

        entry = logger.log_error("manager", "Cached rules are corrupted", ValueError("bad"))

        assert entry.data == {"error_message": "bad", "error_type": "ValueError"}

    def test_additional_data_is_not_mutated(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        additional = {"key": "k"}

        logger.log_error("manager", "failed", ValueError("bad"), additional_data=additional)

        assert additional == {"key": "k"}


class TestCreateLoggerProperty:
    """Tests for building loggers from configuration strings."""

    @pytest.mark.parametrize("level", ["debug", "info", "warn", "error"])
    def test_levels(self, level: str) -> None:
        logger = create_logger("json", level, StringIO())

        assert logger.min_level is LogLevel(level)
        assert logger.output_format == "json"

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            create_logger("text", "verbose")
