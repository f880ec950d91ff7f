"""
Source text converters.

Turns the raw Public Suffix List into a RuleTree and the raw IANA Root
Zone Database into a RootZoneIndex.
"""

import re
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from domain_resolver.config import SourceConfig
from domain_resolver.exceptions import HostSyntaxError, SourceFormatError
from domain_resolver.idna_codec import DEFAULT_CODEC, LabelCodec
from domain_resolver.root_zone import RootZoneIndex
from domain_resolver.rules import RuleTree, RuleTreeBuilder


RZD_HEADER_PATTERN = re.compile(r"^# Version (?P<version>\d+), Last Updated (?P<update>.*?)$")

RZD_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"

UTC_NAMES = frozenset({"UTC", "GMT", "Z"})


class Converter:
    """Converts PSL and Root Zone Database text into their in-memory forms."""

    def __init__(
        self,
        codec: Optional[LabelCodec] = None,
        config: Optional[SourceConfig] = None,
    ) -> None:
        self._codec = codec or DEFAULT_CODEC
        self._builder = RuleTreeBuilder(self._codec, config)

    def convert(self, content: str) -> RuleTree:
        """Convert the Public Suffix List text into a rule tree."""
        return self._builder.build(content)

    def convert_root_zone_database(self, content: str) -> RootZoneIndex:
        """
        Convert the IANA Root Zone Database text into a RootZoneIndex.

        Raises:
            SourceFormatError: If the version header is missing, repeated or
                malformed, or if no TLD record is found
        """
        header: Optional[tuple[str, datetime]] = None
        records: list[str] = []
        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line:
                continue

            if "#" not in line:
                try:
                    records.append(self._codec.to_ascii(line))
                except HostSyntaxError as e:
                    raise SourceFormatError(
                        f"Invalid TLD record: {line}",
                        details={"record": line},
                    ) from e
                continue

            if header is None:
                header = self._get_header_info(line)
                continue

            raise SourceFormatError(
                f"Invalid Version line: {line}",
                details={"line": line},
            )

        if not records or header is None:
            raise SourceFormatError(
                "No TLD or Version header found",
                details={"records": len(records), "header": header is not None},
            )

        version, last_updated = header
        return RootZoneIndex(records, version, last_updated)

    @staticmethod
    def _get_header_info(line: str) -> tuple[str, datetime]:
        match = RZD_HEADER_PATTERN.match(line)
        if not match:
            raise SourceFormatError(
                f"Invalid Version line: {line}",
                details={"line": line},
            )

        update = match.group("update").strip()
        date_text, _, tz_name = update.rpartition(" ")
        try:
            parsed = datetime.strptime(date_text, RZD_DATE_FORMAT)
            if tz_name in UTC_NAMES:
                tzinfo = timezone.utc
            else:
                tzinfo = ZoneInfo(tz_name)
        except (ValueError, ZoneInfoNotFoundError) as e:
            raise SourceFormatError(
                f"Invalid Version line: {line}",
                details={"line": line, "update": update},
            ) from e

        return match.group("version"), parsed.replace(tzinfo=tzinfo)
