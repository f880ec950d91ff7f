"""
IANA Root Zone Database index.

Holds the ordered list of ASCII top-level domains published by IANA with
the version and last-updated timestamp of the list.
"""

from datetime import datetime
from typing import Any, Iterator, Mapping, Optional

from domain_resolver.domain import Domain, PublicSuffix
from domain_resolver.exceptions import HostSyntaxError, SourceFormatError
from domain_resolver.idna_codec import DEFAULT_CODEC
from domain_resolver.resolved_domain import ResolvedDomain


class RootZoneIndex:
    """Read-only collection of IANA top-level domains."""

    def __init__(self, records: list[str], version: str, last_updated: datetime) -> None:
        self._records = tuple(records)
        self._version = str(version)
        self._last_updated = last_updated
        self._lookup = frozenset(self._records)

    @property
    def records(self) -> tuple[str, ...]:
        return self._records

    @property
    def version(self) -> str:
        return self._version

    @property
    def last_updated(self) -> datetime:
        return self._last_updated

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __contains__(self, tld: object) -> bool:
        if not isinstance(tld, str):
            return False
        try:
            return DEFAULT_CODEC.to_ascii(tld) in self._lookup
        except HostSyntaxError:
            return False

    def __repr__(self) -> str:
        return f"RootZoneIndex(version={self._version!r}, records={len(self._records)})"

    def is_empty(self) -> bool:
        return not self._records

    def contains(self, host: object) -> bool:
        """Tell whether the top-level label of host is a known TLD."""
        tld = self._top_level_label(host)
        return tld is not None and tld in self._lookup

    def resolve(self, host: object) -> ResolvedDomain:
        """
        Resolve host against the root zone only.

        An unparsable host gives a ResolvedDomain with a null domain; a host
        whose TLD is unknown, or that can not carry a suffix, gives a null
        public suffix.
        """
        try:
            domain = host.domain if isinstance(host, ResolvedDomain) else Domain(host)
        except HostSyntaxError:
            return ResolvedDomain(None)

        tld = self._top_level_label(domain)
        if tld is None or tld not in self._lookup:
            return ResolvedDomain(domain)

        if len(domain) < 2 or str(domain).endswith("."):
            return ResolvedDomain(domain)

        return ResolvedDomain(domain, PublicSuffix.from_icann(tld, domain.ascii_option, domain.unicode_option))

    @staticmethod
    def _top_level_label(host: object) -> Optional[str]:
        try:
            domain = host if isinstance(host, Domain) else Domain(host)
            ascii_domain = domain.to_ascii()
        except HostSyntaxError:
            return None

        if ascii_domain.content is None:
            return None

        return ascii_domain.label(-1)

    def to_dict(self) -> dict:
        """Convert the index to its cached mapping form."""
        return {
            "records": list(self._records),
            "version": self._version,
            "update": self._last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RootZoneIndex":
        """
        Rebuild an index from its cached mapping form.

        Raises:
            SourceFormatError: If a key is missing or the timestamp is not ISO-8601
        """
        if not isinstance(data, Mapping):
            raise SourceFormatError(
                "The root zone mapping must be an object",
                details={"type": type(data).__name__},
            )

        missing = [key for key in ("records", "version", "update") if key not in data]
        if missing:
            raise SourceFormatError(
                f"The root zone mapping is missing: {', '.join(missing)}",
                details={"missing": missing},
            )

        if not isinstance(data["records"], list):
            raise SourceFormatError(
                "The root zone records must be a list",
                details={"type": type(data["records"]).__name__},
            )

        try:
            last_updated = datetime.fromisoformat(data["update"])
        except (TypeError, ValueError) as e:
            raise SourceFormatError(
                f"Invalid root zone update timestamp: {data['update']!r}",
                details={"update": data["update"]},
            ) from e

        return cls(data["records"], data["version"], last_updated)
