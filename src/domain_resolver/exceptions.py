"""
Exception classes for the domain resolver.

All exceptions inherit from DomainResolverError and provide structured
error information with codes, messages, and optional details. Each
concrete error quotes the offending input in its message.
"""

from typing import Optional

from domain_resolver.enums import HostErrorCode, IDNAErrorFlag, ResolutionErrorCode, SourceErrorCode


class DomainResolverError(Exception):
    """Base exception for all domain resolver errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# ---------------------------------------------------------------------------
# Host syntax
# ---------------------------------------------------------------------------

class HostSyntaxError(DomainResolverError):
    """Raised when a host string can not be turned into a domain name."""

    pass


class InvalidCharacters(HostSyntaxError):
    """Raised when a host contains characters a domain name can not hold."""

    def __init__(self, host: str) -> None:
        super().__init__(
            code=HostErrorCode.INVALID_CHARACTERS.value,
            message=f"The host `{host}` is invalid: it contains invalid characters.",
            details={"host": host},
        )


class UnsupportedHostType(HostSyntaxError):
    """Raised when an IP literal is given where a domain name is required."""

    def __init__(self, host: str) -> None:
        super().__init__(
            code=HostErrorCode.UNSUPPORTED_HOST_TYPE.value,
            message=f"The domain `{host}` is invalid: this is an IPv4 host.",
            details={"host": host},
        )


class IdnaConversionError(HostSyntaxError):
    """Raised when IDNA conversion of a host reports errors."""

    def __init__(
        self,
        host: str,
        reasons: Optional[list[str]] = None,
        flags: IDNAErrorFlag = IDNAErrorFlag.NONE,
    ) -> None:
        self.reasons = list(reasons or [])
        self.flags = flags
        if self.reasons:
            message = f"The host `{host}` is invalid : {', '.join(self.reasons)}."
        else:
            message = f"The host `{host}` is invalid."
        super().__init__(
            code=HostErrorCode.IDNA_ERROR.value,
            message=message,
            details={"host": host, "reasons": self.reasons, "flags": int(flags)},
        )


class InvalidLabelIndex(HostSyntaxError):
    """Raised when a label is read or edited at an index the domain lacks."""

    def __init__(self, index: int, domain: Optional[str] = None) -> None:
        super().__init__(
            code=HostErrorCode.INVALID_LABEL_INDEX.value,
            message=f"the given key `{index}` is invalid for the domain `{domain}`.",
            details={"index": index, "domain": domain},
        )


class DomainTooLong(HostSyntaxError):
    """Raised when a domain exceeds 255 octets in its storage form."""

    def __init__(self, host: str, length: int) -> None:
        super().__init__(
            code=HostErrorCode.DOMAIN_TOO_LONG.value,
            message=f"The host `{host}` is invalid: its storage form is {length} octets long.",
            details={"host": host, "length": length},
        )


class InvalidPublicSuffix(HostSyntaxError):
    """Raised when a value can not stand as a public suffix."""

    def __init__(self, suffix: Optional[str]) -> None:
        super().__init__(
            code=HostErrorCode.INVALID_PUBLIC_SUFFIX.value,
            message=f"The public suffix `{suffix}` is invalid.",
            details={"public_suffix": suffix},
        )


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

class ResolutionError(DomainResolverError):
    """Raised when a public suffix can not be attached to a domain."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        domain: Optional[object] = None,
    ) -> None:
        self.domain = domain
        super().__init__(code=code, message=message, details=details)

    def has_domain(self) -> bool:
        return self.domain is not None


class UnresolvableDomain(ResolutionError):
    """Raised when a domain can not carry a public suffix."""

    def __init__(self, content: Optional[str], reason: str = "", domain: Optional[object] = None) -> None:
        message = reason or f'The domain "{content}" can not contain a public suffix.'
        super().__init__(
            code=ResolutionErrorCode.UNRESOLVABLE_DOMAIN.value,
            message=message,
            details={"domain": content},
            domain=domain,
        )


class SuffixMismatch(ResolutionError):
    """Raised when a public suffix is not a trailing part of the domain."""

    def __init__(self, suffix: str, content: str, domain: Optional[object] = None) -> None:
        super().__init__(
            code=ResolutionErrorCode.SUFFIX_MISMATCH.value,
            message=f"The public suffix `{suffix}` can not be assign to the domain name `{content}`",
            details={"public_suffix": suffix, "domain": content},
            domain=domain,
        )


class MissingRegistrableDomain(ResolutionError):
    """Raised when a sub domain or second level edit lacks a registrable domain."""

    def __init__(self, content: Optional[str], domain: Optional[object] = None) -> None:
        super().__init__(
            code=ResolutionErrorCode.MISSING_REGISTRABLE_DOMAIN.value,
            message=(
                f'A subdomain can not be added to a domain "{content}" '
                "without a registrable domain part."
            ),
            details={"domain": content},
            domain=domain,
        )


# ---------------------------------------------------------------------------
# Sources, network and persistence
# ---------------------------------------------------------------------------

class SourceError(DomainResolverError):
    """Raised when PSL or root zone source data is unusable."""

    pass


class SourceFormatError(SourceError):
    """Raised when PSL or root zone text (or its mapping form) is malformed."""

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(
            code=SourceErrorCode.FORMAT_ERROR.value,
            message=message,
            details=details,
        )


class NetworkError(DomainResolverError):
    """Raised when network operations fail."""

    pass


class SourceUnreachable(NetworkError):
    """Raised when the transport fails while fetching a source URI."""

    def __init__(self, uri: str, reason: str = "") -> None:
        super().__init__(
            code=SourceErrorCode.UNREACHABLE.value,
            message=f"Could not access the URI: `{uri}`.",
            details={"uri": uri, "reason": reason},
        )


class InvalidSourceResponse(NetworkError):
    """Raised when a source URI answers with a non-success status."""

    def __init__(self, uri: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(
            code=SourceErrorCode.INVALID_RESPONSE.value,
            message=f"Invalid response from URI: `{uri}`.",
            details={"uri": uri, "status_code": status_code},
        )


class PersistenceError(DomainResolverError):
    """Raised when cached data can not be stored or restored."""

    pass


class CacheCorrupted(PersistenceError):
    """Raised when stored JSON fails to parse or lacks required keys."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            code=SourceErrorCode.CACHE_CORRUPTED.value,
            message=f"The cache entry `{key}` is corrupted: {reason}",
            details={"key": key, "reason": reason},
        )


class RulesUnavailable(PersistenceError):
    """Raised when the public suffix list rules can not be loaded."""

    def __init__(self, uri: str) -> None:
        super().__init__(
            code=SourceErrorCode.RULES_UNAVAILABLE.value,
            message=f"Unable to load the public suffix list rules for {uri}",
            details={"uri": uri},
        )


class TLDsUnavailable(PersistenceError):
    """Raised when the root zone database can not be loaded."""

    def __init__(self, uri: str) -> None:
        super().__init__(
            code=SourceErrorCode.TLDS_UNAVAILABLE.value,
            message=f"Unable to load the root zone database from {uri}",
            details={"uri": uri},
        )
