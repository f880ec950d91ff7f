"""
Enumeration types for the domain resolver.

These enums provide type-safe constants for Public Suffix List sections,
IDNA conversion options, IDNA error flags and error codes used throughout
the system.
"""

from enum import Enum, IntFlag


class Section(Enum):
    """Public Suffix List section a rule belongs to."""

    ICANN = "ICANN_DOMAINS"
    PRIVATE = "PRIVATE_DOMAINS"


class IDNAOption(IntFlag):
    """
    IDNA conversion options.

    Values mirror the ICU/UTS-46 option bits so that options persisted by
    other tools keep their meaning.
    """

    DEFAULT = 0
    ALLOW_UNASSIGNED = 1
    USE_STD3_RULES = 2
    CHECK_BIDI = 4
    CHECK_CONTEXTJ = 8
    NONTRANSITIONAL_TO_ASCII = 16
    NONTRANSITIONAL_TO_UNICODE = 32

    IDNA2008_ASCII = NONTRANSITIONAL_TO_ASCII | CHECK_BIDI | USE_STD3_RULES | CHECK_CONTEXTJ
    IDNA2008_UNICODE = NONTRANSITIONAL_TO_UNICODE | CHECK_BIDI | USE_STD3_RULES | CHECK_CONTEXTJ


class IDNAErrorFlag(IntFlag):
    """Error bits reported by an IDNA conversion."""

    NONE = 0
    EMPTY_LABEL = 0x1
    LABEL_TOO_LONG = 0x2
    DOMAIN_NAME_TOO_LONG = 0x4
    LEADING_HYPHEN = 0x8
    TRAILING_HYPHEN = 0x10
    HYPHEN_3_4 = 0x20
    LEADING_COMBINING_MARK = 0x40
    DISALLOWED = 0x80
    PUNYCODE = 0x100
    LABEL_HAS_DOT = 0x200
    INVALID_ACE_LABEL = 0x400
    BIDI = 0x800
    CONTEXTJ = 0x1000


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class HostErrorCode(Enum):
    """Error codes for host parsing and conversion failures."""

    INVALID_CHARACTERS = "invalid_characters"
    UNSUPPORTED_HOST_TYPE = "unsupported_host_type"
    IDNA_ERROR = "idna_error"
    INVALID_LABEL_INDEX = "invalid_label_index"
    DOMAIN_TOO_LONG = "domain_too_long"
    INVALID_PUBLIC_SUFFIX = "invalid_public_suffix"


class ResolutionErrorCode(Enum):
    """Error codes for public suffix resolution failures."""

    UNRESOLVABLE_DOMAIN = "unresolvable_domain"
    SUFFIX_MISMATCH = "suffix_mismatch"
    MISSING_REGISTRABLE_DOMAIN = "missing_registrable_domain"


class SourceErrorCode(Enum):
    """Error codes for source retrieval, parsing and caching failures."""

    FORMAT_ERROR = "format_error"
    UNREACHABLE = "unreachable"
    INVALID_RESPONSE = "invalid_response"
    CACHE_CORRUPTED = "cache_corrupted"
    RULES_UNAVAILABLE = "rules_unavailable"
    TLDS_UNAVAILABLE = "tlds_unavailable"
