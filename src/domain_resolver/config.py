"""
Configuration dataclasses for the domain resolver.

This module defines the configuration structures passed explicitly into the
rule builder, the fetch and cache collaborators, and the logger. Nothing
here is read from process-wide state.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from domain_resolver.enums import IDNAOption


PSL_URL = "https://publicsuffix.org/list/public_suffix_list.dat"
RZD_URL = "https://data.iana.org/TLD/tlds-alpha-by-domain.txt"

PSL_SECTION_PATTERN = r"^// ===(?P<point>BEGIN|END) (?P<type>ICANN|PRIVATE) DOMAINS==="


@dataclass
class SourceConfig:
    """Where the Public Suffix List and Root Zone Database come from."""

    psl_url: str = PSL_URL
    rzd_url: str = RZD_URL
    section_pattern: str = PSL_SECTION_PATTERN


@dataclass
class HttpConfig:
    """HTTP fetch behavior configuration."""

    timeout_seconds: float = 10.0
    user_agent: str = "domain-resolver/0.1.0"


@dataclass
class CacheConfig:
    """Cache storage configuration."""

    ttl_seconds: Optional[int] = 86400
    directory: Optional[Path] = None  # None keeps entries in memory


@dataclass
class IDNAConfig:
    """IDNA conversion options applied to parsed hosts."""

    ascii_option: int = IDNAOption.IDNA2008_ASCII
    unicode_option: int = IDNAOption.IDNA2008_UNICODE


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class ResolverConfig:
    """Main configuration combining all sub-configurations."""

    sources: SourceConfig = field(default_factory=SourceConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    idna: IDNAConfig = field(default_factory=IDNAConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
