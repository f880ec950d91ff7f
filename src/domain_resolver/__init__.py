"""
Domain Resolver - Public Suffix List and IANA root zone domain resolver.

This package splits host names into sub domain, registrable domain and
public suffix using the Public Suffix List, and checks top-level domains
against the IANA Root Zone Database.
"""

__version__ = "0.1.0"
__author__ = "Domain Resolver Team"

from domain_resolver.exceptions import (
    DomainResolverError,
    HostSyntaxError,
    InvalidCharacters,
    UnsupportedHostType,
    IdnaConversionError,
    InvalidLabelIndex,
    DomainTooLong,
    InvalidPublicSuffix,
    ResolutionError,
    UnresolvableDomain,
    SuffixMismatch,
    MissingRegistrableDomain,
    SourceError,
    SourceFormatError,
    NetworkError,
    SourceUnreachable,
    InvalidSourceResponse,
    PersistenceError,
    CacheCorrupted,
    RulesUnavailable,
    TLDsUnavailable,
)
from domain_resolver.enums import (
    Section,
    IDNAOption,
    IDNAErrorFlag,
    LogLevel,
    HostErrorCode,
    ResolutionErrorCode,
    SourceErrorCode,
)
from domain_resolver.config import (
    SourceConfig,
    HttpConfig,
    CacheConfig,
    IDNAConfig,
    LoggingConfig,
    ResolverConfig,
)
from domain_resolver.idna_codec import (
    LabelCodec,
    describe_idna_errors,
)
from domain_resolver.domain_parser import (
    DomainLabelParser,
)
from domain_resolver.domain import (
    Domain,
    PublicSuffix,
)
from domain_resolver.resolved_domain import (
    ResolvedDomain,
)
from domain_resolver.rules import (
    RuleNode,
    RuleTree,
    RuleTreeBuilder,
)
from domain_resolver.root_zone import (
    RootZoneIndex,
)
from domain_resolver.converter import (
    Converter,
)
from domain_resolver.resolver import (
    SuffixResolver,
)
from domain_resolver.audit_logger import (
    AuditLogger,
    LogEntry,
    create_logger,
)
from domain_resolver.http_client import (
    HttpClient,
    HttpxClient,
)
from domain_resolver.cache import (
    Cache,
    MemoryCache,
    FileCache,
)
from domain_resolver.manager import (
    Manager,
    build_cache_key,
    filter_ttl,
)
from domain_resolver.cli import (
    main as cli_main,
    create_parser,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
)

__all__ = [
    # Exceptions
    "DomainResolverError",
    "HostSyntaxError",
    "InvalidCharacters",
    "UnsupportedHostType",
    "IdnaConversionError",
    "InvalidLabelIndex",
    "DomainTooLong",
    "InvalidPublicSuffix",
    "ResolutionError",
    "UnresolvableDomain",
    "SuffixMismatch",
    "MissingRegistrableDomain",
    "SourceError",
    "SourceFormatError",
    "NetworkError",
    "SourceUnreachable",
    "InvalidSourceResponse",
    "PersistenceError",
    "CacheCorrupted",
    "RulesUnavailable",
    "TLDsUnavailable",
    # Enums
    "Section",
    "IDNAOption",
    "IDNAErrorFlag",
    "LogLevel",
    "HostErrorCode",
    "ResolutionErrorCode",
    "SourceErrorCode",
    # Configuration
    "SourceConfig",
    "HttpConfig",
    "CacheConfig",
    "IDNAConfig",
    "LoggingConfig",
    "ResolverConfig",
    # Domain model
    "LabelCodec",
    "describe_idna_errors",
    "DomainLabelParser",
    "Domain",
    "PublicSuffix",
    "ResolvedDomain",
    # Rules and root zone
    "RuleNode",
    "RuleTree",
    "RuleTreeBuilder",
    "RootZoneIndex",
    "Converter",
    "SuffixResolver",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    "create_logger",
    # Sources
    "HttpClient",
    "HttpxClient",
    "Cache",
    "MemoryCache",
    "FileCache",
    "Manager",
    "build_cache_key",
    "filter_ttl",
    # CLI
    "cli_main",
    "create_parser",
    "create_default_config",
    "load_config_from_file",
    "save_config_to_file",
]
