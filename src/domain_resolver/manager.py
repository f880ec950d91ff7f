"""
Source manager for the domain resolver.

Fetches the Public Suffix List and the IANA Root Zone Database, converts
them, and keeps their JSON form in a cache. A cache miss triggers a
refresh; everything else is served from the cache.
"""

import hashlib
import json
from datetime import datetime, timedelta
from typing import Optional, Union

from domain_resolver.audit_logger import AuditLogger
from domain_resolver.cache import Cache
from domain_resolver.config import ResolverConfig
from domain_resolver.converter import Converter
from domain_resolver.enums import LogLevel
from domain_resolver.exceptions import (
    CacheCorrupted,
    NetworkError,
    RulesUnavailable,
    SourceError,
    TLDsUnavailable,
)
from domain_resolver.http_client import HttpClient
from domain_resolver.resolver import SuffixResolver
from domain_resolver.root_zone import RootZoneIndex


TTL = Union[None, int, float, timedelta, datetime]

PSL_CACHE_PREFIX = "PSL"
RZD_CACHE_PREFIX = "RZD"


def build_cache_key(prefix: str, url: str) -> str:
    """Build the cache key of a source: prefix, '_FULL_', MD5 of the lowercased URL."""
    digest = hashlib.md5(url.lower().encode("utf-8")).hexdigest()
    return f"{prefix}_FULL_{digest}"


def filter_ttl(ttl: TTL) -> Optional[float]:
    """
    Normalize a time-to-live into seconds.

    Args:
        ttl: None (no expiry), seconds, a timedelta, or a future datetime

    Returns:
        Seconds as float, or None

    Raises:
        TypeError: If ttl is of any other type
        ValueError: If a datetime ttl is not in the future
    """
    if ttl is None:
        return None

    if isinstance(ttl, bool):
        raise TypeError("The ttl must be a number, a timedelta or a datetime, bool given")

    if isinstance(ttl, (int, float)):
        return float(ttl)

    if isinstance(ttl, timedelta):
        return ttl.total_seconds()

    if isinstance(ttl, datetime):
        seconds = (ttl - datetime.now(ttl.tzinfo)).total_seconds()
        if seconds <= 0:
            raise ValueError(f"The ttl datetime {ttl.isoformat()} is not in the future")
        return seconds

    raise TypeError(
        f"The ttl must be a number, a timedelta or a datetime, {type(ttl).__name__} given"
    )


class Manager:
    """
    Obtains, caches and returns the resolver sources.

    Refresh methods always download and overwrite the cache; get methods
    only download on a cache miss.
    """

    COMPONENT = "manager"

    def __init__(
        self,
        cache: Cache,
        http: HttpClient,
        config: Optional[ResolverConfig] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the manager.

        Args:
            cache: Cache collaborator
            http: HTTP fetch collaborator
            config: Resolver configuration; its cache TTL is the default TTL
            logger: Optional audit logger
        """
        self._cache = cache
        self._http = http
        self._config = config or ResolverConfig()
        self._logger = logger
        self._ttl = filter_ttl(self._config.cache.ttl_seconds)
        self._converter = Converter(config=self._config.sources)

    def __enter__(self) -> "Manager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the HTTP client."""
        self._http.close()

    @property
    def ttl(self) -> Optional[float]:
        return self._ttl

    @staticmethod
    def cache_key(prefix: str, url: str) -> str:
        return build_cache_key(prefix, url)

    def get_rules(self, url: Optional[str] = None, ttl: TTL = None) -> SuffixResolver:
        """
        Return a resolver for the cached Public Suffix List.

        Raises:
            RulesUnavailable: If the list is not cached and can not be refreshed
            CacheCorrupted: If the cached JSON can not be decoded
        """
        url = url or self._config.sources.psl_url
        key = build_cache_key(PSL_CACHE_PREFIX, url)
        data = self._load(key, url, ttl, self.refresh_rules, RulesUnavailable(url))

        try:
            return SuffixResolver.from_json(data, self._config, self._logger)
        except SourceError as e:
            self._log_error("Cached rules are corrupted", e, url)
            raise CacheCorrupted(key, e.message) from e

    def refresh_rules(self, url: Optional[str] = None, ttl: TTL = None) -> bool:
        """
        Download, convert and cache the Public Suffix List.

        Returns:
            True if the cache accepted the new entry

        Raises:
            SourceUnreachable: If the URL can not be reached
            InvalidSourceResponse: If the URL does not answer 200
            SourceFormatError: If the list can not be converted
        """
        url = url or self._config.sources.psl_url
        rules = self._converter.convert(self._http.get_content(url))
        self._log(LogLevel.INFO, "Rules refreshed", {"url": url, "nodes": rules.node_count()})
        return self._store(build_cache_key(PSL_CACHE_PREFIX, url), rules.to_json(), ttl)

    def get_tlds(self, url: Optional[str] = None, ttl: TTL = None) -> RootZoneIndex:
        """
        Return the cached Root Zone Database.

        Raises:
            TLDsUnavailable: If the database is not cached and can not be refreshed
            CacheCorrupted: If the cached JSON can not be decoded or lacks a key
        """
        url = url or self._config.sources.rzd_url
        key = build_cache_key(RZD_CACHE_PREFIX, url)
        data = self._load(key, url, ttl, self.refresh_tlds, TLDsUnavailable(url))

        try:
            return RootZoneIndex.from_dict(json.loads(data))
        except json.JSONDecodeError as e:
            self._log_error("Cached root zone database is corrupted", e, url)
            raise CacheCorrupted(key, str(e)) from e
        except SourceError as e:
            self._log_error("Cached root zone database is corrupted", e, url)
            raise CacheCorrupted(key, e.message) from e

    def refresh_tlds(self, url: Optional[str] = None, ttl: TTL = None) -> bool:
        """
        Download, convert and cache the Root Zone Database.

        Returns:
            True if the cache accepted the new entry

        Raises:
            SourceUnreachable: If the URL can not be reached
            InvalidSourceResponse: If the URL does not answer 200
            SourceFormatError: If the database can not be converted
        """
        url = url or self._config.sources.rzd_url
        index = self._converter.convert_root_zone_database(self._http.get_content(url))
        self._log(LogLevel.INFO, "Root zone database refreshed", {"url": url, "version": index.version})
        return self._store(build_cache_key(RZD_CACHE_PREFIX, url), json.dumps(index.to_dict()), ttl)

    def _load(self, key, url, ttl, refresh, unavailable) -> str:
        data = self._cache.get(key)
        if data is not None:
            self._log(LogLevel.DEBUG, "Cache hit", {"key": key, "url": url})
            return data

        self._log(LogLevel.INFO, "Cache miss", {"key": key, "url": url})
        try:
            refreshed = refresh(url, ttl)
        except (NetworkError, SourceError) as e:
            self._log_error("Source refresh failed", e, url)
            raise unavailable from e

        data = self._cache.get(key) if refreshed else None
        if data is None:
            self._log_error("Source could not be cached", None, url, {"key": key})
            raise unavailable

        return data

    def _store(self, key: str, value: str, ttl: TTL) -> bool:
        seconds = filter_ttl(ttl)
        return self._cache.set(key, value, seconds if seconds is not None else self._ttl)

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, self.COMPONENT, message, data)

    def _log_error(self, message, error, url, data=None) -> None:
        if self._logger:
            self._logger.log_error(self.COMPONENT, message, error, url, data)
