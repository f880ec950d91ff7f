"""
Command-line interface for the domain resolver.

This module provides the main CLI entry point with commands for:
- resolve: Split a host into sub domain, registrable domain and public suffix
- tld: Check a host's top-level domain against the IANA root zone
- refresh: Download and cache the sources
- config: Configuration management
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from domain_resolver import __version__
from domain_resolver.audit_logger import AuditLogger, create_logger
from domain_resolver.cache import FileCache, MemoryCache
from domain_resolver.config import (
    CacheConfig,
    HttpConfig,
    IDNAConfig,
    LoggingConfig,
    ResolverConfig,
    SourceConfig,
)
from domain_resolver.converter import Converter
from domain_resolver.enums import Section
from domain_resolver.exceptions import DomainResolverError
from domain_resolver.http_client import HttpxClient
from domain_resolver.manager import Manager
from domain_resolver.resolver import SuffixResolver
from domain_resolver.root_zone import RootZoneIndex


DEFAULT_HOME = Path.home() / ".domain_resolver"
DEFAULT_CONFIG_PATH = DEFAULT_HOME / "config.json"

SECTIONS = {
    "icann": Section.ICANN,
    "private": Section.PRIVATE,
    "all": None,
}

ENV_PSL_URL = "DOMAIN_RESOLVER_PSL_URL"
ENV_RZD_URL = "DOMAIN_RESOLVER_RZD_URL"
ENV_CACHE_DIR = "DOMAIN_RESOLVER_CACHE_DIR"
ENV_CACHE_TTL = "DOMAIN_RESOLVER_CACHE_TTL"


def create_default_config(cache_dir: Optional[Path] = None) -> ResolverConfig:
    """
    Create a default resolver configuration.

    Args:
        cache_dir: Directory for cached sources (defaults to ~/.domain_resolver/cache)

    Returns:
        ResolverConfig with default settings
    """
    if cache_dir is None:
        cache_dir = DEFAULT_HOME / "cache"

    return ResolverConfig(
        sources=SourceConfig(),
        http=HttpConfig(),
        cache=CacheConfig(ttl_seconds=86400, directory=cache_dir),
        idna=IDNAConfig(),
        logging=LoggingConfig(level="info", output_format="text"),
    )


def config_to_dict(config: ResolverConfig) -> dict:
    """Convert a configuration to its JSON file form."""
    return {
        "sources": {
            "psl_url": config.sources.psl_url,
            "rzd_url": config.sources.rzd_url,
            "section_pattern": config.sources.section_pattern,
        },
        "http": {
            "timeout_seconds": config.http.timeout_seconds,
            "user_agent": config.http.user_agent,
        },
        "cache": {
            "ttl_seconds": config.cache.ttl_seconds,
            "directory": str(config.cache.directory) if config.cache.directory else None,
        },
        "idna": {
            "ascii_option": int(config.idna.ascii_option),
            "unicode_option": int(config.idna.unicode_option),
        },
        "logging": {
            "level": config.logging.level,
            "output_format": config.logging.output_format,
        },
    }


def load_config_from_file(config_path: Path) -> Optional[ResolverConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        ResolverConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        defaults = ResolverConfig()

        sources_data = data.get("sources", {})
        sources = SourceConfig(
            psl_url=sources_data.get("psl_url", defaults.sources.psl_url),
            rzd_url=sources_data.get("rzd_url", defaults.sources.rzd_url),
            section_pattern=sources_data.get("section_pattern", defaults.sources.section_pattern),
        )

        http_data = data.get("http", {})
        http = HttpConfig(
            timeout_seconds=float(http_data.get("timeout_seconds", defaults.http.timeout_seconds)),
            user_agent=http_data.get("user_agent", defaults.http.user_agent),
        )

        cache_data = data.get("cache", {})
        directory = cache_data.get("directory")
        cache = CacheConfig(
            ttl_seconds=cache_data.get("ttl_seconds", defaults.cache.ttl_seconds),
            directory=Path(directory) if directory else None,
        )

        idna_data = data.get("idna", {})
        idna = IDNAConfig(
            ascii_option=int(idna_data.get("ascii_option", defaults.idna.ascii_option)),
            unicode_option=int(idna_data.get("unicode_option", defaults.idna.unicode_option)),
        )

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        )

        return ResolverConfig(
            sources=sources,
            http=http,
            cache=cache,
            idna=idna,
            logging=logging_config,
        )
    except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None


def save_config_to_file(config: ResolverConfig, config_path: Path) -> bool:
    """
    Save configuration to a JSON file.

    Returns:
        True if successful, False otherwise
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config_to_dict(config), f, indent=2, ensure_ascii=False)
        return True
    except (OSError, TypeError) as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return False


def apply_env_overrides(config: ResolverConfig, env: Optional[Mapping[str, str]] = None) -> ResolverConfig:
    """
    Apply DOMAIN_RESOLVER_* environment variables to a configuration.

    Args:
        config: Configuration to update in place
        env: Variables to read (defaults to os.environ)

    Returns:
        The updated configuration
    """
    env = os.environ if env is None else env

    if env.get(ENV_PSL_URL):
        config.sources.psl_url = env[ENV_PSL_URL].strip()

    if env.get(ENV_RZD_URL):
        config.sources.rzd_url = env[ENV_RZD_URL].strip()

    if env.get(ENV_CACHE_DIR):
        config.cache.directory = Path(env[ENV_CACHE_DIR].strip())

    ttl = env.get(ENV_CACHE_TTL, "").strip()
    if ttl:
        try:
            config.cache.ttl_seconds = int(ttl)
        except ValueError:
            print(f"Warning: ignoring invalid {ENV_CACHE_TTL}: {ttl}", file=sys.stderr)

    return config


def create_manager(config: ResolverConfig, logger: Optional[AuditLogger] = None) -> Manager:
    """Create a Manager wired with the configured cache and an httpx client."""
    if config.cache.directory:
        cache = FileCache(config.cache.directory)
    else:
        cache = MemoryCache()

    return Manager(cache, HttpxClient(config.http), config, logger)


def _load_config(args: argparse.Namespace) -> Optional[ResolverConfig]:
    config_file = getattr(args, "config", None)
    if config_file:
        config = load_config_from_file(Path(config_file))
        if config is None:
            print(f"Error: Could not load config from {config_file}", file=sys.stderr)
            return None
    else:
        config = create_default_config()

    return apply_env_overrides(config)


def _create_logger(args: argparse.Namespace, config: ResolverConfig) -> Optional[AuditLogger]:
    if not getattr(args, "verbose", False):
        return None

    return create_logger(config.logging.output_format, "debug")


def _read_file(path: str) -> Optional[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return None


def _print_resolution(data: dict) -> None:
    section = f" ({data['section']})" if data["section"] else ""
    print(f"Domain: {data['domain']}")
    print(f"Public suffix: {data['public_suffix']}{section}")
    print(f"Registrable domain: {data['registrable_domain']}")
    print(f"Sub domain: {data['sub_domain']}")
    print(f"Second level domain: {data['second_level_domain']}")


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the 'resolve' command."""
    config = _load_config(args)
    if config is None:
        return 1

    logger = _create_logger(args, config)
    try:
        if args.psl_file:
            content = _read_file(args.psl_file)
            if content is None:
                return 1
            resolver = SuffixResolver.from_text(content, config, logger)
        else:
            with create_manager(config, logger) as manager:
                resolver = manager.get_rules()
    except DomainResolverError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    result = resolver.resolve(args.host, SECTIONS[args.section], default=not args.no_default)
    data = result.to_dict()
    if args.json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        _print_resolution(data)

    return 0 if data["public_suffix"] is not None else 1


def cmd_tld(args: argparse.Namespace) -> int:
    """Handle the 'tld' command."""
    config = _load_config(args)
    if config is None:
        return 1

    logger = _create_logger(args, config)
    try:
        if args.rzd_file:
            content = _read_file(args.rzd_file)
            if content is None:
                return 1
            index: RootZoneIndex = Converter(config=config.sources).convert_root_zone_database(content)
        else:
            with create_manager(config, logger) as manager:
                index = manager.get_tlds()
    except DomainResolverError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    data = index.resolve(args.host).to_dict()
    if args.json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        print(f"Root zone version: {index.version} ({index.last_updated.isoformat()})")
        _print_resolution(data)

    return 0 if index.contains(args.host) else 1


def cmd_refresh(args: argparse.Namespace) -> int:
    """Handle the 'refresh' command."""
    config = _load_config(args)
    if config is None:
        return 1

    refresh_all = not args.rules and not args.tlds
    exit_code = 0

    with create_manager(config, _create_logger(args, config)) as manager:
        sources = [
            (args.rules or refresh_all, "Public suffix list", manager.refresh_rules, config.sources.psl_url),
            (args.tlds or refresh_all, "Root zone database", manager.refresh_tlds, config.sources.rzd_url),
        ]
        for selected, name, refresh, url in sources:
            if not selected:
                continue
            try:
                stored = refresh()
            except DomainResolverError as e:
                print(f"Error: {e.message}", file=sys.stderr)
                exit_code = 1
                continue

            print(f"{name}: {'cached' if stored else 'not cached'} ({url})")
            if not stored:
                exit_code = 1

    return exit_code


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  PSL URL: {config.sources.psl_url}")
        print(f"  RZD URL: {config.sources.rzd_url}")
        print(f"  Cache directory: {config.cache.directory}")
        print(f"  Cache TTL: {config.cache.ttl_seconds}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        if save_config_to_file(create_default_config(), config_path):
            print(f"Configuration created at: {config_path}")
            return 0
        return 1

    elif args.action == "validate":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1

        if config.logging.output_format not in ("json", "text", "both"):
            print(f"Error: Invalid output_format: {config.logging.output_format}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-resolver",
        description="Public Suffix List and root zone domain resolver",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'resolve' command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a host against the Public Suffix List",
    )
    resolve_parser.add_argument(
        "host",
        help="Host to resolve (e.g., www.example.co.uk)",
    )
    resolve_parser.add_argument(
        "--section", "-s",
        choices=sorted(SECTIONS),
        default="all",
        help="Public Suffix List section to use (default: all)",
    )
    resolve_parser.add_argument(
        "--no-default",
        action="store_true",
        help="Do not fall back to the top-level label when no rule matches",
    )
    resolve_parser.add_argument(
        "--psl-file",
        help="Read the Public Suffix List from a local file",
    )
    resolve_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    _add_common_arguments(resolve_parser)
    resolve_parser.set_defaults(func=cmd_resolve)

    # 'tld' command
    tld_parser = subparsers.add_parser(
        "tld",
        help="Check a host's top-level domain against the IANA root zone",
    )
    tld_parser.add_argument(
        "host",
        help="Host to check",
    )
    tld_parser.add_argument(
        "--rzd-file",
        help="Read the Root Zone Database from a local file",
    )
    tld_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    _add_common_arguments(tld_parser)
    tld_parser.set_defaults(func=cmd_tld)

    # 'refresh' command
    refresh_parser = subparsers.add_parser(
        "refresh",
        help="Download and cache the sources",
    )
    refresh_parser.add_argument(
        "--rules",
        action="store_true",
        help="Refresh the Public Suffix List",
    )
    refresh_parser.add_argument(
        "--tlds",
        action="store_true",
        help="Refresh the Root Zone Database",
    )
    _add_common_arguments(refresh_parser)
    refresh_parser.set_defaults(func=cmd_refresh)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
