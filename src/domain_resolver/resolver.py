"""
Public suffix resolution.

Walks the PSL rule tree against a domain's labels, from the top-level label
leftwards, to find the longest matching public suffix. Exception rules stop
the walk before the excepted label; wildcard rules match any single label.
"""

from typing import Optional, Sequence

from domain_resolver.audit_logger import AuditLogger
from domain_resolver.config import IDNAConfig, ResolverConfig
from domain_resolver.converter import Converter
from domain_resolver.domain import Domain, PublicSuffix
from domain_resolver.enums import Section
from domain_resolver.exceptions import HostSyntaxError, UnresolvableDomain
from domain_resolver.resolved_domain import ResolvedDomain
from domain_resolver.rules import WILDCARD_LABEL, RuleTree


class SuffixResolver:
    """
    Resolves hosts against a Public Suffix List rule tree.

    A section of None asks for the full answer: the deeper of the ICANN and
    PRIVATE matches, ICANN winning ties. When no rule matches, the implicit
    default rule makes the top-level label the public suffix unless default
    resolution is turned off.
    """

    COMPONENT = "resolver"

    def __init__(
        self,
        rules: RuleTree,
        idna_config: Optional[IDNAConfig] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._rules = rules
        self._idna = idna_config or IDNAConfig()
        self._logger = logger

    @classmethod
    def from_text(
        cls,
        content: str,
        config: Optional[ResolverConfig] = None,
        logger: Optional[AuditLogger] = None,
    ) -> "SuffixResolver":
        """Build a resolver straight from Public Suffix List text."""
        config = config or ResolverConfig()
        rules = Converter(config=config.sources).convert(content)
        return cls(rules, config.idna, logger)

    @classmethod
    def from_json(
        cls,
        text: str,
        config: Optional[ResolverConfig] = None,
        logger: Optional[AuditLogger] = None,
    ) -> "SuffixResolver":
        """Build a resolver from the cached JSON form of the rules."""
        config = config or ResolverConfig()
        return cls(RuleTree.from_json(text), config.idna, logger)

    @property
    def rules(self) -> RuleTree:
        return self._rules

    def find_public_suffix(
        self,
        labels: Sequence[str],
        section: Optional[Section] = None,
        default: bool = True,
    ) -> tuple[int, Optional[Section]]:
        """
        Compute how many trailing labels form the public suffix.

        Args:
            labels: Canonical ASCII labels in left-to-right order
            section: Section.ICANN, Section.PRIVATE, or None for both
            default: Apply the implicit rule when nothing matches

        Returns:
            (matched label count, section of the matching rule); the section
            is None for the implicit rule, the count 0 when unresolved
        """
        if not labels or labels[-1] == "":
            return 0, None

        icann = self._walk(labels, Section.ICANN)
        if section is Section.ICANN:
            if icann:
                return icann, Section.ICANN
            return self._default(default)

        private = self._walk(labels, Section.PRIVATE)
        if private > icann:
            return private, Section.PRIVATE

        if section is Section.PRIVATE or not icann:
            return self._default(default)

        return icann, Section.ICANN

    def _walk(self, labels: Sequence[str], section: Section) -> int:
        index = self._rules.root(section)
        matched = 0
        for label in reversed(labels):
            child = self._rules.child(index, label)
            if child is None:
                child = self._rules.child(index, WILDCARD_LABEL)
                if child is None:
                    break
            elif self._rules.node(child).is_exception:
                break

            index = child
            matched += 1

        return matched

    @staticmethod
    def _default(default: bool) -> tuple[int, Optional[Section]]:
        return (1, None) if default else (0, None)

    def resolve(
        self,
        host: object,
        section: Optional[Section] = None,
        default: bool = True,
    ) -> ResolvedDomain:
        """
        Resolve a host, reporting absence instead of failing.

        A host that is not a domain name yields a ResolvedDomain with a null
        domain. A host that can not carry a public suffix (a single label, a
        trailing dot, or a host that is itself a public suffix) yields a null
        public suffix.
        """
        try:
            domain = self._to_domain(host)
            if not self._can_carry_suffix(domain):
                return ResolvedDomain(domain)
            public_suffix = self._find(domain, section, default)
        except HostSyntaxError as e:
            if self._logger:
                self._logger.debug(self.COMPONENT, "Host is not a domain name", {"host": str(host), "error": e.message})
            return ResolvedDomain(None)

        if public_suffix.content is None or len(public_suffix) >= len(domain):
            return ResolvedDomain(domain)

        return ResolvedDomain(domain, public_suffix)

    def get_cookie_domain(self, host: object) -> ResolvedDomain:
        """Resolve against both sections, falling back to the implicit rule."""
        return self._resolve_strictly(host, None, default=True)

    def get_icann_domain(self, host: object) -> ResolvedDomain:
        """
        Resolve against the ICANN section only.

        Raises:
            UnresolvableDomain: If no ICANN rule matches the host
        """
        return self._resolve_strictly(host, Section.ICANN, default=False)

    def get_private_domain(self, host: object) -> ResolvedDomain:
        """
        Resolve against the PRIVATE section only.

        Raises:
            UnresolvableDomain: If no PRIVATE rule matches deeper than ICANN
        """
        return self._resolve_strictly(host, Section.PRIVATE, default=False)

    def _resolve_strictly(self, host: object, section: Optional[Section], default: bool) -> ResolvedDomain:
        domain = self._to_domain(host)
        if not self._can_carry_suffix(domain):
            raise UnresolvableDomain(domain.content, domain=domain)

        public_suffix = self._find(domain, section, default)
        if public_suffix.content is None:
            raise UnresolvableDomain(
                domain.content,
                reason=f'The domain "{domain.content}" does not contain a "{section.name}" TLD.',
                domain=domain,
            )

        return ResolvedDomain(domain, public_suffix)

    def _to_domain(self, host: object) -> Domain:
        if isinstance(host, ResolvedDomain):
            return host.domain
        if type(host) is Domain:
            return host
        return Domain(host, self._idna.ascii_option, self._idna.unicode_option)

    @staticmethod
    def _can_carry_suffix(domain: Domain) -> bool:
        return len(domain) >= 2 and not str(domain).endswith(".")

    def _find(self, domain: Domain, section: Optional[Section], default: bool) -> PublicSuffix:
        ascii_domain = domain.to_ascii()
        count, found = self.find_public_suffix(ascii_domain.labels, section, default)
        if count == 0:
            return PublicSuffix.from_null(domain.ascii_option, domain.unicode_option)

        return PublicSuffix(
            ".".join(ascii_domain.labels[-count:]),
            found,
            domain.ascii_option,
            domain.unicode_option,
        )
