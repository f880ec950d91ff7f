"""
Resolved domain value object.

A ResolvedDomain owns one Domain and one PublicSuffix. The registrable
domain and the sub domain are derived from those two on construction;
every edit builds a new ResolvedDomain from its components.
"""

from typing import Optional

from domain_resolver.domain import Domain, PublicSuffix
from domain_resolver.exceptions import MissingRegistrableDomain, SuffixMismatch, UnresolvableDomain
from domain_resolver.idna_codec import NON_ASCII_PATTERN


class ResolvedDomain:
    """
    A domain split into sub domain, registrable domain and public suffix.

    Whenever both are present, sub_domain + '.' + registrable_domain equals
    the domain, and the registrable domain is the public suffix plus exactly
    one label.
    """

    __slots__ = ("_domain", "_public_suffix", "_registrable_domain", "_sub_domain")

    def __init__(self, domain: object, public_suffix: object = None) -> None:
        self._domain = self._set_domain(domain)
        self._public_suffix = self._set_public_suffix(public_suffix)
        self._registrable_domain = self._set_registrable_domain()
        self._sub_domain = self._set_sub_domain()

    @staticmethod
    def _set_domain(domain: object) -> Domain:
        if isinstance(domain, ResolvedDomain):
            return domain.domain

        if type(domain) is Domain:
            return domain

        if isinstance(domain, Domain):
            return Domain(domain.content, domain.ascii_option, domain.unicode_option)

        return Domain(domain)

    def _set_public_suffix(self, public_suffix: object) -> PublicSuffix:
        """
        Attach the public suffix to the domain.

        Raises:
            UnresolvableDomain: If the domain can not carry a public suffix
            SuffixMismatch: If the suffix does not end the domain
        """
        ascii_option = self._domain.ascii_option
        unicode_option = self._domain.unicode_option

        if public_suffix is None:
            return PublicSuffix.from_null(ascii_option, unicode_option)

        if not isinstance(public_suffix, PublicSuffix):
            public_suffix = PublicSuffix.from_unknown(public_suffix, ascii_option, unicode_option)

        if public_suffix.content is None:
            return PublicSuffix.from_null(ascii_option, unicode_option)

        content = str(self._domain)
        if len(self._domain) < 2 or content.endswith("."):
            raise UnresolvableDomain(self._domain.content, domain=self._domain)

        public_suffix = self._normalize(public_suffix)
        if public_suffix.content == self._domain.content:
            raise UnresolvableDomain(
                self._domain.content,
                reason=f"The public suffix and the domain name are identical `{content}`.",
                domain=self._domain,
            )

        suffix = str(public_suffix)
        if not content.endswith("." + suffix):
            raise SuffixMismatch(suffix, content, domain=self._domain)

        return public_suffix

    def _normalize(self, subject: PublicSuffix) -> PublicSuffix:
        """Bring subject to the domain's IDNA options and ASCII/Unicode form."""
        subject = (
            subject
            .with_ascii_idna_option(self._domain.ascii_option)
            .with_unicode_idna_option(self._domain.unicode_option)
        )
        if self._is_ascii():
            return subject.to_ascii()

        return subject.to_unicode()

    def _is_ascii(self) -> bool:
        return not NON_ASCII_PATTERN.search(str(self._domain))

    def _set_registrable_domain(self) -> Domain:
        if self._public_suffix.content is None:
            return Domain(None, self._domain.ascii_option, self._domain.unicode_option)

        size = len(self._public_suffix) + 1
        return Domain(
            ".".join(self._domain.labels[-size:]),
            self._domain.ascii_option,
            self._domain.unicode_option,
        )

    def _set_sub_domain(self) -> Domain:
        ascii_option = self._domain.ascii_option
        unicode_option = self._domain.unicode_option
        if self._registrable_domain.content is None:
            return Domain(None, ascii_option, unicode_option)

        remaining = len(self._domain) - len(self._registrable_domain)
        if remaining == 0:
            return Domain(None, ascii_option, unicode_option)

        return Domain(".".join(self._domain.labels[:remaining]), ascii_option, unicode_option)

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def public_suffix(self) -> PublicSuffix:
        return self._public_suffix

    @property
    def registrable_domain(self) -> Domain:
        return self._registrable_domain

    @property
    def sub_domain(self) -> Domain:
        return self._sub_domain

    @property
    def second_level_domain(self) -> Optional[str]:
        if self._registrable_domain.content is None:
            return None
        return self._registrable_domain.label(0)

    @property
    def content(self) -> Optional[str]:
        return self._domain.content

    @property
    def labels(self) -> tuple[str, ...]:
        return self._domain.labels

    def __len__(self) -> int:
        return len(self._domain)

    def __str__(self) -> str:
        return str(self._domain)

    def __repr__(self) -> str:
        return (
            f"ResolvedDomain({self._domain.content!r}, "
            f"public_suffix={self._public_suffix.content!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolvedDomain):
            return NotImplemented
        return self._domain == other._domain and self._public_suffix == other._public_suffix

    def __hash__(self) -> int:
        return hash((self._domain, self._public_suffix))

    def to_dict(self) -> dict:
        """Convert the resolution to a dictionary for serialization."""
        section = self._public_suffix.section
        return {
            "domain": self._domain.content,
            "public_suffix": self._public_suffix.content,
            "section": section.value if section else None,
            "registrable_domain": self._registrable_domain.content,
            "sub_domain": self._sub_domain.content,
            "second_level_domain": self.second_level_domain,
        }

    def to_ascii(self) -> "ResolvedDomain":
        return ResolvedDomain(self._domain.to_ascii(), self._public_suffix.to_ascii())

    def to_unicode(self) -> "ResolvedDomain":
        return ResolvedDomain(self._domain.to_unicode(), self._public_suffix.to_unicode())

    def with_public_suffix(self, public_suffix: object) -> "ResolvedDomain":
        """
        Replace the public suffix, keeping every label left of it.

        Args:
            public_suffix: PublicSuffix, host string, Domain, or None to drop it
        """
        if public_suffix is None:
            public_suffix = PublicSuffix.from_null(self._domain.ascii_option, self._domain.unicode_option)
        elif not isinstance(public_suffix, PublicSuffix):
            public_suffix = PublicSuffix.from_unknown(public_suffix)

        public_suffix = self._normalize(public_suffix)
        if public_suffix == self._public_suffix:
            return self

        kept = self._domain.labels[: len(self._domain) - len(self._public_suffix)]
        host = ".".join(kept)
        if public_suffix.content is None:
            return ResolvedDomain(
                Domain(host, self._domain.ascii_option, self._domain.unicode_option),
                None,
            )

        return ResolvedDomain(
            Domain(
                f"{host}.{public_suffix.content}",
                self._domain.ascii_option,
                self._domain.unicode_option,
            ),
            public_suffix,
        )

    def with_sub_domain(self, sub_domain: object) -> "ResolvedDomain":
        """
        Replace the sub domain; None removes it.

        Raises:
            MissingRegistrableDomain: If the domain has no registrable domain
        """
        if self._registrable_domain.content is None:
            raise MissingRegistrableDomain(self._domain.content, domain=self._domain)

        ascii_option = self._domain.ascii_option
        unicode_option = self._domain.unicode_option
        if not isinstance(sub_domain, Domain):
            sub_domain = Domain(sub_domain, ascii_option, unicode_option)
        else:
            sub_domain = Domain(sub_domain.content, ascii_option, unicode_option)

        if sub_domain.content is None:
            if self._sub_domain.content is None:
                return self
            return ResolvedDomain(self._registrable_domain, self._public_suffix)

        sub_domain = sub_domain.to_ascii()
        if not self._is_ascii():
            sub_domain = sub_domain.to_unicode()

        if sub_domain == self._sub_domain:
            return self

        return ResolvedDomain(
            Domain(f"{sub_domain}.{self._registrable_domain}", ascii_option, unicode_option),
            self._public_suffix,
        )

    def with_second_level_domain(self, label: object) -> "ResolvedDomain":
        """
        Replace the label right before the public suffix.

        Raises:
            MissingRegistrableDomain: If the domain has no registrable domain
        """
        if self._registrable_domain.content is None:
            raise MissingRegistrableDomain(self._domain.content, domain=self._domain)

        registrable_domain = self._registrable_domain.with_label(0, label)
        if registrable_domain == self._registrable_domain:
            return self

        if self._sub_domain.content is None:
            return ResolvedDomain(registrable_domain, self._public_suffix)

        return ResolvedDomain(
            Domain(
                f"{self._sub_domain.content}.{registrable_domain.content}",
                self._domain.ascii_option,
                self._domain.unicode_option,
            ),
            self._public_suffix,
        )

    def with_ascii_idna_option(self, option: int) -> "ResolvedDomain":
        if option == self._domain.ascii_option:
            return self

        return ResolvedDomain(
            self._domain.with_ascii_idna_option(option),
            self._public_suffix.with_ascii_idna_option(option),
        )

    def with_unicode_idna_option(self, option: int) -> "ResolvedDomain":
        if option == self._domain.unicode_option:
            return self

        return ResolvedDomain(
            self._domain.with_unicode_idna_option(option),
            self._public_suffix.with_unicode_idna_option(option),
        )
