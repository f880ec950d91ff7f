"""
Property-based tests for the ResolvedDomain value object.

Uses Hypothesis for property-based testing of the decomposition invariants
and of the edits, which always build a new ResolvedDomain.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_resolver.domain import Domain, PublicSuffix
from domain_resolver.enums import Section
from domain_resolver.exceptions import (
    MissingRegistrableDomain,
    SuffixMismatch,
    UnresolvableDomain,
)
from domain_resolver.resolved_domain import ResolvedDomain


@st.composite
def label_strategy(draw) -> str:
    return draw(st.text(alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz"), min_size=1, max_size=10))


@st.composite
def resolved_strategy(draw) -> ResolvedDomain:
    """Generate ResolvedDomains with one to three suffix labels."""
    suffix = draw(st.lists(label_strategy(), min_size=1, max_size=3))
    rest = draw(st.lists(label_strategy(), min_size=1, max_size=4))
    return ResolvedDomain(".".join(rest + suffix), PublicSuffix.from_icann(".".join(suffix)))


class TestDecompositionProperty:
    """Property-based tests for the sub/registrable/suffix split."""

    @given(resolved=resolved_strategy())
    @settings(max_examples=100)
    def test_registrable_domain_is_suffix_plus_one_label(self, resolved: ResolvedDomain) -> None:
        """
        *For any* resolved domain, the registrable domain SHALL be the public
        suffix plus exactly one label, ending the domain.
        """
        registrable = resolved.registrable_domain

        assert len(registrable) == len(resolved.public_suffix) + 1
        assert list(registrable)[1:] == list(resolved.public_suffix)
        assert resolved.labels[-len(registrable):] == registrable.labels
        assert resolved.second_level_domain == registrable.label(0)

    @given(resolved=resolved_strategy())
    @settings(max_examples=100)
    def test_sub_domain_completes_the_domain(self, resolved: ResolvedDomain) -> None:
        """
        *For any* resolved domain, sub_domain + registrable_domain SHALL
        rebuild the domain.
        """
        if resolved.sub_domain.content is None:
            assert resolved.registrable_domain == resolved.domain
        else:
            rebuilt = f"{resolved.sub_domain}.{resolved.registrable_domain}"
            assert rebuilt == resolved.content

    def test_null_suffix_has_no_registrable_domain(self) -> None:
        resolved = ResolvedDomain("www.example.com")

        assert resolved.public_suffix.content is None
        assert resolved.registrable_domain.content is None
        assert resolved.sub_domain.content is None
        assert resolved.second_level_domain is None

    def test_to_dict(self) -> None:
        resolved = ResolvedDomain("www.example.co.uk", PublicSuffix.from_icann("co.uk"))

        assert resolved.to_dict() == {
            "domain": "www.example.co.uk",
            "public_suffix": "co.uk",
            "section": "ICANN_DOMAINS",
            "registrable_domain": "example.co.uk",
            "sub_domain": "www",
            "second_level_domain": "example",
        }


class TestConstructionErrorProperty:
    """Tests for suffixes that can not be attached."""

    def test_suffix_must_end_the_domain(self) -> None:
        with pytest.raises(SuffixMismatch) as exc_info:
            ResolvedDomain("www.example.com", PublicSuffix.from_icann("org"))

        assert "org" in exc_info.value.message
        assert exc_info.value.has_domain()

    def test_partial_label_is_not_a_suffix(self) -> None:
        with pytest.raises(SuffixMismatch):
            ResolvedDomain("www.example.com", "ple.com")

    def test_suffix_equal_to_domain_is_unresolvable(self) -> None:
        with pytest.raises(UnresolvableDomain):
            ResolvedDomain("co.uk", PublicSuffix.from_icann("co.uk"))

    @pytest.mark.parametrize("host", ["com", "example.com."])
    def test_domains_that_can_not_carry_a_suffix(self, host: str) -> None:
        with pytest.raises(UnresolvableDomain):
            ResolvedDomain(host, "com")

    def test_plain_string_suffix_has_no_section(self) -> None:
        resolved = ResolvedDomain("www.example.com", "com")

        assert resolved.public_suffix.section is None
        assert resolved.registrable_domain.content == "example.com"

    def test_suffix_follows_the_domain_form(self) -> None:
        resolved = ResolvedDomain("www.bücher.example", PublicSuffix.from_icann("xn--bcher-kva.example"))

        assert resolved.public_suffix.content == "bücher.example"
        assert resolved.public_suffix.section is Section.ICANN


class TestEditProperty:
    """Property-based tests for the edits of a resolved domain."""

    @given(resolved=resolved_strategy(), sub=st.lists(label_strategy(), min_size=1, max_size=3))
    @settings(max_examples=100)
    def test_with_sub_domain_keeps_the_registrable_domain(self, resolved: ResolvedDomain, sub: list[str]) -> None:
        """
        *For any* resolved domain and sub domain, with_sub_domain SHALL
        keep the registrable domain and public suffix.
        """
        edited = resolved.with_sub_domain(".".join(sub))

        assert edited.sub_domain.content == ".".join(sub)
        assert edited.registrable_domain == resolved.registrable_domain
        assert edited.public_suffix == resolved.public_suffix

    @given(resolved=resolved_strategy())
    @settings(max_examples=100)
    def test_removing_the_sub_domain(self, resolved: ResolvedDomain) -> None:
        """
        *For any* resolved domain, with_sub_domain(None) SHALL leave only
        the registrable domain.
        """
        edited = resolved.with_sub_domain(None)

        assert edited.sub_domain.content is None
        assert edited.domain == resolved.registrable_domain

    @given(resolved=resolved_strategy(), label=label_strategy())
    @settings(max_examples=100)
    def test_with_second_level_domain(self, resolved: ResolvedDomain, label: str) -> None:
        """
        *For any* resolved domain and label, with_second_level_domain SHALL
        change only the label before the public suffix.
        """
        edited = resolved.with_second_level_domain(label)

        assert edited.second_level_domain == label
        assert edited.sub_domain == resolved.sub_domain
        assert edited.public_suffix == resolved.public_suffix

    def test_with_public_suffix_keeps_leading_labels(self) -> None:
        resolved = ResolvedDomain("www.example.com", PublicSuffix.from_icann("com"))

        edited = resolved.with_public_suffix(PublicSuffix.from_icann("co.uk"))

        assert edited.content == "www.example.co.uk"
        assert edited.registrable_domain.content == "example.co.uk"
        assert edited.public_suffix.is_icann()

    def test_with_public_suffix_none_drops_the_suffix(self) -> None:
        resolved = ResolvedDomain("www.example.com", PublicSuffix.from_icann("com"))

        edited = resolved.with_public_suffix(None)

        assert edited.content == "www.example"
        assert edited.public_suffix.content is None

    def test_unchanged_edits_return_the_same_instance(self) -> None:
        resolved = ResolvedDomain("www.example.com", PublicSuffix.from_icann("com"))

        assert resolved.with_public_suffix(PublicSuffix.from_icann("com")) is resolved
        assert resolved.with_sub_domain("WWW") is resolved
        assert resolved.with_second_level_domain("example") is resolved

    def test_edits_need_a_registrable_domain(self) -> None:
        resolved = ResolvedDomain("www.example.com")

        with pytest.raises(MissingRegistrableDomain):
            resolved.with_sub_domain("shop")
        with pytest.raises(MissingRegistrableDomain):
            resolved.with_second_level_domain("shop")

    def test_idn_sub_domain_follows_the_domain_form(self) -> None:
        resolved = ResolvedDomain("www.example.com", PublicSuffix.from_icann("com"))

        assert resolved.with_sub_domain("bücher").content == "xn--bcher-kva.example.com"

    def test_conversions_keep_the_split(self) -> None:
        resolved = ResolvedDomain("www.bücher.example", PublicSuffix.from_private("example"))

        ascii_resolved = resolved.to_ascii()

        assert ascii_resolved.content == "www.xn--bcher-kva.example"
        assert ascii_resolved.registrable_domain.content == "xn--bcher-kva.example"
        assert ascii_resolved.public_suffix.is_private()
        assert ascii_resolved.to_unicode() == resolved

    def test_domain_argument_forms(self) -> None:
        resolved = ResolvedDomain(Domain("www.example.com"), "com")

        assert ResolvedDomain(resolved, "com") == resolved
        assert ResolvedDomain(PublicSuffix.from_icann("www.example.com"), "com").domain == Domain("www.example.com")
