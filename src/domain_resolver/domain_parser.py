"""
Host string parsing.

Validates a raw host string and splits it into an ordered sequence of
canonical domain labels. IPv4 literals and URI delimiters are rejected
before any IDNA conversion takes place.
"""

import ipaddress
import re
from typing import Optional
from urllib.parse import unquote

from domain_resolver.enums import IDNAOption
from domain_resolver.exceptions import DomainTooLong, InvalidCharacters, UnsupportedHostType
from domain_resolver.idna_codec import DEFAULT_CODEC, NON_ASCII_PATTERN, LabelCodec


# Registered name grammar. The dot is purposely missing from the unreserved
# set as it separates labels.
DOMAIN_NAME_PATTERN = re.compile(
    r"""
    (?:(?:[a-z0-9_~\-]|[!$&'()*+,;=]|%[a-f0-9]{2}){1,63}\.){0,126}
    (?:[a-z0-9_~\-]|[!$&'()*+,;=]|%[a-f0-9]{2}){1,63}\.?
    """,
    re.IGNORECASE | re.VERBOSE,
)

# A domain name can not contain URI delimiters or spaces
GEN_DELIMITERS_PATTERN = re.compile(r"[:/?#\[\]@ ]")

MAX_DOMAIN_LENGTH = 255

_MISSING = object()


def _is_ipv4(host: str) -> bool:
    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        return False

    return True


class DomainLabelParser:
    """
    Splits host strings into validated domain labels.

    Labels are returned in left-to-right textual order, so that
    'www.example.com' parses to ('www', 'example', 'com').
    """

    def __init__(self, codec: Optional[LabelCodec] = None) -> None:
        self._codec = codec or DEFAULT_CODEC

    @property
    def codec(self) -> LabelCodec:
        return self._codec

    def parse(
        self,
        host: object = None,
        ascii_option: int = IDNAOption.IDNA2008_ASCII,
        unicode_option: int = IDNAOption.IDNA2008_UNICODE,
    ) -> tuple[str, ...]:
        """
        Parse a host into its labels.

        Args:
            host: None, a string, or an already parsed Domain
            ascii_option: IDNA options used for the ASCII conversion
            unicode_option: IDNA options used for the Unicode conversion

        Returns:
            Tuple of labels; empty for None, a single empty label for ''

        Raises:
            TypeError: If host is neither None, a string nor a Domain
            UnsupportedHostType: If host is an IPv4 literal
            InvalidCharacters: If host contains characters no domain can hold
            IdnaConversionError: If IDNA conversion fails
            DomainTooLong: If the host exceeds 255 octets in ASCII form
        """
        text = self._coerce(host)
        if text is None:
            return ()

        if text == "":
            return ("",)

        if _is_ipv4(text):
            raise UnsupportedHostType(text)

        decoded = unquote(text)
        if DOMAIN_NAME_PATTERN.fullmatch(decoded) and not NON_ASCII_PATTERN.search(decoded):
            self._check_length(text, decoded)
            return tuple(decoded.lower().split("."))

        if GEN_DELIMITERS_PATTERN.search(decoded):
            raise InvalidCharacters(text)

        if NON_ASCII_PATTERN.search(decoded):
            ascii_domain = self._codec.to_ascii(text, ascii_option)
            self._check_length(text, ascii_domain)
            return tuple(self._codec.to_unicode(ascii_domain, unicode_option).split("."))

        raise InvalidCharacters(text)

    @staticmethod
    def _coerce(host: object) -> Optional[str]:
        if host is None or isinstance(host, str):
            return host

        # An already parsed Domain, PublicSuffix or ResolvedDomain
        content = getattr(host, "content", _MISSING)
        if content is None or isinstance(content, str):
            return content

        raise TypeError(
            "The domain must be a string, a Domain object or None; "
            f"`{type(host).__name__}` given"
        )

    @staticmethod
    def _check_length(host: str, storage_form: str) -> None:
        length = len(storage_form.encode("utf-8"))
        if length > MAX_DOMAIN_LENGTH:
            raise DomainTooLong(host, length)


DEFAULT_PARSER = DomainLabelParser()
