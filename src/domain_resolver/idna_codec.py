"""
IDNA label codec.

Converts host strings between their Unicode form and their ASCII
Compatible Encoding (ACE/Punycode) form using UTS-46 processing, and maps
conversion failures onto a fixed table of human readable reasons.
"""

import re
from urllib.parse import unquote

import idna

from domain_resolver.enums import IDNAErrorFlag, IDNAOption
from domain_resolver.exceptions import IdnaConversionError, InvalidCharacters


# Anything outside printable ASCII requires IDNA processing
NON_ASCII_PATTERN = re.compile(r"[^\x20-\x7f]")

ACE_PREFIX = "xn--"

IDNA_ERROR_REASONS: dict[IDNAErrorFlag, str] = {
    IDNAErrorFlag.EMPTY_LABEL: "a non-final domain name label (or the whole domain name) is empty",
    IDNAErrorFlag.LABEL_TOO_LONG: "a domain name label is longer than 63 bytes",
    IDNAErrorFlag.DOMAIN_NAME_TOO_LONG: "a domain name is longer than 255 bytes in its storage form",
    IDNAErrorFlag.LEADING_HYPHEN: 'a label starts with a hyphen-minus ("-")',
    IDNAErrorFlag.TRAILING_HYPHEN: 'a label ends with a hyphen-minus ("-")',
    IDNAErrorFlag.HYPHEN_3_4: 'a label contains hyphen-minus ("-") in the third and fourth positions',
    IDNAErrorFlag.LEADING_COMBINING_MARK: "a label starts with a combining mark",
    IDNAErrorFlag.DISALLOWED: "a label or domain name contains disallowed characters",
    IDNAErrorFlag.PUNYCODE: 'a label starts with "xn--" but does not contain valid Punycode',
    IDNAErrorFlag.LABEL_HAS_DOT: "a label contains a dot=full stop",
    IDNAErrorFlag.INVALID_ACE_LABEL: "An ACE label does not contain a valid label string",
    IDNAErrorFlag.BIDI: "a label does not meet the IDNA BiDi requirements (for right-to-left characters)",
    IDNAErrorFlag.CONTEXTJ: "a label does not meet the IDNA CONTEXTJ requirements",
}

# Fragments of idna error messages, matched against the lowercased message
_MESSAGE_FLAGS: tuple[tuple[str, IDNAErrorFlag], ...] = (
    ("empty", IDNAErrorFlag.EMPTY_LABEL),
    ("label too long", IDNAErrorFlag.LABEL_TOO_LONG),
    ("domain too long", IDNAErrorFlag.DOMAIN_NAME_TOO_LONG),
    ("hyphens in 3rd and 4th", IDNAErrorFlag.HYPHEN_3_4),
    ("a-label must not end with a hyphen", IDNAErrorFlag.TRAILING_HYPHEN),
    ("illegal combining character", IDNAErrorFlag.LEADING_COMBINING_MARK),
    ("normalization form c", IDNAErrorFlag.DISALLOWED),
    ("malformed a-label", IDNAErrorFlag.PUNYCODE),
    ("invalid a-label", IDNAErrorFlag.INVALID_ACE_LABEL),
    ("invalid ascii in a-label", IDNAErrorFlag.INVALID_ACE_LABEL),
)


def describe_idna_errors(flags: IDNAErrorFlag) -> list[str]:
    """
    List the reasons encoded in a set of IDNA error flags.

    Args:
        flags: Combined IDNA error bits

    Returns:
        Reasons in table order, empty if no known bit is set
    """
    return [reason for flag, reason in IDNA_ERROR_REASONS.items() if flag & flags]


def _hyphen_flags(text: str) -> IDNAErrorFlag:
    flags = IDNAErrorFlag.NONE
    for label in text.split("."):
        if label.startswith("-"):
            flags |= IDNAErrorFlag.LEADING_HYPHEN
        if label.endswith("-"):
            flags |= IDNAErrorFlag.TRAILING_HYPHEN

    return flags or IDNAErrorFlag.LEADING_HYPHEN


def classify_idna_error(error: UnicodeError, text: str) -> IDNAErrorFlag:
    """
    Map an idna library exception onto IDNA error flags.

    Args:
        error: Exception raised by idna.encode or idna.decode
        text: The text that was being converted

    Returns:
        The matching flags, IDNAErrorFlag.NONE when the error is not recognised
    """
    if isinstance(error, idna.IDNABidiError):
        return IDNAErrorFlag.BIDI

    message = str(error).lower()
    if isinstance(error, idna.InvalidCodepointContext):
        if "joiner" in message:
            return IDNAErrorFlag.CONTEXTJ
        return IDNAErrorFlag.DISALLOWED

    if isinstance(error, idna.InvalidCodepoint):
        return IDNAErrorFlag.DISALLOWED

    if "start or end with a hyphen" in message:
        return _hyphen_flags(text)

    for fragment, flag in _MESSAGE_FLAGS:
        if fragment in message:
            return flag

    return IDNAErrorFlag.NONE


def _conversion_error(error: UnicodeError, text: str) -> IdnaConversionError:
    flags = classify_idna_error(error, text)
    reasons = describe_idna_errors(flags)
    if not reasons:
        reasons = [f"unknown IDNA conversion error ({error})"]

    return IdnaConversionError(text, reasons, flags)


class LabelCodec:
    """
    Stateless converter between Unicode and ASCII host forms.

    Both conversions are pure functions of their input and the explicit
    option flags. The idna package always enforces the BiDi and CONTEXTJ
    rules and always processes non-transitionally, so those bits are only
    recorded; USE_STD3_RULES is forwarded.
    """

    def to_ascii(self, text: str, option: int = IDNAOption.IDNA2008_ASCII) -> str:
        """
        Convert a host to its IDNA ASCII form.

        Args:
            text: Host text, possibly percent-encoded
            option: IDNAOption bits controlling the conversion

        Returns:
            Lowercase ASCII form of the host

        Raises:
            IdnaConversionError: If UTS-46 processing reports errors
            InvalidCharacters: If the ASCII result still contains a percent sign
        """
        text = unquote(text)
        if not NON_ASCII_PATTERN.search(text):
            return text.lower()

        option = IDNAOption(option)
        try:
            output = idna.encode(
                text,
                uts46=True,
                std3_rules=bool(option & IDNAOption.USE_STD3_RULES),
            ).decode("ascii")
        except UnicodeError as e:
            raise _conversion_error(e, text) from e

        if "%" in output:
            raise InvalidCharacters(text)

        return output

    def to_unicode(self, text: str, option: int = IDNAOption.IDNA2008_UNICODE) -> str:
        """
        Convert a host to its IDNA Unicode form.

        Text without any ACE label is returned unchanged.

        Raises:
            IdnaConversionError: If UTS-46 processing reports errors
        """
        if ACE_PREFIX not in text:
            return text

        option = IDNAOption(option)
        try:
            return idna.decode(
                text,
                uts46=True,
                std3_rules=bool(option & IDNAOption.USE_STD3_RULES),
            )
        except UnicodeError as e:
            raise _conversion_error(e, text) from e


DEFAULT_CODEC = LabelCodec()
