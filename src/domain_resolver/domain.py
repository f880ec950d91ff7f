"""
Domain value objects.

Domain is an immutable sequence of labels paired with the IDNA options used
to convert it on demand; PublicSuffix is a Domain tagged with the Public
Suffix List section it was found in. Every method that looks like a
mutation returns a new instance.
"""

from typing import Iterator, Optional

from domain_resolver.domain_parser import DEFAULT_PARSER
from domain_resolver.enums import IDNAOption, Section
from domain_resolver.exceptions import InvalidCharacters, InvalidLabelIndex, InvalidPublicSuffix
from domain_resolver.idna_codec import ACE_PREFIX, NON_ASCII_PATTERN


class Domain:
    """
    An immutable domain name.

    Labels are kept in left-to-right textual order and are addressed with
    regular Python indices, so label(-1) is the top-level label. A Domain
    built from None is the null domain: it has no labels and its content is
    None.
    """

    __slots__ = ("_labels", "_ascii_option", "_unicode_option")

    def __init__(
        self,
        host: object = None,
        ascii_option: int = IDNAOption.IDNA2008_ASCII,
        unicode_option: int = IDNAOption.IDNA2008_UNICODE,
    ) -> None:
        self._ascii_option = IDNAOption(ascii_option)
        self._unicode_option = IDNAOption(unicode_option)
        self._labels = DEFAULT_PARSER.parse(host, self._ascii_option, self._unicode_option)

    @property
    def content(self) -> Optional[str]:
        if not self._labels:
            return None
        return ".".join(self._labels)

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def ascii_option(self) -> IDNAOption:
        return self._ascii_option

    @property
    def unicode_option(self) -> IDNAOption:
        return self._unicode_option

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __str__(self) -> str:
        return self.content or ""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.content!r})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._labels == other._labels
            and self._ascii_option == other._ascii_option
            and self._unicode_option == other._unicode_option
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._labels, int(self._ascii_option), int(self._unicode_option)))

    def is_ascii(self) -> bool:
        """Tell whether the domain content holds no IDN characters."""
        content = self.content
        return content is None or not NON_ASCII_PATTERN.search(content)

    def label(self, index: int) -> str:
        """
        Return the label at the given index.

        Raises:
            InvalidLabelIndex: If the domain has no label at that index
        """
        try:
            return self._labels[index]
        except IndexError:
            raise InvalidLabelIndex(index, self.content) from None

    def keys(self, label: Optional[str] = None) -> list[int]:
        """Return the indices of every label, or of the labels equal to label."""
        if label is None:
            return list(range(len(self._labels)))

        label = self._normalize(label)
        return [index for index, value in enumerate(self._labels) if value == label]

    def to_ascii(self) -> "Domain":
        """Return the domain converted to its IDNA ASCII form."""
        content = self.content
        if content is None:
            return self

        ascii_content = DEFAULT_PARSER.codec.to_ascii(content, self._ascii_option)
        if ascii_content == content:
            return self

        return self._rebuild(ascii_content)

    def to_unicode(self) -> "Domain":
        """Return the domain converted to its IDNA Unicode form."""
        content = self.content
        if content is None or ACE_PREFIX not in content:
            return self

        unicode_content = DEFAULT_PARSER.codec.to_unicode(content, self._unicode_option)
        if unicode_content == content:
            return self

        return self._rebuild(unicode_content)

    def with_label(self, index: int, label: object) -> "Domain":
        """
        Replace the label at the given index.

        Raises:
            InvalidLabelIndex: If the domain has no label at that index
        """
        self._check_index(index)
        label = self._normalize(label)
        if self._labels[index] == label:
            return self

        labels = list(self._labels)
        labels[index] = label
        return self._rebuild(".".join(labels))

    def without_label(self, *indices: int) -> "Domain":
        """
        Remove the labels at the given indices.

        Raises:
            InvalidLabelIndex: If any index is out of range
        """
        if not indices:
            return self

        total = len(self._labels)
        removed = set()
        for index in indices:
            self._check_index(index)
            removed.add(index % total)

        labels = [value for position, value in enumerate(self._labels) if position not in removed]
        if not labels:
            return self._rebuild(None)

        return self._rebuild(".".join(labels))

    def prepend(self, label: object) -> "Domain":
        """Add a label (or dotted labels) to the left of the domain."""
        label = self._normalize(label)
        if self.content is None:
            return self._rebuild(label)

        return self._rebuild(f"{label}.{self.content}")

    def append(self, label: object) -> "Domain":
        """Add a label (or dotted labels) to the right of the domain."""
        label = self._normalize(label)
        if self.content is None:
            return self._rebuild(label)

        return self._rebuild(f"{self.content}.{label}")

    def with_ascii_idna_option(self, option: int) -> "Domain":
        if option == self._ascii_option:
            return self

        return self._rebuild(self.content, ascii_option=option)

    def with_unicode_idna_option(self, option: int) -> "Domain":
        if option == self._unicode_option:
            return self

        return self._rebuild(self.content, unicode_option=option)

    def _check_index(self, index: int) -> None:
        total = len(self._labels)
        if not -total <= index < total:
            raise InvalidLabelIndex(index, self.content)

    def _normalize(self, label: object) -> str:
        """Parse label with this domain's options and match its ASCII/Unicode form."""
        domain = Domain(label, self._ascii_option, self._unicode_option)
        if not domain.content:
            raise InvalidCharacters(str(label))

        if self.is_ascii():
            return domain.to_ascii().content

        return domain.to_unicode().content

    def _rebuild(
        self,
        content: Optional[str],
        ascii_option: Optional[int] = None,
        unicode_option: Optional[int] = None,
    ) -> "Domain":
        return Domain(
            content,
            self._ascii_option if ascii_option is None else ascii_option,
            self._unicode_option if unicode_option is None else unicode_option,
        )


class PublicSuffix(Domain):
    """
    A Domain known to be a public suffix.

    The section is Section.ICANN or Section.PRIVATE when the suffix comes
    from the Public Suffix List, and None when it is unknown (for instance
    the implicit default rule) or when the suffix is null.
    """

    __slots__ = ("_section",)

    def __init__(
        self,
        host: object = None,
        section: Optional[Section] = None,
        ascii_option: int = IDNAOption.IDNA2008_ASCII,
        unicode_option: int = IDNAOption.IDNA2008_UNICODE,
    ) -> None:
        super().__init__(host, ascii_option, unicode_option)
        if "" in self._labels:
            raise InvalidPublicSuffix(self.content)

        self._section = section if self._labels else None

    @classmethod
    def from_icann(
        cls,
        host: object,
        ascii_option: int = IDNAOption.IDNA2008_ASCII,
        unicode_option: int = IDNAOption.IDNA2008_UNICODE,
    ) -> "PublicSuffix":
        return cls(host, Section.ICANN, ascii_option, unicode_option)

    @classmethod
    def from_private(
        cls,
        host: object,
        ascii_option: int = IDNAOption.IDNA2008_ASCII,
        unicode_option: int = IDNAOption.IDNA2008_UNICODE,
    ) -> "PublicSuffix":
        return cls(host, Section.PRIVATE, ascii_option, unicode_option)

    @classmethod
    def from_unknown(
        cls,
        host: object,
        ascii_option: int = IDNAOption.IDNA2008_ASCII,
        unicode_option: int = IDNAOption.IDNA2008_UNICODE,
    ) -> "PublicSuffix":
        if isinstance(host, PublicSuffix):
            host = host.content
        return cls(host, None, ascii_option, unicode_option)

    @classmethod
    def from_null(
        cls,
        ascii_option: int = IDNAOption.IDNA2008_ASCII,
        unicode_option: int = IDNAOption.IDNA2008_UNICODE,
    ) -> "PublicSuffix":
        return cls(None, None, ascii_option, unicode_option)

    @property
    def section(self) -> Optional[Section]:
        return self._section

    def is_known(self) -> bool:
        return self._section is not None

    def is_icann(self) -> bool:
        return self._section is Section.ICANN

    def is_private(self) -> bool:
        return self._section is Section.PRIVATE

    def __repr__(self) -> str:
        section = self._section.name if self._section else None
        return f"PublicSuffix({self.content!r}, section={section})"

    def __eq__(self, other: object) -> bool:
        result = super().__eq__(other)
        if result is NotImplemented or not result:
            return result
        return self._section is other._section

    def __hash__(self) -> int:
        return hash((super().__hash__(), self._section))

    def _rebuild(
        self,
        content: Optional[str],
        ascii_option: Optional[int] = None,
        unicode_option: Optional[int] = None,
    ) -> "PublicSuffix":
        return PublicSuffix(
            content,
            self._section,
            self._ascii_option if ascii_option is None else ascii_option,
            self._unicode_option if unicode_option is None else unicode_option,
        )
