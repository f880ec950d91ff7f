"""
Public Suffix List rule tree.

Rules are stored in an arena: a flat list of RuleNode records addressed by
index, one root node per section. Each rule is inserted with its rightmost
label first, so that depth from the root matches proximity to the TLD.
"""

import json
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from domain_resolver.config import SourceConfig
from domain_resolver.enums import Section
from domain_resolver.exceptions import HostSyntaxError, SourceFormatError
from domain_resolver.idna_codec import DEFAULT_CODEC, LabelCodec


EXCEPTION_KEY = "!"
WILDCARD_LABEL = "*"


@dataclass(frozen=True)
class RuleNode:
    """A single label of one or more PSL rules, with read-only children."""

    label: str
    children: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    is_exception: bool = False


@dataclass
class _DraftNode:
    """Mutable node used while a tree is being built."""

    label: str
    children: dict[str, int] = field(default_factory=dict)
    is_exception: bool = False

    def freeze(self) -> RuleNode:
        return RuleNode(self.label, MappingProxyType(dict(self.children)), self.is_exception)


class RuleTree:
    """
    Read-only PSL rule tree.

    Built once by RuleTreeBuilder and safe to share between threads: the
    arena is a tuple of frozen nodes whose children can not be modified.
    """

    def __init__(self, nodes: Sequence[RuleNode], roots: Mapping[Section, int]) -> None:
        self._nodes = tuple(
            node if isinstance(node, RuleNode) else node.freeze() for node in nodes
        )
        self._roots = dict(roots)

    def root(self, section: Section) -> int:
        return self._roots[section]

    def node(self, index: int) -> RuleNode:
        return self._nodes[index]

    def child(self, index: int, label: str) -> Optional[int]:
        """Return the index of the child of node `index` keyed by label, if any."""
        return self._nodes[index].children.get(label)

    def node_count(self) -> int:
        """Number of rule nodes, roots excluded."""
        return len(self._nodes) - len(self._roots)

    def is_empty(self, section: Optional[Section] = None) -> bool:
        sections = [section] if section else list(Section)
        return all(not self._nodes[self._roots[s]].children for s in sections)

    def to_dict(self) -> dict:
        """
        Convert the tree to its cached mapping form.

        Each section maps child label to a nested mapping; an exception
        terminus carries the key '!' with an empty string value.
        """
        return {section.value: self._subtree(self._roots[section]) for section in Section}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuleTree":
        return RuleTreeBuilder().from_mapping(data)

    @classmethod
    def from_json(cls, text: str) -> "RuleTree":
        """
        Rebuild a tree from its JSON form.

        Raises:
            SourceFormatError: If the text is not JSON or lacks a section
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SourceFormatError(
                f"The rules JSON can not be decoded: {e}",
                details={"error": str(e)},
            ) from e

        return cls.from_dict(data)

    def _subtree(self, index: int) -> dict:
        node = self._nodes[index]
        result: dict[str, Any] = {
            label: self._subtree(child) for label, child in node.children.items()
        }
        if node.is_exception:
            result[EXCEPTION_KEY] = ""

        return result


class RuleTreeBuilder:
    """Builds RuleTree instances from PSL text or from their mapping form."""

    def __init__(
        self,
        codec: Optional[LabelCodec] = None,
        config: Optional[SourceConfig] = None,
    ) -> None:
        self._codec = codec or DEFAULT_CODEC
        self._section_pattern = re.compile((config or SourceConfig()).section_pattern)

    def build(self, content: str) -> RuleTree:
        """
        Build a rule tree from the Public Suffix List text format.

        Args:
            content: Raw PSL text

        Returns:
            RuleTree with ICANN and PRIVATE sections

        Raises:
            SourceFormatError: If a rule label can not be canonicalized
        """
        nodes, roots = self._new_arena()
        section: Optional[Section] = None
        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue

            section = self._get_section(section, line)
            if section is None or "//" in line:
                continue

            # Rules are only read up to the first whitespace
            rule = line.split()[0]
            try:
                self._add_rule(nodes, roots[section], rule.split("."))
            except HostSyntaxError as e:
                raise SourceFormatError(
                    f"Invalid rule `{rule}` on line {line_number}: {e.message}",
                    details={"line": line_number, "rule": rule},
                ) from e

        return RuleTree(nodes, roots)

    def from_mapping(self, data: Mapping[str, Any]) -> RuleTree:
        """
        Build a rule tree from its cached mapping form.

        Raises:
            SourceFormatError: If a section is missing or a subtree is not a mapping
        """
        if not isinstance(data, Mapping):
            raise SourceFormatError(
                "The rules mapping must be an object",
                details={"type": type(data).__name__},
            )

        nodes, roots = self._new_arena()
        for section in Section:
            rules = data.get(section.value)
            if not isinstance(rules, Mapping):
                raise SourceFormatError(
                    f"The rules mapping is missing the `{section.value}` section",
                    details={"section": section.value},
                )
            self._load_subtree(nodes, roots[section], rules)

        return RuleTree(nodes, roots)

    @staticmethod
    def _new_arena() -> tuple[list[_DraftNode], dict[Section, int]]:
        nodes: list[_DraftNode] = []
        roots: dict[Section, int] = {}
        for section in Section:
            roots[section] = len(nodes)
            nodes.append(_DraftNode(label=""))

        return nodes, roots

    def _get_section(self, section: Optional[Section], line: str) -> Optional[Section]:
        match = self._section_pattern.match(line)
        if not match:
            return section

        if match.group("point") == "BEGIN":
            return Section[match.group("type")]

        return None

    def _add_rule(self, nodes: list[_DraftNode], index: int, rule_parts: list[str]) -> None:
        # Canonicalize as for hostnames: lowercase, Punycode
        rule = self._codec.to_ascii(rule_parts.pop())
        is_exception = rule.startswith(EXCEPTION_KEY)
        if is_exception:
            rule = rule[1:]

        child = nodes[index].children.get(rule)
        if child is None:
            child = len(nodes)
            nodes.append(_DraftNode(label=rule, is_exception=is_exception))
            nodes[index].children[rule] = child
        elif is_exception:
            nodes[child].is_exception = True

        if not is_exception and rule_parts:
            self._add_rule(nodes, child, rule_parts)

    def _load_subtree(self, nodes: list[_DraftNode], index: int, mapping: Mapping[str, Any]) -> None:
        for label, subtree in mapping.items():
            if label == EXCEPTION_KEY:
                nodes[index].is_exception = True
                continue

            if not isinstance(subtree, Mapping):
                raise SourceFormatError(
                    f"The rule `{label}` must map to an object",
                    details={"label": label},
                )

            child = len(nodes)
            nodes.append(_DraftNode(label=label))
            nodes[index].children[label] = child
            self._load_subtree(nodes, child, subtree)
