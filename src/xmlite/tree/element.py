"""Document tree model for xmlite.

An :class:`XMLElement` exclusively owns its attribute mapping and its list of
child elements, so a parsed document is a plain ownership hierarchy with no
parent back-references. Traversal helpers use explicit stacks so arbitrarily
deep documents never hit the interpreter's recursion limit.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from xmlite.character import escape_attribute, escape_text

_PSEUDO_ATTRIBUTE = re.compile(r"""([^\s=]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")


class AttributeRef:
    """Write-through handle to one attribute of an element.

    Obtained from :meth:`XMLElement.attr_mut`. Assigning ``value`` updates the
    owning element immediately.
    """

    __slots__ = ("_attributes", "name")

    def __init__(self, attributes: Dict[str, str], name: str) -> None:
        self._attributes = attributes
        self.name = name

    @property
    def value(self) -> str:
        """Current value of the attribute."""
        return self._attributes[self.name]

    @value.setter
    def value(self, new_value: str) -> None:
        if not isinstance(new_value, str):
            raise TypeError("Attribute value must be a string")
        self._attributes[self.name] = new_value

    def get(self) -> str:
        """Return the current value; same as reading ``value``."""
        return self.value

    def set(self, new_value: str) -> None:
        """Overwrite the value in the owning element; same as assigning ``value``."""
        self.value = new_value

    def __repr__(self) -> str:
        return f"AttributeRef({self.name!r}, {self._attributes.get(self.name)!r})"


@dataclass(eq=False, repr=False)
class XMLElement:
    """A named node with attributes, child elements and text content.

    ``text`` is the concatenation of every text run found directly inside the
    element, in document order, with whitespace preserved. ``name`` is None
    only for the container returned by ``parse_fragment``.

    Elements compare equal when name, attributes, text and children match,
    compared subtree by subtree without recursion.
    """

    name: Optional[str]
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    children: List["XMLElement"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values."""
        if self.name is not None and not self.name:
            raise ValueError("Element name cannot be empty")
        for key in self.attributes:
            if not key:
                raise ValueError("Attribute name cannot be empty")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XMLElement):
            return NotImplemented
        pending: List[Tuple[XMLElement, XMLElement]] = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if (
                left.name != right.name
                or left.text != right.text
                or left.attributes != right.attributes
                or len(left.children) != len(right.children)
            ):
                return False
            pending.extend(zip(left.children, right.children))
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"XMLElement(name={self.name!r}, attributes={self.attributes!r}, "
            f"text={self.text!r}, children=<{len(self.children)} elements>)"
        )

    # Attribute access

    def attr(self, name: str) -> Optional[str]:
        """Get the value of an attribute, or None if it is absent.

        Examples:
            >>> XMLElement("a", {"key": "value"}).attr("key")
            'value'
        """
        return self.attributes.get(name)

    def attr_mut(self, name: str) -> Optional[AttributeRef]:
        """Get a write-through handle to an existing attribute.

        Absent attributes are never created implicitly; use :meth:`set_attr`.
        """
        if name not in self.attributes:
            return None
        return AttributeRef(self.attributes, name)

    def set_attr(self, name: str, value: str) -> None:
        """Set an attribute, creating it if needed."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        if not name:
            raise ValueError("Attribute name cannot be empty")
        self.attributes[name] = value

    def with_attr(self, name: str, value: str) -> "XMLElement":
        """Set an attribute and return the element for chaining.

        Examples:
            >>> element = XMLElement("div").with_attr("id", "main")
            >>> element.attr("id")
            'main'
        """
        self.set_attr(name, value)
        return self

    # Children

    def add_child(self, child: "XMLElement") -> None:
        """Append a child element."""
        if not isinstance(child, XMLElement):
            raise TypeError("Child must be an XMLElement instance")
        if child.name is None:
            raise ValueError("Fragment containers cannot be nested")
        self.children.append(child)

    def with_child(self, child: "XMLElement") -> "XMLElement":
        """Append a child element and return the element for chaining."""
        self.add_child(child)
        return self

    def iter_children(self) -> Iterator["XMLElement"]:
        """Iterate over direct children in document order.

        The iterator works on a snapshot, so every call yields the same
        sequence regardless of later changes.
        """
        return iter(tuple(self.children))

    def iter_children_mut(self) -> Iterator["XMLElement"]:
        """Iterate over direct children for in-place modification.

        Yielded elements are the live children. Adding or removing children
        while iterating raises RuntimeError.
        """
        children = self.children
        expected_size = len(children)
        for index in range(expected_size):
            if len(children) != expected_size:
                raise RuntimeError("children changed size during iteration")
            yield children[index]
        if len(children) != expected_size:
            raise RuntimeError("children changed size during iteration")

    def find_child(self, name: str) -> Optional["XMLElement"]:
        """Find first direct child with matching name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List["XMLElement"]:
        """Find all direct children with matching name."""
        return [child for child in self.children if child.name == name]

    def find(self, name: str) -> Optional["XMLElement"]:
        """Find first descendant with matching name, depth-first."""
        return next(
            (element for element in self.descendants() if element.name == name),
            None
        )

    def find_all(self, name: str) -> List["XMLElement"]:
        """Find all descendants with matching name, in document order."""
        return [element for element in self.descendants() if element.name == name]

    # Traversal

    def iter(self) -> Iterator["XMLElement"]:
        """Iterate over this element and all descendants, depth-first.

        Examples:
            >>> from xmlite import parse_document
            >>> root = parse_document("<a> <b> <d></d> </b> <c></c> </a>").root
            >>> [element.name for element in root.iter()]
            ['a', 'b', 'd', 'c']
        """
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def descendants(self) -> Iterator["XMLElement"]:
        """Iterate over all descendants (excluding self), depth-first."""
        elements = self.iter()
        next(elements)
        return elements

    # Serialization

    def _shallow_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": dict(self.attributes),
        }
        if self.text:
            result["text"] = self.text
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result = self._shallow_dict()
        stack: List[Tuple[XMLElement, Dict[str, Any]]] = [(self, result)]
        while stack:
            element, entry = stack.pop()
            if not element.children:
                continue
            entry["children"] = []
            for child in element.children:
                child_entry = child._shallow_dict()
                entry["children"].append(child_entry)
                stack.append((child, child_entry))
        return result

    def to_xml(self) -> str:
        """Serialize the element and its subtree.

        Text is written before child elements, since interleaving is not kept.
        """
        parts: List[str] = []
        # (element, closing) pairs; closing entries emit the end tag
        stack: List[Tuple[XMLElement, bool]] = [(self, False)]
        while stack:
            element, closing = stack.pop()
            if element.name is None:
                parts.append(escape_text(element.text))
                stack.extend((child, False) for child in reversed(element.children))
                continue
            if closing:
                parts.append(f"</{element.name}>")
                continue

            attributes = "".join(
                f' {key}="{escape_attribute(value)}"'
                for key, value in element.attributes.items()
            )
            if not element.text and not element.children:
                parts.append(f"<{element.name}{attributes}/>")
                continue

            parts.append(f"<{element.name}{attributes}>")
            parts.append(escape_text(element.text))
            stack.append((element, True))
            stack.extend((child, False) for child in reversed(element.children))
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_xml()


@dataclass(frozen=True)
class XMLDeclaration:
    """The ``<?xml ... ?>`` marker, kept as read but never interpreted.

    ``raw`` is the instruction body following the ``xml`` target.
    """

    raw: str
    version: Optional[str] = None
    encoding: Optional[str] = None
    standalone: Optional[str] = None

    @classmethod
    def from_instruction(cls, content: str) -> "XMLDeclaration":
        """Read pseudo-attributes from the body of an ``xml`` instruction."""
        values: Dict[str, str] = {}
        for match in _PSEUDO_ATTRIBUTE.finditer(content):
            value = match.group(2) if match.group(2) is not None else match.group(3)
            values.setdefault(match.group(1), value)
        return cls(
            raw=content,
            version=values.get("version"),
            encoding=values.get("encoding"),
            standalone=values.get("standalone"),
        )

    def to_xml(self) -> str:
        if not self.raw:
            return "<?xml?>"
        return f"<?xml {self.raw}?>"


@dataclass
class XMLDocument:
    """Root XML document container.

    Holds exactly one root element and, when the input started with one, the
    XML declaration.
    """

    root: XMLElement
    declaration: Optional[XMLDeclaration] = None

    def __post_init__(self) -> None:
        """Validate document structure."""
        if not isinstance(self.root, XMLElement):
            raise TypeError("Document root must be an XMLElement instance")
        if self.root.name is None:
            raise ValueError("Document root must be a named element")

    def iter_elements(self) -> Iterator[XMLElement]:
        """Iterate over all elements in document order."""
        return self.root.iter()

    def find(self, name: str) -> Optional[XMLElement]:
        """Find first element with matching name, including the root."""
        return next(
            (element for element in self.root.iter() if element.name == name),
            None
        )

    def find_all(self, name: str) -> List[XMLElement]:
        """Find all elements with matching name, including the root."""
        return [element for element in self.root.iter() if element.name == name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation."""
        result: Dict[str, Any] = {"root": self.root.to_dict()}
        if self.declaration is not None:
            result["declaration"] = {
                "version": self.declaration.version,
                "encoding": self.declaration.encoding,
                "standalone": self.declaration.standalone,
            }
        return result

    def to_xml(self) -> str:
        """Serialize the document, declaration first when present."""
        body = self.root.to_xml()
        if self.declaration is None:
            return body
        return self.declaration.to_xml() + body

    def __str__(self) -> str:
        return self.to_xml()
