"""Tree building engine for xmlite.

This module builds an owned element tree from a token stream with an explicit
stack of open elements, rejecting any input that is not well-formed.

Key Components:
    XMLTreeBuilder: Tree construction from token streams
    XMLDocument: Root document container with optional declaration
    XMLElement: Element with attributes, text and child elements
    AttributeRef: Write-through handle returned by XMLElement.attr_mut
    XMLDeclaration: The leading ``<?xml ... ?>`` marker
"""

from .builder import XMLTreeBuilder
from .element import AttributeRef, XMLDeclaration, XMLDocument, XMLElement

__all__ = [
    "AttributeRef",
    "XMLDeclaration",
    "XMLDocument",
    "XMLElement",
    "XMLTreeBuilder",
]
