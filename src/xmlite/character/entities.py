"""Predefined entity decoding and escaping.

Only the five entities predefined by XML 1.0 are understood. Numeric character
references and any other ``&name;`` form are outside the supported subset: they
are either kept literally or rejected, depending on :class:`EntityPolicy`.
"""

import re
from typing import Dict

from xmlite.shared.config import EntityPolicy

PREDEFINED_ENTITIES: Dict[str, str] = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
}

_ENTITY_REFERENCE = re.compile(r"&(amp|lt|gt|quot|apos);")
_UNKNOWN_REFERENCE = re.compile(r"&(?!(?:amp|lt|gt|quot|apos);)")
_REFERENCE_PREVIEW = re.compile(r"&[^\s&<;]{0,32};?")

_TEXT_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_ATTRIBUTE_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;"}


class UnknownEntityError(ValueError):
    """An ``&`` that does not start a predefined entity reference.

    ``index`` is relative to the string that was being decoded; callers
    translate it into a document position.
    """

    def __init__(self, reference: str, index: int) -> None:
        super().__init__(f"Unsupported entity reference {reference!r}")
        self.reference = reference
        self.index = index


def _replace_reference(match: "re.Match[str]") -> str:
    return PREDEFINED_ENTITIES[match.group(1)]


def decode_entities(
    text: str, policy: EntityPolicy = EntityPolicy.PASS_THROUGH
) -> str:
    """Decode the five predefined entity references in ``text``.

    Args:
        text: Raw text or attribute value
        policy: Handling of ``&`` not followed by a predefined reference

    Returns:
        Text with predefined references replaced by their characters

    Raises:
        UnknownEntityError: If ``policy`` is REJECT and an unknown ``&`` is found
    """
    if "&" not in text:
        return text

    if policy is EntityPolicy.REJECT:
        unknown = _UNKNOWN_REFERENCE.search(text)
        if unknown:
            preview = _REFERENCE_PREVIEW.match(text, unknown.start())
            reference = preview.group(0) if preview else "&"
            raise UnknownEntityError(reference, unknown.start())

    return _ENTITY_REFERENCE.sub(_replace_reference, text)


def escape_text(text: str) -> str:
    """Escape character data for serialization."""
    return "".join(_TEXT_ESCAPES.get(char, char) for char in text)


def escape_attribute(value: str) -> str:
    """Escape an attribute value for serialization inside double quotes."""
    return "".join(_ATTRIBUTE_ESCAPES.get(char, char) for char in value)
