"""Conversion of caller-supplied input into parser text.

Only UTF-8 is supported. Encoding declarations inside the document are read
into the declaration marker but never acted on.
"""

from typing import Union

from xmlite.shared.errors import UnexpectedContentError

BYTE_ORDER_MARK = "\ufeff"

SourceType = Union[str, bytes, bytearray]


def decode_source(data: SourceType) -> str:
    """Return the text to tokenize for ``data``.

    Bytes are decoded as UTF-8; a leading byte-order mark is dropped from both
    bytes and text input.

    Raises:
        TypeError: If ``data`` is neither text nor bytes
        UnexpectedContentError: If bytes are not valid UTF-8
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            return bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise UnexpectedContentError(
                f"Input is not valid UTF-8 ({e.reason}) at byte {e.start}"
            ) from e
    if isinstance(data, str):
        if data.startswith(BYTE_ORDER_MARK):
            return data[1:]
        return data
    raise TypeError(
        f"XML input must be str or bytes, not {type(data).__name__}"
    )
