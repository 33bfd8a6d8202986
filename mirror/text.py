"""
Text normalization applied before any source comparison.
"""


def normalize(text: str) -> str:
    """Canonicalize line endings to LF and trim the whole string.

    CRLF pairs become LF first; a carriage return left over after that
    (old Mac endings, or a stray CR before a CRLF) is a line ending too.
    Only the string as a whole is trimmed, never individual lines.
    """
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()
