"""
Sanitizers for caller-supplied button attributes.

- Button label: only line breaks survive as markup.
- Colors: strict #rgb / #rrggbb hex values, anything else is dropped.
- Attribute values: quote-escaped for double-quoted attributes.
"""

import html
import re

_HEX_COLOR_RE = re.compile(r"^#(?:[A-Fa-f0-9]{3}){1,2}$")

_COMMENT_RE = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)
_DROP_CONTENT_RE = re.compile(
    r"<(script|style)\b[^>]*>.*?(?:</\1\s*>|$)", re.IGNORECASE | re.DOTALL
)
_TAG_RE = re.compile(r"</?([a-zA-Z][a-zA-Z0-9-]*)\b[^>]*>")

ALLOWED_LABEL_TAGS = frozenset(["br"])


def sanitize_hex_color(value: object) -> str | None:
    """Return the color if it is a 3 or 6 digit hex color, else None."""
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if _HEX_COLOR_RE.match(value):
        return value
    return None


def _escape_text(text: str) -> str:
    # Unescape first so existing entities are not double-encoded.
    return html.escape(html.unescape(text), quote=False)


def sanitize_button_label(text: str) -> str:
    """
    Strip all markup from a label except line breaks.

    Disallowed tags are removed but their text is kept, except for
    script/style elements whose content is dropped entirely. Line breaks
    are normalized to ``<br />`` without attributes. All remaining text is
    HTML-escaped, so the result is safe in an element body.
    """
    text = _COMMENT_RE.sub("", text)
    text = _DROP_CONTENT_RE.sub("", text)

    parts: list[str] = []
    pos = 0
    for match in _TAG_RE.finditer(text):
        parts.append(_escape_text(text[pos : match.start()]))
        tag = match.group(1).lower()
        if tag in ALLOWED_LABEL_TAGS:
            parts.append(f"<{tag} />")
        pos = match.end()
    parts.append(_escape_text(text[pos:]))

    return "".join(parts)


def escape_attr(value: object) -> str:
    """Escape a value for use inside a double-quoted HTML attribute."""
    return html.escape(str(value), quote=True)
