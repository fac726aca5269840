"""Inline text run rendering."""

from typing import Optional

from doc2markdown.schemas.blocks import TextElementStyle, TextPayload

# Innermost first: bold + italic must compose to ***text***.
_STYLE_MARKERS = (
    ("bold", "**"),
    ("inline_code", "`"),
    ("italic", "*"),
    ("strikethrough", "~~"),
    ("underline", "++"),
)


def render_text_run(content: str, style: Optional[TextElementStyle] = None) -> str:
    """
    Decorate one text run with Markdown style markers.

    Args:
        content: Raw run text
        style: Style flags of the run

    Returns:
        Content wrapped in the markers of every active flag
    """
    if style is None:
        return content
    rendered = content
    for flag, marker in _STYLE_MARKERS:
        if getattr(style, flag):
            rendered = f"{marker}{rendered}{marker}"
    return rendered


def render_elements(payload: Optional[TextPayload]) -> str:
    """Render every text run of an inline payload, in order."""
    if payload is None:
        return ""
    return "".join(
        render_text_run(element.text_run.content, element.text_run.text_element_style)
        for element in payload.elements
        if element.text_run is not None
    )


def plain_text(payload: Optional[TextPayload]) -> str:
    """Concatenated run contents without style markers."""
    if payload is None:
        return ""
    return "".join(
        element.text_run.content
        for element in payload.elements
        if element.text_run is not None
    )
