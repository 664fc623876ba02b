import logging
from typing import Any, Dict, List, Optional

from markupsafe import escape

logger = logging.getLogger(__name__)

Block = Dict[str, Any]

BLOCK_TAGS = {
    "paragraph": "p",
    "preformatted": "pre",
    "heading1": "h1",
    "heading2": "h2",
    "heading3": "h3",
    "heading4": "h4",
    "heading5": "h5",
    "heading6": "h6",
}

LIST_TAGS = {"list-item": "ul", "o-list-item": "ol"}


def as_text(blocks: Optional[List[Block]], separator: str = " ") -> str:
    """Plain text of a structured text field, one block per separator."""
    if not blocks:
        return ""
    return separator.join(
        block["text"] for block in blocks if isinstance(block.get("text"), str)
    )


def as_html(blocks: Optional[List[Block]]) -> str:
    """
    Serialize a structured text field to HTML.
    Consecutive list items are grouped into a single <ul> or <ol>.
    """
    if not blocks:
        return ""

    out: List[str] = []
    open_list: Optional[str] = None
    for block in blocks:
        block_type = block.get("type")
        list_tag = LIST_TAGS.get(block_type)
        if open_list and open_list != list_tag:
            out.append(f"</{open_list}>")
            open_list = None
        if list_tag and not open_list:
            out.append(f"<{list_tag}>")
            open_list = list_tag
        out.append(_serialize_block(block))
    if open_list:
        out.append(f"</{open_list}>")
    return "".join(out)


def _serialize_block(block: Block) -> str:
    block_type = block.get("type")

    if block_type in BLOCK_TAGS or block_type in LIST_TAGS:
        tag = BLOCK_TAGS.get(block_type, "li")
        inner = serialize_spans(block.get("text") or "", block.get("spans") or [])
        return f"<{tag}>{inner}</{tag}>"

    if block_type == "image":
        src = escape(block.get("url") or "")
        alt = escape(block.get("alt") or "")
        img = f'<img src="{src}" alt="{alt}" />'
        link_url = (block.get("linkTo") or {}).get("url")
        if link_url:
            img = f'<a href="{escape(link_url)}">{img}</a>'
        return f'<p class="block-img">{img}</p>'

    if block_type == "embed":
        oembed = block.get("oembed") or {}
        provider = escape(oembed.get("provider_name") or "")
        return (
            f'<div data-oembed="{escape(oembed.get("embed_url") or "")}" '
            f'data-oembed-type="{escape(oembed.get("type") or "")}" '
            f'data-oembed-provider="{provider}">{oembed.get("html") or ""}</div>'
        )

    logger.debug(f"Skipping unsupported rich text block: {block_type}")
    return ""


def serialize_spans(text: str, spans: List[Dict[str, Any]]) -> str:
    ordered = sorted(
        (s for s in spans if s.get("end", 0) > s.get("start", 0)),
        key=lambda s: (s["start"], -s["end"]),
    )
    return _render_range(text, 0, len(text), ordered)


def _render_range(text: str, start: int, end: int, spans: List[Dict[str, Any]]) -> str:
    out: List[str] = []
    cursor = start
    i = 0
    while i < len(spans):
        span = spans[i]
        span_start = max(span["start"], cursor)
        span_end = min(span["end"], end)
        if span_start >= span_end:
            i += 1
            continue

        # spans opening inside this one are rendered nested in it
        j = i + 1
        while j < len(spans) and spans[j]["start"] < span_end:
            j += 1

        out.append(_escape_text(text[cursor:span_start]))
        inner = _render_range(text, span_start, span_end, spans[i + 1 : j])
        out.append(_wrap_span(span, inner))
        cursor = span_end
        i = j

    out.append(_escape_text(text[cursor:end]))
    return "".join(out)


def _wrap_span(span: Dict[str, Any], inner: str) -> str:
    span_type = span.get("type")
    data = span.get("data") or {}
    if span_type == "strong":
        return f"<strong>{inner}</strong>"
    if span_type == "em":
        return f"<em>{inner}</em>"
    if span_type == "hyperlink":
        href = escape(data.get("url") or "")
        target = data.get("target")
        if target:
            return (
                f'<a href="{href}" target="{escape(target)}" '
                f'rel="noopener noreferrer">{inner}</a>'
            )
        return f'<a href="{href}">{inner}</a>'
    if span_type == "label":
        return f'<span class="{escape(data.get("label") or "")}">{inner}</span>'
    return inner


def _escape_text(value: str) -> str:
    return str(escape(value)).replace("\n", "<br />")
