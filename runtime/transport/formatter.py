"""
Outbound rendering for the messaging transport.

The dialogue core emits plain text and generic option lists. This module
checks them against the transport's limits and produces the wire-neutral
dicts the HTTP layer returns:

    {"type": "text", "text": ...}
    {"type": "options", "text": ..., "title": ..., "options": [{id, label, description}]}

`render` is strict and raises TransportValidationError. `render_safely`
degrades an option list that does not fit into a numbered plain-text
message, and truncates over-long text, so something is always deliverable.
"""

import logging
from typing import Any, Dict, List

from exceptions.exceptions import TransportValidationError
from ..models.session_models import OutboundMessage


logger = logging.getLogger(__name__)

MAX_OPTIONS = 10
MAX_LABEL = 24
MAX_DESCRIPTION = 72
MAX_TEXT = 4096

_ELLIPSIS = "…"


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: max(limit - len(_ELLIPSIS), 0)].rstrip() + _ELLIPSIS


def render(
    outbound: OutboundMessage,
    *,
    max_options: int = MAX_OPTIONS,
    max_label: int = MAX_LABEL,
    max_text: int = MAX_TEXT,
) -> Dict[str, Any]:
    """
    Validate and render `outbound` as-is.

    Raises
    ------
    TransportValidationError
        If the text is too long, or the option list has too many rows, an
        empty or over-long label, duplicate ids, or an over-long description.
    """
    text = outbound.text or ""
    if len(text) > max_text:
        raise TransportValidationError(
            "max_text", f"text has {len(text)} characters, limit is {max_text}"
        )

    if not outbound.options:
        return {"type": "text", "text": text}

    if len(outbound.options) > max_options:
        raise TransportValidationError(
            "max_options",
            f"{len(outbound.options)} options, limit is {max_options}",
        )

    seen = set()
    for option in outbound.options:
        if not option.label.strip():
            raise TransportValidationError("empty_label", f"option {option.id!r} has no label")
        if len(option.label) > max_label:
            raise TransportValidationError(
                "max_label",
                f"label {option.label!r} has {len(option.label)} characters, limit is {max_label}",
            )
        if option.description and len(option.description) > MAX_DESCRIPTION:
            raise TransportValidationError(
                "max_description", f"description of option {option.id!r} is too long"
            )
        if option.id in seen:
            raise TransportValidationError("duplicate_id", f"option id {option.id!r} repeats")
        seen.add(option.id)

    return {
        "type": "options",
        "text": text,
        "title": outbound.title,
        "options": [option.model_dump() for option in outbound.options],
    }


def render_numbered(outbound: OutboundMessage) -> str:
    """Plain-text rendering of an option list: one numbered line per option."""
    lines: List[str] = []
    if outbound.text:
        lines.append(outbound.text)
        lines.append("")
    for index, option in enumerate(outbound.options, start=1):
        line = f"{index}. {option.label}"
        if option.description:
            line += f" - {option.description}"
        lines.append(line)
    return "\n".join(lines)


def render_safely(
    outbound: OutboundMessage,
    *,
    max_options: int = MAX_OPTIONS,
    max_label: int = MAX_LABEL,
    max_text: int = MAX_TEXT,
) -> Dict[str, Any]:
    """Render `outbound`, degrading instead of failing."""
    try:
        return render(
            outbound, max_options=max_options, max_label=max_label, max_text=max_text
        )
    except TransportValidationError as exc:
        logger.warning("Outbound message degraded to plain text: %s", exc)

    text = render_numbered(outbound) if outbound.options else (outbound.text or "")
    return {"type": "text", "text": _truncate(text, max_text)}


def render_all(outbound: List[OutboundMessage], **limits: int) -> List[Dict[str, Any]]:
    return [render_safely(message, **limits) for message in outbound]
