"""
Text truncation and cleanup utilities for brief mode formatting.

These helpers keep the rendered issue text short enough for LLM consumption:
bounded truncation that prefers word boundaries, description normalization,
journal limiting, HTML cleanup and one-line custom field summaries.
"""

import re
from typing import Any, Dict, List, Optional

ELLIPSIS = "..."

# Fraction of max_length a word boundary must reach to be used as the cut point
WORD_BOUNDARY_RATIO = 0.8

_EXCESS_LINE_BREAKS = re.compile(r"\n{3,}")
_HTML_TAG = re.compile(r"<[^>]*>")
_HTML_ENTITIES = (
    ("&nbsp;", " "),
    ("\u00a0", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def truncate_text(text: Optional[str], max_length: int) -> Optional[str]:
    """
    Truncate text to a maximum length, appending an ellipsis.

    The cut happens at the last whitespace inside the first ``max_length``
    characters when that whitespace is close enough to the limit, otherwise
    exactly at the limit.

    Args:
        text: Text to truncate (None and empty strings are returned as-is)
        max_length: Maximum number of characters kept before the ellipsis

    Returns:
        The unchanged text if it fits, otherwise the truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = -1
    for index in range(len(truncated) - 1, -1, -1):
        if truncated[index].isspace():
            last_space = index
            break

    if last_space >= max_length * WORD_BOUNDARY_RATIO:
        return truncated[:last_space] + ELLIPSIS
    return truncated + ELLIPSIS


def _is_truncation_result(text: str, max_length: int) -> bool:
    if not text.endswith(ELLIPSIS):
        return False
    body = text[:-len(ELLIPSIS)]
    return len(body) <= max_length and len(text) <= max_length + len(ELLIPSIS)


def truncate_description(description: Optional[str], max_length: int) -> str:
    """
    Clean and truncate an issue description for brief mode.

    Line endings are normalized, runs of three or more line breaks collapse to
    a single blank line and surrounding whitespace is stripped before the text
    is truncated.

    Text that already looks like a truncation result (it ends with the
    ellipsis, the body before it fits ``max_length`` and the whole text fits
    ``max_length`` plus the ellipsis) is returned unchanged, so applying the
    function twice gives the same result. A description that genuinely ends
    in "..." and falls in that narrow length window is indistinguishable from
    such a result and is kept as is.

    Args:
        description: Raw description, may be None
        max_length: Maximum description length before the ellipsis

    Returns:
        Cleaned description, empty string when there is nothing to render
    """
    if not description:
        return ""

    cleaned = description.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _EXCESS_LINE_BREAKS.sub("\n\n", cleaned).strip()

    if len(cleaned) <= max_length:
        return cleaned

    if _is_truncation_result(cleaned, max_length):
        return cleaned

    return truncate_text(cleaned, max_length)


def limit_journal_entries(journals: Optional[List[Dict[str, Any]]], max_entries: int,
                          max_note_length: int = 100) -> List[Dict[str, Any]]:
    """
    Keep the most recent journal entries and truncate their notes.

    Journals are expected in chronological order, so the most recent entries
    are at the end of the list.

    Args:
        journals: Redmine journal entries, oldest first
        max_entries: Number of trailing entries to keep (<= 0 keeps none)
        max_note_length: Maximum length of each entry's notes

    Returns:
        New list of copied journal entries, the input is left untouched
    """
    if not journals or max_entries <= 0:
        return []

    limited = []
    for journal in journals[-max_entries:]:
        entry = dict(journal)
        if entry.get("notes"):
            entry["notes"] = truncate_text(entry["notes"], max_note_length)
        limited.append(entry)
    return limited


def strip_html_tags(text: Optional[str]) -> Optional[str]:
    """Remove HTML tags and decode the common entities."""
    if not text:
        return text

    stripped = _HTML_TAG.sub("", text)
    for entity, replacement in _HTML_ENTITIES:
        stripped = stripped.replace(entity, replacement)
    return stripped.strip()


def is_empty_custom_value(value: Any) -> bool:
    """
    Check if a custom field value should be considered empty.

    Args:
        value: Custom field value (string, list of strings or None)

    Returns:
        True if the value carries no information
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return not any(item is not None and str(item).strip() for item in value)
    return False


def custom_value_text(value: Any) -> str:
    """Render a custom field value as a single line of text."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item is not None)
    return str(value)


def summarize_custom_fields(custom_fields: Optional[List[Dict[str, Any]]], max_fields: int = 5) -> str:
    """
    Create a one-line summary of the non-empty custom fields.

    Args:
        custom_fields: Custom field dictionaries with name and value
        max_fields: Maximum number of fields in the summary

    Returns:
        ``"name: value; name: value"`` or an empty string
    """
    if not custom_fields:
        return ""

    non_empty = [field for field in custom_fields if not is_empty_custom_value(field.get("value"))]
    summaries = [
        f"{field.get('name', '')}: {truncate_text(custom_value_text(field['value']), 50)}"
        for field in non_empty[:max_fields]
    ]
    return "; ".join(summaries)
