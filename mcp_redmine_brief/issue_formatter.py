"""
Issue rendering for Redmine MCP tool responses.

Issues are rendered into a fixed XML-like text layout. Full mode renders every
present field; brief mode renders the core fields plus the groups selected by
BriefFieldOptions, with descriptions truncated and journals limited.
"""

from typing import Any, Dict, Iterable, List, Optional
from xml.sax.saxutils import escape

from mcp.server.fastmcp.utilities.logging import get_logger

from .field_selector import get_brief_fields_summary, select_fields
from .format_options import BriefFieldOptions, DescriptionMode, FormatOptions, create_default_brief_fields
from .text_truncation import custom_value_text, limit_journal_entries, truncate_description

logger = get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

TEXT_FILTER_FIELDS = ("subject", "description", "notes")
CONTAINS_OPERATOR = "~"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: Any) -> str:
    """Escape the five XML special characters, None renders as an empty string."""
    if value is None:
        return ""
    return escape(str(value), _XML_ENTITIES)


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _name(ref: Any) -> Optional[str]:
    if isinstance(ref, dict):
        return ref.get("name")
    return None


def _element(tag: str, value: Any, depth: int = 1) -> str:
    return f"{'  ' * depth}<{tag}>{escape_xml(value)}</{tag}>"


def _format_custom_fields(custom_fields: List[Dict[str, Any]]) -> List[str]:
    lines = ["  <custom_fields>"]
    for cf in custom_fields:
        lines.append("    <field>")
        lines.append(_element("id", cf.get("id"), 3))
        lines.append(_element("name", cf.get("name"), 3))
        lines.append(_element("value", custom_value_text(cf.get("value")), 3))
        lines.append("    </field>")
    lines.append("  </custom_fields>")
    return lines


def _format_journals(journals: List[Dict[str, Any]]) -> List[str]:
    lines = ["  <journals>"]
    for journal in journals:
        lines.append("    <journal>")
        lines.append(_element("id", journal.get("id"), 3))
        lines.append(_element("user", _name(journal.get("user")), 3))
        lines.append(_element("created_on", journal.get("created_on"), 3))
        if journal.get("private_notes"):
            lines.append(_element("private_notes", "true", 3))
        if journal.get("notes") is not None:
            lines.append(_element("notes", journal["notes"], 3))

        details = journal.get("details") or []
        if details:
            lines.append("      <details>")
            for detail in details:
                lines.append("        <detail>")
                lines.append(_element("property", detail.get("property"), 5))
                lines.append(_element("name", detail.get("name"), 5))
                for key in ("old_value", "new_value"):
                    if detail.get(key) is not None:
                        lines.append(_element(key, detail[key], 5))
                lines.append("        </detail>")
            lines.append("      </details>")
        lines.append("    </journal>")
    lines.append("  </journals>")
    return lines


def _render_issue(issue: Dict[str, Any], warnings: Iterable[str] = ()) -> str:
    """Render an issue record; optional elements are emitted only when present."""
    lines = [
        "<issue>",
        _element("id", issue.get("id")),
        _element("subject", issue.get("subject")),
        _element("project", _name(issue.get("project"))),
        _element("tracker", _name(issue.get("tracker"))),
        _element("status", _name(issue.get("status"))),
        _element("priority", _name(issue.get("priority"))),
    ]
    if issue.get("author"):
        lines.append(_element("author", _name(issue["author"])))

    warnings = list(warnings)
    if warnings:
        lines.append("  <warnings>")
        lines.extend(_element("warning", warning, 2) for warning in warnings)
        lines.append("  </warnings>")

    if issue.get("assigned_to"):
        lines.append(_element("assigned_to", _name(issue["assigned_to"])))
    if issue.get("category"):
        lines.append(_element("category", _name(issue["category"])))
    if issue.get("fixed_version"):
        lines.append(_element("version", _name(issue["fixed_version"])))
    if isinstance(issue.get("parent"), dict):
        lines.append(_element("parent_id", issue["parent"].get("id")))
    for key in ("start_date", "due_date"):
        if issue.get(key):
            lines.append(_element(key, issue[key]))

    if issue.get("done_ratio") is not None:
        lines.append(_element("progress", f"{_format_number(issue['done_ratio'])}%"))
    for key in ("estimated_hours", "spent_hours"):
        if issue.get(key) is not None:
            lines.append(_element(key, _format_number(issue[key])))

    if issue.get("description"):
        lines.append(_element("description", issue["description"]))
    if issue.get("custom_fields"):
        lines.extend(_format_custom_fields(issue["custom_fields"]))
    if issue.get("journals"):
        lines.extend(_format_journals(issue["journals"]))

    for key in ("created_on", "updated_on", "closed_on"):
        if issue.get(key):
            lines.append(_element(key, issue[key]))

    lines.append("</issue>")
    return "\n".join(lines)


def format_issue_brief(issue: Dict[str, Any], brief_fields: BriefFieldOptions,
                       max_description_length: int = 200, max_journal_entries: int = 3) -> str:
    """
    Format a single issue in brief mode.

    Args:
        issue: Full Redmine issue dictionary
        brief_fields: Field groups to include besides the core fields
        max_description_length: Truncation limit for a "truncated" description
        max_journal_entries: Number of most recent journal entries to keep

    Returns:
        Rendered issue text
    """
    logger.debug(f"Brief format for issue {issue.get('id')}: {get_brief_fields_summary(brief_fields)}")

    result = select_fields(issue, brief_fields)
    record = dict(result.issue)

    if record.get("description") and brief_fields.description is DescriptionMode.TRUNCATED:
        record["description"] = truncate_description(record["description"], max_description_length)

    if record.get("journals"):
        record["journals"] = limit_journal_entries(record["journals"], max_journal_entries)

    return _render_issue(record, result.warnings)


def format_issue(issue: Dict[str, Any], options: Optional[FormatOptions] = None) -> str:
    """
    Format a single issue with optional formatting options.

    Args:
        issue: Full Redmine issue dictionary
        options: Format options, full mode when omitted

    Returns:
        Rendered issue text
    """
    if options is None or not options.is_brief:
        return _render_issue(issue)

    brief_fields = options.brief_fields or create_default_brief_fields()
    return format_issue_brief(issue, brief_fields, options.max_description_length,
                              options.max_journal_entries)


def _count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def format_issues(response: Any, options: Optional[FormatOptions] = None) -> str:
    """
    Format a list of issues returned by the issues endpoint.

    Args:
        response: API response with issues, total_count, offset and limit
        options: Format options applied to every issue

    Returns:
        Rendered issue list; a self-closed empty list for empty or malformed input
    """
    issues = response.get("issues") if isinstance(response, dict) else None
    issues = [issue for issue in issues if isinstance(issue, dict)] if isinstance(issues, list) else []
    if not issues:
        return f'{XML_DECLARATION}\n<issues type="array" total_count="0" offset="0" limit="0" />'

    header = (f'<issues type="array" total_count="{_count(response.get("total_count"))}" '
              f'offset="{_count(response.get("offset"))}" limit="{_count(response.get("limit"))}">')
    body = "\n".join(format_issue(issue, options) for issue in issues)
    return f"{XML_DECLARATION}\n{header}\n{body}\n</issues>"


def build_text_filter_query(subject: Optional[str] = None, description: Optional[str] = None,
                            notes: Optional[str] = None) -> Dict[str, str]:
    """
    Build Redmine filter parameters for free-text "contains" filters.

    Each non-blank filter adds ``op[<field>]`` and ``v[<field>][]`` entries;
    the active field names are combined into a single ``f[]`` entry. Blank
    filters are skipped entirely.

    Args:
        subject: Text the subject must contain
        description: Text the description must contain
        notes: Text a journal note must contain

    Returns:
        Query parameters to merge into the issue list query
    """
    values = {"subject": subject, "description": description, "notes": notes}
    params: Dict[str, str] = {}
    active = []

    for name in TEXT_FILTER_FIELDS:
        value = values[name]
        if value is None or not str(value).strip():
            continue
        active.append(name)
        params[f"op[{name}]"] = CONTAINS_OPERATOR
        params[f"v[{name}][]"] = str(value)

    if active:
        params["f[]"] = ",".join(active)
    return params
