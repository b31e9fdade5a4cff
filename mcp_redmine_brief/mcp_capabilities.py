"""
MCP capabilities documentation for the Redmine issue tools.

This module describes the output controls the server adds on top of the
native Redmine API. The structure is dumped as YAML into tool descriptions
so that an LLM can discover brief mode without reading the source.
"""

from typing import Any, Dict

from .format_options import (
    BOOLEAN_FIELD_GROUPS,
    DEFAULT_MAX_DESCRIPTION_LENGTH,
    DEFAULT_MAX_JOURNAL_ENTRIES,
    MAX_DESCRIPTION_LENGTH,
    MAX_JOURNAL_ENTRIES,
    MIN_DESCRIPTION_LENGTH,
    MIN_JOURNAL_ENTRIES,
)
from .issue_formatter import TEXT_FILTER_FIELDS

# Tools whose output goes through the issue formatter
FORMATTED_TOOLS = ("redmine_list_issues", "redmine_get_issue")

FIELD_GROUP_DESCRIPTIONS = {
    "assignee": "Assigned user",
    "dates": "Start, due, created, updated and closed dates",
    "category": "Issue category",
    "version": "Target version",
    "time_tracking": "Estimated hours, spent hours and progress",
    "journals": "Most recent comments and change history",
    "relations": "Issue relations (selected, not rendered)",
    "attachments": "Attachments (selected, not rendered)",
}


def get_brief_fields_documentation() -> Dict[str, Any]:
    """Document every key accepted in the brief_fields JSON object."""
    fields: Dict[str, Any] = {
        name: {"type": "boolean", "description": FIELD_GROUP_DESCRIPTIONS[name]}
        for name in BOOLEAN_FIELD_GROUPS
    }
    fields["description"] = {
        "type": "boolean | string",
        "description": "true or 'full' for the whole description, 'truncated' to cut it "
                       "at max_description_length",
    }
    fields["custom_fields"] = {
        "type": "boolean | array",
        "description": "true for all non-empty custom fields, or a list of custom field names; "
                       "missing or empty named fields are reported as warnings",
        "example": ["Build", "Owner"],
    }
    return fields


def get_mcp_capabilities(tool: str) -> Dict[str, Any]:
    """
    Generate capabilities documentation for a given tool.

    Args:
        tool: MCP tool name (e.g., 'redmine_list_issues')

    Returns:
        Dictionary containing capabilities documentation
    """
    capabilities: Dict[str, Any] = {
        "description": "Output controls provided by the MCP server",
    }
    if tool not in FORMATTED_TOOLS:
        return capabilities

    capabilities["output_format"] = {
        "description": "Issues are returned as XML. Core fields (id, subject, project, tracker, "
                       "status, priority, author) are always included.",
        "options": {
            "detail_level": {
                "type": "string",
                "description": "'full' renders every field, 'brief' renders core fields plus brief_fields",
                "default": "full",
                "example": "brief",
            },
            "brief_fields": {
                "type": "string",
                "description": "JSON object selecting optional field groups in brief mode. "
                               "Without it brief mode includes assignee, dates and a truncated description.",
                "fields": get_brief_fields_documentation(),
                "example": '{"assignee": true, "description": "truncated", "custom_fields": ["Owner"]}',
            },
            "max_description_length": {
                "type": "integer",
                "description": f"Truncation length for a truncated description "
                               f"({MIN_DESCRIPTION_LENGTH}-{MAX_DESCRIPTION_LENGTH})",
                "default": DEFAULT_MAX_DESCRIPTION_LENGTH,
            },
            "max_journal_entries": {
                "type": "integer",
                "description": f"Number of most recent journal entries kept in brief mode "
                               f"({MIN_JOURNAL_ENTRIES}-{MAX_JOURNAL_ENTRIES})",
                "default": DEFAULT_MAX_JOURNAL_ENTRIES,
            },
        },
    }

    if tool == "redmine_list_issues":
        capabilities["text_filters"] = {
            "description": "Case-insensitive 'contains' filters, combined with AND",
            "options": {
                f"{name}_filter": {"type": "string", "description": f"Text the {name} must contain"}
                for name in TEXT_FILTER_FIELDS
            },
        }

    return capabilities
