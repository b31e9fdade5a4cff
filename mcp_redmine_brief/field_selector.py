"""
Selective field inclusion for brief mode formatting.

Reduces a full Redmine issue to its core fields plus the optional field groups
enabled in BriefFieldOptions, reporting custom fields that were requested by
name but could not be included.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .format_options import BOOLEAN_FIELD_GROUPS, BriefFieldOptions, CustomFieldMode, DescriptionMode
from .text_truncation import is_empty_custom_value

CORE_FIELDS = ("id", "subject", "project", "tracker", "status", "priority", "author")


@dataclass
class FieldSelectionResult:
    """Reduced issue and warnings for selections that could not be honored."""
    issue: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)


def skip_empty_custom_fields(custom_fields: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Filter out custom fields without a value.

    Args:
        custom_fields: Custom field dictionaries

    Returns:
        The non-empty fields, same objects in the same order
    """
    if not custom_fields:
        return []
    return [cf for cf in custom_fields if not is_empty_custom_value(cf.get("value"))]


def select_custom_fields(custom_fields: Optional[List[Dict[str, Any]]], names) -> Tuple[List[Dict[str, Any]], List[str]]:
    """
    Pick custom fields by name, in the requested order.

    Args:
        custom_fields: Custom field dictionaries of the issue
        names: Requested custom field names

    Returns:
        Selected fields and one warning per name that is missing or empty
    """
    by_name: Dict[str, Dict[str, Any]] = {}
    for cf in custom_fields or []:
        by_name.setdefault(cf.get("name"), cf)

    selected = []
    warnings = []
    for name in names:
        cf = by_name.get(name)
        if cf is None or is_empty_custom_value(cf.get("value")):
            warnings.append(f'Custom field "{name}" not found or empty')
        else:
            selected.append(cf)

    return selected, warnings


def select_fields(issue: Dict[str, Any], options: BriefFieldOptions) -> FieldSelectionResult:
    """
    Select fields from an issue based on brief field options.

    Core fields are always copied. Optional groups are copied only when enabled
    and present on the issue; missing source data is silently omitted.

    Args:
        issue: Full Redmine issue dictionary
        options: Brief field options

    Returns:
        FieldSelectionResult with the reduced issue and any warnings
    """
    selected = {key: issue.get(key) for key in CORE_FIELDS}
    warnings: List[str] = []

    if options.assignee and issue.get("assigned_to"):
        selected["assigned_to"] = issue["assigned_to"]

    if options.description is not DescriptionMode.DISABLED and issue.get("description"):
        selected["description"] = issue["description"]

    if options.dates:
        for key in ("start_date", "due_date"):
            if issue.get(key):
                selected[key] = issue[key]
        selected["created_on"] = issue.get("created_on")
        selected["updated_on"] = issue.get("updated_on")
        if issue.get("closed_on"):
            selected["closed_on"] = issue["closed_on"]

    if options.category and issue.get("category"):
        selected["category"] = issue["category"]

    if options.version and issue.get("fixed_version"):
        selected["fixed_version"] = issue["fixed_version"]

    if options.time_tracking:
        # Zero hours and 0% progress are meaningful
        for key in ("estimated_hours", "spent_hours", "done_ratio"):
            if issue.get(key) is not None:
                selected[key] = issue[key]

    selection = options.custom_fields
    if selection.mode is CustomFieldMode.ALL:
        selected["custom_fields"] = skip_empty_custom_fields(issue.get("custom_fields"))
    elif selection.mode is CustomFieldMode.NAMED:
        selected["custom_fields"], warnings = select_custom_fields(issue.get("custom_fields"), selection.names)
    else:
        selected["custom_fields"] = []

    for key in ("journals", "relations", "attachments"):
        if getattr(options, key) and issue.get(key):
            selected[key] = list(issue[key])

    return FieldSelectionResult(issue=selected, warnings=warnings)


def has_brief_fields_enabled(options: Optional[BriefFieldOptions]) -> bool:
    """Check if any optional field group is enabled."""
    return bool(enabled_brief_fields(options))


def enabled_brief_fields(options: Optional[BriefFieldOptions]) -> List[str]:
    if options is None:
        return []

    enabled = [key for key in BOOLEAN_FIELD_GROUPS if getattr(options, key)]
    if options.description is not DescriptionMode.DISABLED:
        enabled.append(f"description ({options.description.value})")
    if options.custom_fields.enabled:
        enabled.append(f"custom_fields ({options.custom_fields.mode.value})")
    return enabled


def get_brief_fields_summary(options: Optional[BriefFieldOptions]) -> str:
    """Summary of enabled brief fields for logging, ``"none"`` when nothing is enabled."""
    enabled = enabled_brief_fields(options)
    return ", ".join(enabled) if enabled else "none"
