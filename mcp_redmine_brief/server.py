import os

import yaml
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.server.fastmcp.utilities.logging import get_logger
from mcp.types import CallToolResult

from .client import DEFAULT_TIMEOUT, RedmineClient
from .handlers import IssueHandlers
from .mcp_capabilities import get_mcp_capabilities

### Constants ###

VERSION = "2026.10.17.120000"

# Constants from environment
REDMINE_URL = os.environ['REDMINE_URL']
REDMINE_API_KEY = os.environ['REDMINE_API_KEY']
REDMINE_TIMEOUT = float(os.getenv('REDMINE_TIMEOUT', DEFAULT_TIMEOUT))

if "REDMINE_REQUEST_INSTRUCTIONS" in os.environ:
    with open(os.environ["REDMINE_REQUEST_INSTRUCTIONS"]) as f:
        REDMINE_REQUEST_INSTRUCTIONS = f.read()
else:
    REDMINE_REQUEST_INSTRUCTIONS = ""


def yd(obj):
    # Allow direct Unicode output, prevent line wrapping for long lines, and avoid automatic key sorting.
    return yaml.safe_dump(obj, allow_unicode=True, sort_keys=False, width=4096)


def describe(tool: str, text: str) -> str:
    """Tool description with capabilities docs and optional request instructions appended."""
    parts = [text.strip()]
    capabilities = get_mcp_capabilities(tool)
    if len(capabilities) > 1:
        parts.append("Capabilities:\n" + yd(capabilities))
    if REDMINE_REQUEST_INSTRUCTIONS:
        parts.append(REDMINE_REQUEST_INSTRUCTIONS.strip())
    return "\n\n".join(parts)


def respond(result: CallToolResult) -> str:
    """Unwrap a handler result, raising ToolError for failures."""
    text = "\n".join(content.text for content in result.content if content.type == "text")
    if result.isError:
        raise ToolError(text)
    return text


def provided(**kwargs) -> dict:
    """Drop arguments the caller left unset."""
    return {key: value for key, value in kwargs.items() if value is not None}


# Tools
client = RedmineClient(REDMINE_URL, REDMINE_API_KEY, timeout=REDMINE_TIMEOUT)
handlers = IssueHandlers(client)

mcp = FastMCP("Redmine MCP server")
get_logger(__name__).info(f"Starting MCP Redmine brief version {VERSION}")
get_logger(__name__).info(f"Redmine URL: {REDMINE_URL}, timeout: {REDMINE_TIMEOUT}s")


@mcp.tool(description=describe("redmine_list_issues", """
List issues, optionally filtered

Args:
    limit: Number of issues to return (default: 25)
    offset: Number of issues to skip (default: 0)
    sort: Sort column, append ':desc' for descending order (e.g. 'updated_on:desc')
    include: Comma separated associations to include (e.g. 'relations,attachments')
    project_id: Project ID
    subproject_id: Subproject ID or '!*' to exclude subprojects
    tracker_id: Tracker ID
    status_id: Status ID, or 'open', 'closed' or '*'
    assigned_to_id: User ID or 'me'
    parent_id: Parent issue ID
    issue_id: Issue ID
    created_on: Creation date filter (e.g. '>=2024-01-01')
    updated_on: Update date filter (e.g. '><2024-01-01|2024-01-31')
    custom_field_filters: Custom field filters keyed as 'cf_<id>'
    subject_filter: Text the subject must contain
    description_filter: Text the description must contain
    notes_filter: Text a journal note must contain
    detail_level: 'full' (default) or 'brief'
    brief_fields: JSON object selecting optional fields in brief mode
    max_description_length: Description truncation length in brief mode
    max_journal_entries: Journal entries kept in brief mode

Returns:
    str: XML list of issues
"""))
def redmine_list_issues(limit: int = None, offset: int = None, sort: str = None, include: str = None,
                        project_id: int = None, subproject_id: int | str = None, tracker_id: int = None,
                        status_id: int | str = None, assigned_to_id: int | str = None, parent_id: int = None,
                        issue_id: int = None, created_on: str = None, updated_on: str = None,
                        custom_field_filters: dict = None, subject_filter: str = None,
                        description_filter: str = None, notes_filter: str = None,
                        detail_level: str = None, brief_fields: str = None,
                        max_description_length: int = None, max_journal_entries: int = None) -> str:
    args = provided(limit=limit, offset=offset, sort=sort, include=include, project_id=project_id,
                    subproject_id=subproject_id, tracker_id=tracker_id, status_id=status_id,
                    assigned_to_id=assigned_to_id, parent_id=parent_id, issue_id=issue_id,
                    created_on=created_on, updated_on=updated_on, subject_filter=subject_filter,
                    description_filter=description_filter, notes_filter=notes_filter,
                    detail_level=detail_level, brief_fields=brief_fields,
                    max_description_length=max_description_length,
                    max_journal_entries=max_journal_entries)
    args.update(custom_field_filters or {})
    return respond(handlers.list_issues(args))


@mcp.tool(description=describe("redmine_get_issue", """
Get a single issue by ID

Args:
    id: Issue ID
    include: Comma separated associations to include (e.g. 'journals,relations')
    detail_level: 'full' (default) or 'brief'
    brief_fields: JSON object selecting optional fields in brief mode
    max_description_length: Description truncation length in brief mode
    max_journal_entries: Journal entries kept in brief mode

Returns:
    str: XML representation of the issue
"""))
def redmine_get_issue(id: int, include: str = None, detail_level: str = None, brief_fields: str = None,
                      max_description_length: int = None, max_journal_entries: int = None) -> str:
    return respond(handlers.get_issue(provided(
        id=id, include=include, detail_level=detail_level, brief_fields=brief_fields,
        max_description_length=max_description_length, max_journal_entries=max_journal_entries)))


@mcp.tool(description=describe("redmine_create_issue", """
Create a new issue

Args:
    project_id: Project ID
    subject: Issue subject
    description: Issue description
    tracker_id, status_id, priority_id, category_id, fixed_version_id: Attribute IDs
    assigned_to_id: Assignee user ID
    parent_issue_id: Parent issue ID
    start_date, due_date: Dates as YYYY-MM-DD
    estimated_hours: Estimated hours
    is_private: Whether the issue is private
    watcher_user_ids: User IDs to add as watchers
    custom_fields: List of {"id": ..., "value": ...} objects

Returns:
    str: Confirmation with the new issue ID
"""))
def redmine_create_issue(project_id: int, subject: str, description: str = None, tracker_id: int = None,
                         status_id: int = None, priority_id: int = None, category_id: int = None,
                         fixed_version_id: int = None, assigned_to_id: int = None,
                         parent_issue_id: int = None, start_date: str = None, due_date: str = None,
                         estimated_hours: float = None, is_private: bool = None,
                         watcher_user_ids: list = None, custom_fields: list = None) -> str:
    return respond(handlers.create_issue(provided(
        project_id=project_id, subject=subject, description=description, tracker_id=tracker_id,
        status_id=status_id, priority_id=priority_id, category_id=category_id,
        fixed_version_id=fixed_version_id, assigned_to_id=assigned_to_id,
        parent_issue_id=parent_issue_id, start_date=start_date, due_date=due_date,
        estimated_hours=estimated_hours, is_private=is_private, watcher_user_ids=watcher_user_ids,
        custom_fields=custom_fields)))


@mcp.tool(description=describe("redmine_update_issue", """
Update an existing issue

Args:
    id: Issue ID
    notes: Comment to add to the issue history
    private_notes: Whether the comment is private
    Other attributes as for redmine_create_issue; only given attributes are changed

Returns:
    str: Confirmation message
"""))
def redmine_update_issue(id: int, subject: str = None, description: str = None, notes: str = None,
                         private_notes: bool = None, project_id: int = None, tracker_id: int = None,
                         status_id: int = None, priority_id: int = None, category_id: int = None,
                         fixed_version_id: int = None, assigned_to_id: int = None,
                         parent_issue_id: int = None, start_date: str = None, due_date: str = None,
                         estimated_hours: float = None, is_private: bool = None,
                         custom_fields: list = None) -> str:
    return respond(handlers.update_issue(provided(
        id=id, subject=subject, description=description, notes=notes, private_notes=private_notes,
        project_id=project_id, tracker_id=tracker_id, status_id=status_id, priority_id=priority_id,
        category_id=category_id, fixed_version_id=fixed_version_id, assigned_to_id=assigned_to_id,
        parent_issue_id=parent_issue_id, start_date=start_date, due_date=due_date,
        estimated_hours=estimated_hours, is_private=is_private, custom_fields=custom_fields)))


@mcp.tool()
def redmine_delete_issue(id: int) -> str:
    """
    Delete an issue

    Args:
        id: Issue ID

    Returns:
        str: Confirmation message
    """
    return respond(handlers.delete_issue({"id": id}))


@mcp.tool()
def redmine_add_watcher(issue_id: int, user_id: int) -> str:
    """
    Add a watcher to an issue

    Args:
        issue_id: Issue ID
        user_id: User ID of the new watcher

    Returns:
        str: Confirmation message
    """
    return respond(handlers.add_watcher({"issue_id": issue_id, "user_id": user_id}))


@mcp.tool()
def redmine_remove_watcher(issue_id: int, user_id: int) -> str:
    """
    Remove a watcher from an issue

    Args:
        issue_id: Issue ID
        user_id: User ID of the watcher

    Returns:
        str: Confirmation message
    """
    return respond(handlers.remove_watcher({"issue_id": issue_id, "user_id": user_id}))


def main():
    """Main entry point for the mcp-redmine-brief package."""
    mcp.run()


if __name__ == "__main__":
    main()
