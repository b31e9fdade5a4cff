"""
Issue tool handlers.

Each handler validates the raw tool arguments, calls the Redmine client and
renders the result. Handlers never raise: validation and API failures are
returned as error results carrying the exception message.
"""

import math
import re
from typing import Any, Dict, Union

from mcp.server.fastmcp.utilities.logging import get_logger
from mcp.types import CallToolResult, TextContent

from .format_options import parse_format_options
from .issue_formatter import build_text_filter_query, format_issue, format_issues

logger = get_logger(__name__)

DEFAULT_LIMIT = 25
STATUS_KEYWORDS = ("open", "closed", "*")
CUSTOM_FIELD_FILTER = re.compile(r"^cf_\d+$")

# Issue attributes accepted on create/update, with their coercion
NUMERIC_ISSUE_FIELDS = (
    "project_id", "tracker_id", "status_id", "priority_id", "category_id",
    "fixed_version_id", "assigned_to_id", "parent_issue_id", "estimated_hours",
)
TEXT_ISSUE_FIELDS = ("subject", "description", "start_date", "due_date")


class ValidationError(Exception):
    """Raised when tool arguments are missing or malformed."""
    pass


def as_number(value: Any) -> Union[int, float]:
    """
    Coerce a tool argument to a number.

    Accepts ints, finite floats and numeric strings; integral strings become ints.

    Args:
        value: Raw argument value

    Returns:
        The numeric value

    Raises:
        ValidationError: If the value is not numeric
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid number: {value}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(f"Invalid number: {value}") from None
        if math.isfinite(number):
            return int(number) if number.is_integer() else number
    raise ValidationError(f"Invalid number: {value}")


def extract_pagination_params(args: Dict[str, Any]) -> Dict[str, int]:
    """
    Extract limit and offset from tool arguments.

    Raises:
        ValidationError: If limit is not a positive integer or offset is negative
    """
    limit = as_number(args["limit"]) if args.get("limit") is not None else DEFAULT_LIMIT
    offset = as_number(args["offset"]) if args.get("offset") is not None else 0

    if not isinstance(limit, int) or limit < 1:
        raise ValidationError("limit must be a positive integer")
    if not isinstance(offset, int) or offset < 0:
        raise ValidationError("offset must be a non-negative integer")
    return {"limit": limit, "offset": offset}


def _require_object(args: Any) -> Dict[str, Any]:
    if not isinstance(args, dict):
        raise ValidationError("Arguments must be an object")
    return args


def _require(args: Dict[str, Any], key: str) -> Any:
    if key not in args:
        raise ValidationError(f"{key} is required")
    return args[key]


def _result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


class IssueHandlers:
    """
    Handlers for issue-related tool operations.

    The client is any object exposing the RedmineClient issue methods.
    """

    def __init__(self, client, log=None):
        self.client = client
        self.log = log or logger

    def _run(self, operation: str, fn, args: Any) -> CallToolResult:
        try:
            return _result(fn(_require_object(args)))
        except ValidationError as e:
            self.log.info(f"{operation}: invalid arguments: {e}")
            return _result(str(e), is_error=True)
        except Exception as e:
            self.log.warning(f"{operation} failed: {e}")
            return _result(str(e) or e.__class__.__name__, is_error=True)

    # Tool entry points

    def list_issues(self, args: Any) -> CallToolResult:
        """Lists issues with pagination and filters."""
        return self._run("list_issues", self._list_issues, args)

    def get_issue(self, args: Any) -> CallToolResult:
        """Gets a specific issue by ID."""
        return self._run("get_issue", self._get_issue, args)

    def create_issue(self, args: Any) -> CallToolResult:
        """Creates a new issue."""
        return self._run("create_issue", self._create_issue, args)

    def update_issue(self, args: Any) -> CallToolResult:
        """Updates an existing issue."""
        return self._run("update_issue", self._update_issue, args)

    def delete_issue(self, args: Any) -> CallToolResult:
        """Deletes an issue."""
        return self._run("delete_issue", self._delete_issue, args)

    def add_watcher(self, args: Any) -> CallToolResult:
        """Adds a watcher to an issue."""
        return self._run("add_watcher", self._add_watcher, args)

    def remove_watcher(self, args: Any) -> CallToolResult:
        """Removes a watcher from an issue."""
        return self._run("remove_watcher", self._remove_watcher, args)

    # Implementations

    def _list_issues(self, args: Dict[str, Any]) -> str:
        params: Dict[str, Any] = extract_pagination_params(args)

        for key in ("sort", "include", "subproject_id", "created_on", "updated_on"):
            if key in args:
                params[key] = str(args[key])
        for key in ("project_id", "issue_id", "tracker_id", "parent_id"):
            if key in args:
                params[key] = as_number(args[key])

        if "status_id" in args:
            status_id = str(args["status_id"])
            params["status_id"] = status_id if status_id in STATUS_KEYWORDS else as_number(args["status_id"])

        if "assigned_to_id" in args:
            assigned_to_id = args["assigned_to_id"]
            params["assigned_to_id"] = "me" if assigned_to_id == "me" else as_number(assigned_to_id)

        for key, value in args.items():
            if CUSTOM_FIELD_FILTER.match(key):
                params[key] = str(value)

        params.update(build_text_filter_query(
            subject=args.get("subject_filter"),
            description=args.get("description_filter"),
            notes=args.get("notes_filter"),
        ))

        response = self.client.get_issues(params)
        return format_issues(response, parse_format_options(args, self.log))

    def _get_issue(self, args: Dict[str, Any]) -> str:
        issue_id = as_number(_require(args, "id"))
        params = {"include": str(args["include"])} if "include" in args else None

        response = self.client.get_issue(issue_id, params)
        return format_issue(response["issue"], parse_format_options(args, self.log))

    def _issue_payload(self, args: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for key in NUMERIC_ISSUE_FIELDS:
            if key in args:
                payload[key] = as_number(args[key])
        for key in TEXT_ISSUE_FIELDS:
            if key in args:
                payload[key] = str(args[key])
        if "custom_fields" in args:
            payload["custom_fields"] = args["custom_fields"]
        if "watcher_user_ids" in args:
            if not isinstance(args["watcher_user_ids"], (list, tuple)):
                raise ValidationError("watcher_user_ids must be a list")
            payload["watcher_user_ids"] = [as_number(user_id) for user_id in args["watcher_user_ids"]]
        if "is_private" in args:
            payload["is_private"] = bool(args["is_private"])
        return payload

    def _create_issue(self, args: Dict[str, Any]) -> str:
        _require(args, "project_id")
        _require(args, "subject")

        response = self.client.create_issue(self._issue_payload(args))
        return f"Issue #{response['issue']['id']} created successfully"

    def _update_issue(self, args: Dict[str, Any]) -> str:
        issue_id = as_number(_require(args, "id"))

        payload = self._issue_payload(args)
        payload.pop("watcher_user_ids", None)
        if "notes" in args:
            payload["notes"] = str(args["notes"])
        if "private_notes" in args:
            payload["private_notes"] = bool(args["private_notes"])

        self.client.update_issue(issue_id, payload)
        return f"Issue #{issue_id} updated successfully"

    def _delete_issue(self, args: Dict[str, Any]) -> str:
        issue_id = as_number(_require(args, "id"))
        self.client.delete_issue(issue_id)
        return f"Issue #{issue_id} deleted successfully"

    def _add_watcher(self, args: Dict[str, Any]) -> str:
        issue_id = as_number(_require(args, "issue_id"))
        user_id = as_number(_require(args, "user_id"))
        self.client.add_watcher(issue_id, user_id)
        return f"User #{user_id} added as watcher to issue #{issue_id}"

    def _remove_watcher(self, args: Dict[str, Any]) -> str:
        issue_id = as_number(_require(args, "issue_id"))
        user_id = as_number(_require(args, "user_id"))
        self.client.remove_watcher(issue_id, user_id)
        return f"User #{user_id} removed as watcher from issue #{issue_id}"
