"""
Format options controlling the verbosity of issue output.

Callers pass untyped tool arguments; this module turns them into an immutable
FormatOptions value. Parsing is purely defensive: malformed values are ignored
and the corresponding default is kept.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_DESCRIPTION_LENGTH = 200
MIN_DESCRIPTION_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 1000

DEFAULT_MAX_JOURNAL_ENTRIES = 3
MIN_JOURNAL_ENTRIES = 0
MAX_JOURNAL_ENTRIES = 10

BOOLEAN_FIELD_GROUPS = (
    "assignee", "dates", "category", "version",
    "time_tracking", "journals", "relations", "attachments",
)


class OutputDetailLevel(str, Enum):
    """Output detail levels for issue formatting."""
    BRIEF = "brief"
    FULL = "full"


class DescriptionMode(str, Enum):
    """How the description is included in brief mode."""
    DISABLED = "disabled"
    FULL = "full"
    TRUNCATED = "truncated"


class CustomFieldMode(str, Enum):
    """Which custom fields are included in brief mode."""
    DISABLED = "disabled"
    ALL = "all"
    NAMED = "named"


@dataclass(frozen=True)
class CustomFieldSelection:
    """Custom field selection: disabled, all non-empty fields, or a named subset."""
    mode: CustomFieldMode = CustomFieldMode.DISABLED
    names: Tuple[str, ...] = ()

    @classmethod
    def disabled(cls) -> "CustomFieldSelection":
        return cls()

    @classmethod
    def all_fields(cls) -> "CustomFieldSelection":
        return cls(mode=CustomFieldMode.ALL)

    @classmethod
    def named(cls, names) -> "CustomFieldSelection":
        names = tuple(names)
        if not names:
            return cls()
        return cls(mode=CustomFieldMode.NAMED, names=names)

    @property
    def enabled(self) -> bool:
        return self.mode is not CustomFieldMode.DISABLED


@dataclass(frozen=True)
class BriefFieldOptions:
    """Selective field inclusion for brief mode. Core fields are always included."""
    assignee: bool = False                     # Assignee information
    description: DescriptionMode = DescriptionMode.DISABLED
    custom_fields: CustomFieldSelection = field(default_factory=CustomFieldSelection)
    dates: bool = False                        # Start/due/created/updated/closed dates
    category: bool = False
    version: bool = False                      # Target version
    time_tracking: bool = False                # Estimated/spent hours and progress
    journals: bool = False                     # Comments and history
    relations: bool = False
    attachments: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BriefFieldOptions":
        """
        Build options from a decoded ``brief_fields`` JSON object.

        Boolean groups are enabled only by a literal ``true``. ``description``
        accepts ``true``/``"full"`` or ``"truncated"``; ``custom_fields``
        accepts ``true`` or a list of field names. Any other value disables the
        group and unknown keys are ignored.

        Args:
            data: Decoded JSON object

        Returns:
            BriefFieldOptions instance
        """
        values: Dict[str, Any] = {
            name: data.get(name) is True for name in BOOLEAN_FIELD_GROUPS
        }
        values["description"] = _parse_description_mode(data.get("description"))
        values["custom_fields"] = _parse_custom_field_selection(data.get("custom_fields"))

        unknown = set(data) - set(BOOLEAN_FIELD_GROUPS) - {"description", "custom_fields"}
        if unknown:
            logger.debug(f"Ignoring unknown brief_fields keys: {sorted(unknown)}")

        return cls(**values)


def _parse_description_mode(value: Any) -> DescriptionMode:
    if value is True:
        return DescriptionMode.FULL
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "truncated":
            return DescriptionMode.TRUNCATED
        if lowered == "full":
            return DescriptionMode.FULL
    return DescriptionMode.DISABLED


def _parse_custom_field_selection(value: Any) -> CustomFieldSelection:
    if value is True:
        return CustomFieldSelection.all_fields()
    if isinstance(value, list):
        return CustomFieldSelection.named(name for name in value if isinstance(name, str))
    return CustomFieldSelection.disabled()


@dataclass(frozen=True)
class FormatOptions:
    """Complete formatting options for issue output."""
    detail_level: OutputDetailLevel = OutputDetailLevel.FULL
    brief_fields: Optional[BriefFieldOptions] = None    # Used only in brief mode
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
    max_journal_entries: int = DEFAULT_MAX_JOURNAL_ENTRIES

    @property
    def is_brief(self) -> bool:
        return self.detail_level is OutputDetailLevel.BRIEF


DEFAULT_FORMAT_OPTIONS = FormatOptions()


def create_default_brief_fields() -> BriefFieldOptions:
    """
    Default brief field options with commonly needed fields.

    Returns:
        Options with assignee and dates enabled and a truncated description
    """
    return BriefFieldOptions(
        assignee=True,
        dates=True,
        description=DescriptionMode.TRUNCATED,
    )


def _as_bounded_int(value: Any, minimum: int, maximum: int) -> Optional[int]:
    """Clamp a numeric argument, None when the value is not a usable number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(max(minimum, min(maximum, value)))


def parse_format_options(args: Any, log=None) -> FormatOptions:
    """
    Parse formatting options from tool arguments.

    Never raises: wrong types and malformed JSON fall back to the defaults.

    Args:
        args: Raw tool arguments
        log: Logger used to report an unparseable brief_fields value
             (defaults to this module's logger)

    Returns:
        FormatOptions instance
    """
    log = log or logger
    if not isinstance(args, dict):
        return DEFAULT_FORMAT_OPTIONS

    detail_level = OutputDetailLevel.FULL
    level = args.get("detail_level")
    if isinstance(level, str) and level.lower() in ("brief", "full"):
        detail_level = OutputDetailLevel(level.lower())

    brief_fields = None
    raw_fields = args.get("brief_fields")
    if isinstance(raw_fields, str):
        try:
            decoded = json.loads(raw_fields)
            if not isinstance(decoded, dict):
                raise ValueError(f"expected a JSON object, got {type(decoded).__name__}")
            brief_fields = BriefFieldOptions.from_dict(decoded)
        except (ValueError, RecursionError) as e:
            log.warning(f"Invalid brief_fields JSON: {e.__class__.__name__}: {e}")

    max_description_length = _as_bounded_int(
        args.get("max_description_length"), MIN_DESCRIPTION_LENGTH, MAX_DESCRIPTION_LENGTH)
    max_journal_entries = _as_bounded_int(
        args.get("max_journal_entries"), MIN_JOURNAL_ENTRIES, MAX_JOURNAL_ENTRIES)

    return FormatOptions(
        detail_level=detail_level,
        brief_fields=brief_fields,
        max_description_length=(DEFAULT_MAX_DESCRIPTION_LENGTH if max_description_length is None
                                else max_description_length),
        max_journal_entries=(DEFAULT_MAX_JOURNAL_ENTRIES if max_journal_entries is None
                             else max_journal_entries),
    )
