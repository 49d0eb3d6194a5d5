"""Configuration enums for type-safe settings.

These enums provide type safety and IDE autocomplete for configuration values.
They inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum


class ExpansionPolicy(str, Enum):
    """How role grants accumulate group expansion entries.

    PER_ASSIGNEE: a grant only carries the group entry of its own principal.
    SHARED: every grant of a role carries the entries of all group assignees.
    """

    PER_ASSIGNEE = "per_assignee"
    SHARED = "shared"
