"""
Enumerations for Reply Qualification Service data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class Classification(str, Enum):
    """
    Closed taxonomy of reply classifications.

    Single-label: each reply gets exactly one value. OTHER is the fallback
    for anything the model returns outside this set.
    """

    WILLING_TO_MEET = "willing_to_meet"
    INTERESTED = "interested"
    NEEDS_MORE_INFO = "needs_more_info"
    NOT_INTERESTED = "not_interested"
    OUT_OF_OFFICE = "out_of_office"
    UNSUBSCRIBE = "unsubscribe"
    BOUNCE = "bounce"
    OTHER = "other"


class KeySource(str, Enum):
    """Explicit key-source preference a caller may send with a request."""

    PLATFORM = "platform"
    BYOK = "byok"
    APP = "app"


class SourceTier(str, Enum):
    """
    Credential scope that actually serviced a classification call.

    Reported as costSource on run cost items. A BYOK preference resolves
    to the ORG tier.
    """

    PLATFORM = "platform"
    ORG = "org"
    APP = "app"


class RunStatus(str, Enum):
    """Lifecycle states of a run in the runs service."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
