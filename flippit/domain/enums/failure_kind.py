from enum import Enum


class FailureKind(str, Enum):
    """Tags a failed listing attempt with the stage that rejected it."""

    VALIDATION = "VALIDATION"
    AUTH = "AUTH"
    NETWORK = "NETWORK"
    UPSTREAM_REJECTION = "UPSTREAM_REJECTION"
