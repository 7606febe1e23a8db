"""
Domain-specific exception hierarchy for the schedule builder.

The grid model and the selection engine never raise; these errors belong to
the host layer (entity management, configuration and gesture scripts).
"""


class ScheduleBuilderError(Exception):
    """Base class for all application-level errors."""


class EntityNotFoundError(ScheduleBuilderError):
    """Raised when a student or educator id is unknown to the store."""


class InvalidEntityError(ScheduleBuilderError):
    """Raised when an entity or one of its attributes is malformed."""


class MissingAttributeError(InvalidEntityError):
    """Raised when a new student lacks required attributes."""

    def __init__(self, names):
        self.names = list(names)
        super().__init__(
            f"Missing or invalid required attribute(s): {', '.join(self.names)}"
        )


class AttributeKeyConflictError(InvalidEntityError):
    """Raised when an attribute key would collide with an existing key."""


class GestureScriptError(ScheduleBuilderError):
    """Raised when a gesture script cannot be parsed or replayed."""
