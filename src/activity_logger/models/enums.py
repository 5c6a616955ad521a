"""Enum types for activity-logger."""

from enum import Enum


class ActivityKind(str, Enum):
    """Motion classification reported by the activity-detection collaborator.

    The value is the name persisted in the activity table. The integer id
    of each kind is assigned by storage when the table is first seeded.
    """

    STILL = "still"
    WALKING = "walking"
    RUNNING = "running"
    IN_VEHICLE = "in_vehicle"
    ON_BICYCLE = "on_bicycle"
    UNKNOWN = "unknown"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all persisted names."""
        return [k.value for k in cls]

    @classmethod
    def from_name(cls, name: str | None) -> "ActivityKind":
        """Resolve a stored activity name, falling back to UNKNOWN.

        Args:
            name: Name read from the activity table.

        Returns:
            Matching kind, or UNKNOWN for empty or unrecognized names.
        """
        if not name:
            return cls.UNKNOWN
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        """Display label (e.g. "In vehicle")."""
        return self.value.replace("_", " ").capitalize()
