"""Node Definition Schema — retention fields as stored in the host's node definitions.

Invariants:
    - Both fields accept None, blank strings, decimal strings, or ints
    - Ints are coerced to strings so one parser handles every stored form
    - Schema validation never rejects a malformed number: the core parser
      substitutes the default and reports a warning instead

Design Decisions:
    - field_validator for side-effect-free transforms (strip, coercion) — keeps model pure
"""

from pydantic import BaseModel, ConfigDict, field_validator

from node_retention.core.retention_policy import RetentionPolicy, parse_retention_config


class RetentionDefinition(BaseModel):
    """Retention section of a stored node definition."""

    model_config = ConfigDict(extra="ignore")

    idle_termination_minutes: str | None = None
    cycle_termination_minutes: str | None = None

    @field_validator(
        "idle_termination_minutes", "cycle_termination_minutes", mode="before",
    )
    @classmethod
    def coerce_to_text(cls, v):
        """Stored numbers become strings; "5.0" and friends hit the malformed path."""
        if v is None:
            return None
        return str(v).strip()

    def to_policy(self) -> tuple[RetentionPolicy, list[str]]:
        """Parse into a RetentionPolicy. Returns (policy, warnings)."""
        return parse_retention_config(
            self.idle_termination_minutes, self.cycle_termination_minutes,
        )
