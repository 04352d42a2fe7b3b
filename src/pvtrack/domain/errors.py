"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


# ============================================================================
#                           Unit id errors
# ============================================================================


class InvalidUnitIdError(DomainError, ValueError):
    """Raised when a unit id cannot be mapped onto the configured unit range."""

    def __init__(self, value: object, total_units: int) -> None:
        super().__init__(
            f"Unit id {value!r} is not in the range 1..{total_units}."
        )
        self.value = value
        self.total_units = total_units
