# disaster_response/exceptions.py
# ------------------------------------------------------------
# Domain exceptions.
#
# Contract violations subclass ValueError so callers that only
# know "bad input" can still catch them. Route handlers map the
# store errors to HTTP responses in main.py.
# ------------------------------------------------------------


class DisasterResponseError(Exception):
    """Base class for all domain errors."""


class InvalidThresholdsError(DisasterResponseError, ValueError):
    """Sensor thresholds are missing, non-numeric or NaN."""


class InvalidReadingError(DisasterResponseError, ValueError):
    """A reading value cannot be classified (e.g. NaN)."""


class NotFoundError(DisasterResponseError, LookupError):
    """A sensor, alert or report id does not exist."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} not found: {key}")


class StateConflictError(DisasterResponseError):
    """An operation does not apply to the entity's current state."""
