"""Error kinds raised by the Berkland window calculators.

None of these are retried internally; the caller decides what to do.
"""


class BerklandError(Exception):
    """Base class for every error raised by the window calculators."""


class OracleUnavailable(BerklandError):
    """The moon phase / distance function failed or returned garbage.

    Attributes:
        instant: The datetime that was being queried.
        quantity: "illumination" or "distance".
    """

    def __init__(self, instant, quantity, reason):
        self.instant = instant
        self.quantity = quantity
        self.reason = reason
        super().__init__(f"Oracle {quantity} unavailable at {instant.isoformat()}: {reason}")


class NoSyzygyFound(BerklandError):
    """The syzygy search produced no candidates, so there is no window."""


class EventSourceUnavailable(BerklandError):
    """The earthquake feed could not be fetched or parsed."""
