from __future__ import annotations


class InvalidDirection(ValueError):
    """A move was requested in something other than the four cardinal directions."""

    def __init__(self, direction: object) -> None:
        super().__init__(f"Invalid direction: {direction!r} (expected one of: left, right, up, down)")
        self.direction = direction


class PersistenceReadError(ValueError):
    """Saved data is absent or cannot be decoded.

    Raised inside the store only; public loaders translate it into "no saved state".
    """
