from dataclasses import dataclass
from enum import Enum

# Marker strings shown in table cells in place of a value.
NA_VALUE = "n/a"
UNKNOWN_VALUE = "<unknown>"
MISSING_VALUE = "<missing>"
ZERO_VALUE = "0"
INVALID_VALUE = "<invalid>"


class OutcomeKind(Enum):
    OK = "ok"
    UNSET = "unset"
    MALFORMED = "malformed"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Outcome:
    """
    Result of a formatting step before it is turned into cell text.

    Keeps "unset", "malformed" and "unavailable" apart so callers can branch
    on the kind instead of comparing rendered marker strings.
    """
    kind: OutcomeKind
    value: str = ""

    @classmethod
    def ok(cls, value: str) -> "Outcome":
        return cls(OutcomeKind.OK, value)

    @classmethod
    def unset(cls) -> "Outcome":
        return cls(OutcomeKind.UNSET)

    @classmethod
    def malformed(cls) -> "Outcome":
        return cls(OutcomeKind.MALFORMED)

    @classmethod
    def unavailable(cls) -> "Outcome":
        return cls(OutcomeKind.UNAVAILABLE)

    @property
    def is_ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    def render(self, unset: str = UNKNOWN_VALUE) -> str:
        """Render to cell text. `unset` picks the marker for unset fields."""
        if self.kind is OutcomeKind.OK:
            return self.value
        if self.kind is OutcomeKind.UNSET:
            return unset
        return NA_VALUE
