import re
from datetime import datetime, timedelta, timezone

from kube_render_mcp_server.utils.sentinels import INVALID_VALUE, Outcome, UNKNOWN_VALUE

_RFC3339_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)

# Largest first; each unit is followed by the next smaller one when non-zero.
_UNITS = [
    ("y", 365 * 24 * 3600),
    ("d", 24 * 3600),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
]


def human_duration(delta: timedelta) -> str:
    """
    Render a duration with its two largest units, e.g. 45s, 1m30s, 5h12m, 3d.

    Up to a second in the future is treated as clock skew and renders 0s.
    """
    seconds = int(delta.total_seconds())
    if seconds < -1:
        return INVALID_VALUE
    if seconds <= 0:
        return "0s"

    for i, (unit, size) in enumerate(_UNITS):
        if seconds < size:
            continue
        count, rest = divmod(seconds, size)
        out = f"{count}{unit}"
        if i + 1 < len(_UNITS):
            next_unit, next_size = _UNITS[i + 1]
            if rest // next_size:
                out += f"{rest // next_size}{next_unit}"
        return out


def _now(now: datetime | None) -> datetime:
    return _aware(now) if now is not None else datetime.now(timezone.utc)


def _aware(t: datetime) -> datetime:
    # Kubernetes timestamps are UTC
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t


def parse_rfc3339(s: str) -> datetime:
    """
    Parse an RFC3339 timestamp such as 2024-05-01T10:00:00Z.

    Fractions of any length are accepted and cut to microseconds.

    Raises:
        ValueError: If the string is not a complete RFC3339 date-time.
    """
    m = _RFC3339_RE.fullmatch(s)
    if not m:
        raise ValueError(f"not an RFC3339 timestamp: {s!r}")
    base, frac, offset = m.groups()
    frac = f".{frac[:6]:0<6}" if frac else ""
    offset = "+00:00" if offset in ("Z", "z") else offset
    return datetime.fromisoformat(f"{base.replace('t', 'T')}{frac}{offset}")


def age_outcome(t: datetime | None, now: datetime | None = None) -> Outcome:
    if t is None:
        return Outcome.unset()
    return Outcome.ok(human_duration(_now(now) - _aware(t)))


def age_human_outcome(s: str, now: datetime | None = None) -> Outcome:
    if s == "":
        return Outcome.unset()
    try:
        t = parse_rfc3339(s)
    except ValueError:
        return Outcome.malformed()
    return Outcome.ok(human_duration(_now(now) - t))


def to_age(t: datetime | None, now: datetime | None = None) -> str:
    """Age of a timestamp relative to now; <unknown> when unset."""
    return age_outcome(t, now).render(UNKNOWN_VALUE)


def to_age_human(s: str, now: datetime | None = None) -> str:
    """Age of an RFC3339 string; <unknown> when empty, n/a when unparseable."""
    return age_human_outcome(s, now).render(UNKNOWN_VALUE)
