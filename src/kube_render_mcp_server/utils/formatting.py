import logging
import math

from kube_render_mcp_server.utils.sentinels import NA_VALUE, ZERO_VALUE

logger = logging.getLogger("kube-render-mcp-server")

BYTE_BASE = 1024
BYTE_SIZES = ["", "K", "M", "G", "T", "P", "E"]
MEGABYTE = 1024 * 1024


def _humanate_bytes(size: int) -> str:
    if size < 10:
        return f"{size} B"

    # floor(log_1024(size)), exact for every integer size
    e = (size.bit_length() - 1) // 10
    if e >= len(BYTE_SIZES):
        raise OverflowError(f"{size} bytes is beyond the largest unit ({BYTE_SIZES[-1]})")

    val = math.floor(size / BYTE_BASE**e * 10 + 0.5) / 10
    val_str = f"{val:.1f}" if val < 10 else f"{val:.0f}"
    return val_str.removesuffix(".0") + BYTE_SIZES[e]


def humanize_bytes(size: int) -> str:
    """
    Format a byte count with a binary unit suffix (e.g. 1.5K, 1G, 7 B).

    Zero renders the zero marker. Negative counts are a caller bug.
    """
    if size == 0:
        return ZERO_VALUE
    if size < 0:
        raise ValueError(f"byte count must not be negative: {size}")
    return _humanate_bytes(int(size))


def decimal(v: int) -> str:
    """
    Format a quantity of thousandths (e.g. millicores) as a compact decimal.

    Precision shrinks as the value grows: .05, .5, 1.5, 15.
    """
    vf = max(v / 1e3, 0)
    if vf < 0.01:
        return "0"
    if vf < 1:
        s = f"{vf:.2f}"
        # 0.995 and up round to 1.00 and are handled by the next tier
        if s.startswith("0."):
            ret = "." + s[2:]
            if len(ret) == 3 and ret[1] != "0":
                ret = ret.removesuffix("0")
            return ret
    if vf < 10:
        return f"{vf:.1f}".removesuffix(".0")
    return f"{vf:.0f}"


def _pct(v: int, limit: int) -> str:
    return f"({v / limit * 100:.0f}%)"


def mem_pct(v: int, limit: int) -> str:
    """Render used/limit bytes with a percentage, or just `v` without a limit."""
    if limit <= 0:
        return humanize_bytes(v)
    return humanize_bytes(v) + "/" + humanize_bytes(limit) + _pct(v, limit)


def decimal_pct(v: int, limit: int) -> str:
    """Render used/limit thousandths with a percentage, or just `v` without a limit."""
    if limit <= 0:
        return decimal(v)
    return decimal(v) + "/" + decimal(limit) + _pct(v, limit)


def format_units(v: int) -> str:
    """Whole units; zero means not applicable."""
    if v == 0:
        return NA_VALUE
    return str(int(v))


def format_millicores(v: int) -> str:
    """Raw millicores; zero renders the zero marker."""
    if v == 0:
        return ZERO_VALUE
    return str(int(v))


def format_mebibytes(v: int) -> str:
    """Bytes as whole MiB; zero renders the zero marker."""
    if v == 0:
        return ZERO_VALUE
    return str(int(v) // MEGABYTE)


def _parse_quantity(value: str) -> float:
    try:
        if value.endswith('m'): # milli-cores
            return float(value[:-1]) / 1000.0

        # Binary prefixes (bytes)
        binary_suffixes = {
            'Ki': 2**10, 'Mi': 2**20, 'Gi': 2**30, 'Ti': 2**40, 'Pi': 2**50, 'Ei': 2**60
        }
        for suffix, multiplier in binary_suffixes.items():
            if value.endswith(suffix):
                return float(value[:-len(suffix)]) * multiplier

        decimal_suffixes = {
            'k': 10**3, 'M': 10**6, 'G': 10**9, 'T': 10**12, 'P': 10**15, 'E': 10**18
        }
        for suffix, multiplier in decimal_suffixes.items():
            if value.endswith(suffix):
                return float(value[:-len(suffix)]) * multiplier

        return float(value)
    except ValueError:
        return math.nan


def parse_quantity(value: str) -> float:
    """
    Parse kubernetes quantity string to float (cores or bytes).
    Handles m, k, M, G, T, P, E, Ki, Mi, Gi, Ti, Pi, Ei.

    Unparseable and non-finite quantities (nan, inf, 1e400) count as 0.
    """
    value = str(value).strip()
    if not value:
        return 0.0

    n = _parse_quantity(value)
    if not math.isfinite(n):
        logger.warning(f"Unparseable quantity: {value!r}")
        return 0.0
    return n


def to_millicores(value: str) -> int:
    """Kubernetes CPU quantity to millicores ("500m" -> 500, "2" -> 2000)."""
    mc = parse_quantity(value) * 1000
    if not math.isfinite(mc):
        logger.warning(f"Quantity out of range: {value!r}")
        return 0
    return round(mc)


def to_bytes(value: str) -> int:
    """Kubernetes memory quantity to bytes ("1Ki" -> 1024)."""
    return int(parse_quantity(value))
