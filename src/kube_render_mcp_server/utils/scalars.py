import humanize

from kube_render_mcp_server.utils.sentinels import MISSING_VALUE, NA_VALUE


def as_thousands(n: int) -> str:
    """Print a number with thousands separators (e.g. 1,234,567)."""
    return humanize.intcomma(int(n))


def as_status(err: BaseException | None) -> str:
    """Return an error as a status string, empty when there is none."""
    if err is None:
        return ""
    return str(err)


def as_perc(p: str) -> str:
    return f"({p})"


def print_perc(p: int) -> str:
    return f"{p}%"


def int_to_str(p: int) -> str:
    return str(p)


def check(s: str, sub: str) -> str:
    """Substitute `sub` for an empty string."""
    if s == "":
        return sub
    return s


def na(s: str) -> str:
    return check(s, NA_VALUE)


def missing(s: str) -> str:
    return check(s, MISSING_VALUE)


def na_strings(ss: list[str]) -> str:
    if not ss:
        return NA_VALUE
    return ",".join(ss)


def blank(ss: list[str]) -> bool:
    """True when the collection is empty or every entry is blank."""
    return all(s == "" for s in ss)


def join(ss: list[str], sep: str) -> str:
    """
    Join strings, skipping blank entries.

    A single-element list is returned as is, blank or not.
    """
    if not ss:
        return ""
    if len(ss) == 1:
        return ss[0]
    return sep.join(s for s in ss if s != "")


def bool_to_str(b: bool) -> str:
    return "true" if b else "false"


def optional_bool_to_str(b: bool | None) -> str:
    if b is None:
        return "false"
    return bool_to_str(b)


def optional_str(s: str | None) -> str:
    if s is None:
        return ""
    return s


def digits_to_num(digits: str) -> int:
    """Convert a run of decimal digits to its integer value ("" is 0)."""
    n = 0
    for ch in digits:
        n = n * 10 + (ord(ch) - ord("0"))
    return n
