import logging
from collections.abc import Mapping

from kube_render_mcp_server.utils.selectors import SelectorError, compile_selector
from kube_render_mcp_server.utils.sentinels import Outcome

logger = logging.getLogger("kube-render-mcp-server")


def map_to_str(m: Mapping[str, str] | None) -> str:
    """Render labels/annotations as sorted "k=v" pairs joined by commas."""
    if not m:
        return ""
    return ",".join(f"{k}={m[k]}" for k in sorted(m))


def map_to_ifc(m: object) -> str:
    """
    Render a loosely typed map (e.g. decoded JSON) as sorted "k=v" pairs
    joined by spaces.

    Anything that is not a mapping renders empty. Entries whose value is not
    a plain string are skipped.
    """
    if not isinstance(m, Mapping) or not m:
        return ""

    pairs = []
    for k in sorted(m):
        v = m[k]
        if not isinstance(v, str):
            continue
        pairs.append(f"{k}={v}")
    return " ".join(pairs)


def to_selector(m: Mapping[str, str] | None) -> str:
    """Flatten a match-labels map to a selector string."""
    return map_to_str(m)


def selector_outcome(selector: Mapping | None) -> Outcome:
    try:
        return Outcome.ok(compile_selector(selector))
    except SelectorError as e:
        logger.error(f"Selector conversion failed: {e}")
        return Outcome.malformed()


def as_selector(selector: Mapping | None) -> str:
    """Structured label selector to its string form, n/a when it cannot be converted."""
    return selector_outcome(selector).render()
