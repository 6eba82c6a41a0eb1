import json
import logging

from kube_render_mcp_server.utils.age import to_age_human
from kube_render_mcp_server.utils.formatting import decimal_pct, mem_pct, to_bytes, to_millicores
from kube_render_mcp_server.utils.labels import as_selector, map_to_str
from kube_render_mcp_server.utils.layout import pad

logger = logging.getLogger("kube-render-mcp-server")


async def format_memory(used_bytes: int, limit_bytes: int = 0) -> str:
    """
    Format a memory value for a table cell, e.g. "1.5G/4G(38%)".

    Args:
        used_bytes: Bytes in use.
        limit_bytes: Memory limit in bytes; 0 or less means no limit.
    """
    try:
        return mem_pct(used_bytes, limit_bytes)
    except (ValueError, OverflowError) as e:
        return f"❌ Cannot format memory: {e}"


async def format_cpu(used_millicores: int, limit_millicores: int = 0) -> str:
    """
    Format a CPU value for a table cell, e.g. ".25/1(25%)".

    Args:
        used_millicores: CPU in use, in millicores.
        limit_millicores: CPU limit in millicores; 0 or less means no limit.
    """
    return decimal_pct(used_millicores, limit_millicores)


async def format_quantity(quantity: str, kind: str = "memory") -> str:
    """
    Format a Kubernetes quantity string (e.g. "500m", "256Mi") for a table cell.

    Args:
        quantity: The quantity as it appears in a manifest.
        kind: "cpu" or "memory".
    """
    if kind == "cpu":
        return decimal_pct(to_millicores(quantity), 0)
    if kind == "memory":
        try:
            return mem_pct(to_bytes(quantity), 0)
        except (ValueError, OverflowError) as e:
            return f"❌ Cannot format quantity {quantity!r}: {e}"
    return f"❌ Unknown quantity kind {kind!r} (expected 'cpu' or 'memory')"


async def format_labels(labels_json: str) -> str:
    """
    Format a label or annotation map as a stable, sorted "k=v,k=v" string.

    Args:
        labels_json: JSON object of string keys to string values.
    """
    try:
        labels = json.loads(labels_json) if labels_json.strip() else {}
    except json.JSONDecodeError as e:
        return f"❌ Invalid labels JSON: {e}"
    if not isinstance(labels, dict):
        return "❌ Labels must be a JSON object"
    bad = sorted(k for k, v in labels.items() if not isinstance(v, str))
    if bad:
        return f"❌ Label values must be strings: {', '.join(bad)}"
    return map_to_str(labels)


async def format_selector(selector_json: str) -> str:
    """
    Format a label selector (matchLabels/matchExpressions) in its string form,
    e.g. "app=web,tier in (backend,frontend)". Invalid selectors render n/a.

    Args:
        selector_json: JSON of a Kubernetes LabelSelector.
    """
    try:
        selector = json.loads(selector_json) if selector_json.strip() else None
    except json.JSONDecodeError as e:
        return f"❌ Invalid selector JSON: {e}"
    return as_selector(selector)


async def format_age(timestamp: str) -> str:
    """
    Format an RFC3339 timestamp as an age, e.g. "3d" or "5h12m".

    Args:
        timestamp: e.g. "2024-05-01T10:00:00Z".
    """
    return to_age_human(timestamp)


async def fit_cell(text: str, width: int) -> str:
    """
    Pad or truncate text to an exact column width (wide glyphs count as two).

    Returns:
        The fitted text between "|" markers so trailing spaces stay visible.
    """
    return f"|{pad(text, width)}|"
