import json
import logging
from collections.abc import Mapping
from datetime import datetime

from kube_render_mcp_server.utils.age import to_age_human
from kube_render_mcp_server.utils.formatting import decimal_pct, mem_pct, to_bytes, to_millicores
from kube_render_mcp_server.utils.labels import map_to_str
from kube_render_mcp_server.utils.layout import pad
from kube_render_mcp_server.utils.scalars import as_thousands, na_strings
from kube_render_mcp_server.utils.sentinels import NA_VALUE
from kube_render_mcp_server.utils.vulnerability import ImageScorer, compute_vul_score, extract_images

logger = logging.getLogger("kube-render-mcp-server")

# (header, column width)
POD_COLUMNS = [
    ("NAMESPACE", 16),
    ("NAME", 32),
    ("READY", 5),
    ("RESTARTS", 8),
    ("CPU", 14),
    ("MEM", 16),
    ("IMAGES", 30),
    ("LABELS", 30),
    ("VS", 6),
    ("AGE", 8),
]
COLUMN_SEP = " "


def _items(doc: object) -> list[dict]:
    """Accept a List object, a bare JSON array or a single object."""
    if isinstance(doc, list):
        return doc
    if isinstance(doc, Mapping):
        if "items" in doc:
            return doc.get("items") or []
        return [doc]
    raise ValueError(f"expected a JSON object or array, got {type(doc).__name__}")


def _key(obj: Mapping) -> tuple[str, str]:
    meta = obj.get("metadata", {})
    return meta.get("namespace", ""), meta.get("name", "")


def index_metrics(metrics: list[dict]) -> dict[tuple[str, str], tuple[int, int]]:
    """Sum PodMetrics container usage into (millicores, bytes) per pod."""
    usage = {}
    for pm in metrics:
        cpu = mem = 0
        for c in pm.get("containers", []):
            u = c.get("usage", {})
            cpu += to_millicores(u.get("cpu", "0"))
            mem += to_bytes(u.get("memory", "0"))
        usage[_key(pm)] = (cpu, mem)
    return usage


def pod_limits(spec: Mapping) -> tuple[int, int]:
    """
    Sum container limits as (millicores, bytes).

    A resource is unbounded (0) as soon as one container leaves it unlimited.
    """
    cpu = mem = 0
    cpu_bounded = mem_bounded = True
    for c in spec.get("containers", []):
        limits = c.get("resources", {}).get("limits", {})
        if "cpu" in limits:
            cpu += to_millicores(limits["cpu"])
        else:
            cpu_bounded = False
        if "memory" in limits:
            mem += to_bytes(limits["memory"])
        else:
            mem_bounded = False
    return (cpu if cpu_bounded else 0), (mem if mem_bounded else 0)


def pod_row(
    pod: Mapping,
    usage: tuple[int, int] | None = None,
    scorer: ImageScorer | None = None,
    now: datetime | None = None,
) -> list[str]:
    """Render one pod into unpadded cell strings, in POD_COLUMNS order."""
    meta = pod.get("metadata", {})
    spec = pod.get("spec", {})
    statuses = pod.get("status", {}).get("containerStatuses", [])
    namespace = meta.get("namespace", "")
    labels = meta.get("labels") or {}

    ready = sum(1 for s in statuses if s.get("ready"))
    restarts = sum(s.get("restartCount", 0) for s in statuses)

    if usage is None:
        cpu = mem = NA_VALUE
    else:
        cpu_limit, mem_limit = pod_limits(spec)
        cpu = decimal_pct(usage[0], cpu_limit)
        mem = mem_pct(usage[1], mem_limit)

    return [
        namespace,
        meta.get("name", ""),
        f"{ready}/{len(spec.get('containers', []))}",
        as_thousands(restarts),
        cpu,
        mem,
        na_strings(extract_images(spec)),
        map_to_str(labels),
        compute_vul_score(namespace, labels, spec, scorer),
        to_age_human(meta.get("creationTimestamp", ""), now),
    ]


def render_rows(
    pods: list[dict],
    metrics: list[dict] | None = None,
    scorer: ImageScorer | None = None,
    now: datetime | None = None,
) -> list[str]:
    """Render a header line plus one fixed-width line per pod."""
    usage = index_metrics(metrics) if metrics is not None else {}
    lines = [COLUMN_SEP.join(pad(h, w) for h, w in POD_COLUMNS)]
    for pod in sorted(pods, key=_key):
        u = usage.get(_key(pod)) if metrics is not None else None
        cells = pod_row(pod, u, scorer, now)
        lines.append(COLUMN_SEP.join(pad(c, w) for c, (_, w) in zip(cells, POD_COLUMNS)))
    return lines


async def render_pod_table(pods_json: str, metrics_json: str = "") -> str:
    """
    Render pods as a fixed-width text table (NAMESPACE, NAME, READY, RESTARTS,
    CPU, MEM, IMAGES, LABELS, VS, AGE).

    Why:
    - Stable snapshots: labels are sorted and every cell has an exact width.
    - Compact resources: CPU/MEM show used/limit(pct%) when metrics are given.

    Args:
        pods_json: Output of `kubectl get pods -o json` (a List, array or single Pod).
        metrics_json: Optional `kubectl get podmetrics -o json` output.

    Returns:
        The table inside a code block.
    """
    try:
        pods = _items(json.loads(pods_json))
        metrics = _items(json.loads(metrics_json)) if metrics_json.strip() else None
    except (json.JSONDecodeError, ValueError) as e:
        return f"❌ Invalid input JSON: {e}"

    if metrics is None:
        logger.debug("No pod metrics given, CPU/MEM columns will show n/a")

    try:
        lines = render_rows(pods, metrics)
    except (AttributeError, TypeError, ValueError, OverflowError) as e:
        logger.warning(f"Could not render pods: {e}")
        return f"❌ Error rendering pod table: {e}"

    return f"### Pods ({len(pods)})\n\n```\n" + "\n".join(lines) + "\n```"
