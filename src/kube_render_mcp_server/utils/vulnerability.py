from collections.abc import Mapping
from typing import Protocol

from kube_render_mcp_server.utils.sentinels import Outcome


class ImageScorer(Protocol):
    """Image vulnerability scanner as seen from the render layer."""

    def is_initialized(self) -> bool: ...

    def should_exclude(self, namespace: str, labels: Mapping[str, str]) -> bool: ...

    def enqueue(self, *images: str) -> None: ...

    def score(self, *images: str) -> str: ...


class NoopScorer:
    """Scorer used when no scanner is configured. Never initialized."""

    def is_initialized(self) -> bool:
        return False

    def should_exclude(self, namespace: str, labels: Mapping[str, str]) -> bool:
        return True

    def enqueue(self, *images: str) -> None:
        pass

    def score(self, *images: str) -> str:
        return ""


def extract_images(spec: Mapping) -> list[str]:
    """Return the images of a pod spec's regular containers."""
    return [c.get("image", "") for c in spec.get("containers") or []]


def vul_score_outcome(
    namespace: str,
    labels: Mapping[str, str],
    spec: Mapping,
    scorer: ImageScorer | None = None,
) -> Outcome:
    if scorer is None or not scorer.is_initialized() or scorer.should_exclude(namespace, labels):
        return Outcome.unavailable()

    images = extract_images(spec)
    # Scans run in the background; score() returns whatever is known right now.
    scorer.enqueue(*images)
    return Outcome.ok(scorer.score(*images))


def compute_vul_score(
    namespace: str,
    labels: Mapping[str, str],
    spec: Mapping,
    scorer: ImageScorer | None = None,
) -> str:
    """Vulnerability score of a pod's images, n/a when no scanner is usable."""
    return vul_score_outcome(namespace, labels, spec, scorer).render()
