from rich.cells import cell_len

ELLIPSIS = "…"


def truncate(s: str, width: int) -> str:
    """
    Truncate a string to `width` terminal cells, ending with an ellipsis if cut.

    Width is measured in rendered cells, so wide glyphs (CJK, emoji) count as two.
    """
    if width <= 0:
        return ""
    if cell_len(s) <= width:
        return s

    budget = width - cell_len(ELLIPSIS)
    used = 0
    out = []
    for ch in s:
        w = cell_len(ch)
        if used + w > budget:
            break
        out.append(ch)
        used += w
    return "".join(out) + ELLIPSIS


def pad(s: str, width: int) -> str:
    """Pad a string with spaces up to `width` cells, truncating if it is wider."""
    w = cell_len(s)
    if w == width:
        return s
    if w > width:
        s = truncate(s, width)
        w = cell_len(s)
    return s + " " * max(width - w, 0)
