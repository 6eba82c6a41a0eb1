import re
from collections.abc import Mapping

_NAME_RE = re.compile(r"^[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$")
_DNS_SUBDOMAIN_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")
_MAX_NAME_LEN = 63
_MAX_PREFIX_LEN = 253

OP_IN = "In"
OP_NOT_IN = "NotIn"
OP_EXISTS = "Exists"
OP_DOES_NOT_EXIST = "DoesNotExist"


class SelectorError(Exception):
    """Raised when a label selector cannot be converted to its string form."""
    pass


def _validate_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise SelectorError(f"invalid label key {key!r}: must be a non-empty string")

    prefix, _, name = key.rpartition("/")
    if "/" in key and (not prefix or len(prefix) > _MAX_PREFIX_LEN or not _DNS_SUBDOMAIN_RE.match(prefix)):
        raise SelectorError(f"invalid label key {key!r}: prefix must be a DNS subdomain")
    if len(name) > _MAX_NAME_LEN or not _NAME_RE.match(name):
        raise SelectorError(
            f"invalid label key {key!r}: name must be 63 characters or less, "
            "begin and end with an alphanumeric character"
        )


def _validate_value(key: str, value: str) -> None:
    if not isinstance(value, str):
        raise SelectorError(f"invalid label value for {key!r}: {value!r} is not a string")
    if value and (len(value) > _MAX_NAME_LEN or not _NAME_RE.match(value)):
        raise SelectorError(f"invalid label value {value!r} for key {key!r}")


def _requirement(expr: Mapping) -> tuple[str, str]:
    if not isinstance(expr, Mapping):
        raise SelectorError(f"match expression must be an object, got {type(expr).__name__}")

    key = expr.get("key", "")
    operator = expr.get("operator", "")
    values = expr.get("values") or []
    _validate_key(key)
    if not isinstance(values, list):
        raise SelectorError(f"values for key {key!r} must be a list")

    if operator in (OP_IN, OP_NOT_IN):
        if not values:
            raise SelectorError(f"values: must be specified when operator is {operator!r} (key {key!r})")
        for v in values:
            _validate_value(key, v)
        word = "in" if operator == OP_IN else "notin"
        return key, f"{key} {word} ({','.join(sorted(set(values)))})"

    if operator in (OP_EXISTS, OP_DOES_NOT_EXIST):
        if values:
            raise SelectorError(f"values: must be empty when operator is {operator!r} (key {key!r})")
        return key, key if operator == OP_EXISTS else f"!{key}"

    raise SelectorError(f"{operator!r} is not a valid label selector operator")


def compile_selector(selector: Mapping | None) -> str:
    """
    Convert a structured label selector into its canonical string form.

    Accepts the serialized shape of a Kubernetes LabelSelector:
    {"matchLabels": {...}, "matchExpressions": [{"key", "operator", "values"}]}.
    Requirements are sorted by key, e.g. "app=web,tier in (be,fe),!canary".

    Raises:
        SelectorError: If the selector, a key, a value or an operator is invalid.
    """
    if selector is None:
        return ""
    if not isinstance(selector, Mapping):
        raise SelectorError(f"label selector must be an object, got {type(selector).__name__}")

    match_labels = selector.get("matchLabels") or {}
    match_expressions = selector.get("matchExpressions") or []
    if not isinstance(match_labels, Mapping):
        raise SelectorError("matchLabels must be an object")
    if not isinstance(match_expressions, list):
        raise SelectorError("matchExpressions must be a list")

    requirements = []
    for key, value in match_labels.items():
        _validate_key(key)
        _validate_value(key, value)
        requirements.append((key, f"{key}={value}"))
    for expr in match_expressions:
        requirements.append(_requirement(expr))

    requirements.sort(key=lambda r: r[0])
    return ",".join(text for _, text in requirements)
