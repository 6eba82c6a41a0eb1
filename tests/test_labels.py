"""Tests for label map serialization and label selectors."""

import itertools
import logging

import pytest

from kube_render_mcp_server.utils.labels import as_selector, map_to_ifc, map_to_str, selector_outcome, to_selector
from kube_render_mcp_server.utils.selectors import SelectorError, compile_selector
from kube_render_mcp_server.utils.sentinels import OutcomeKind


class TestMapToStr:
    """Tests for map_to_str."""

    def test_empty(self):
        assert map_to_str({}) == ""
        assert map_to_str(None) == ""

    def test_sorted(self):
        """Pairs are sorted by key."""
        assert map_to_str({"tier": "fe", "app": "web"}) == "app=web,tier=fe"

    def test_order_independent(self):
        """Every insertion order yields the same string."""
        pairs = [("b", "2"), ("a", "1"), ("c", "3"), ("a.io/x", "y")]
        outputs = {map_to_str(dict(p)) for p in itertools.permutations(pairs)}
        assert outputs == {"a=1,a.io/x=y,b=2,c=3"}

    def test_to_selector(self):
        assert to_selector({"b": "2", "a": "1"}) == "a=1,b=2"


class TestMapToIfc:
    """Tests for map_to_ifc."""

    def test_not_a_map(self):
        assert map_to_ifc(None) == ""
        assert map_to_ifc("a=b") == ""
        assert map_to_ifc({}) == ""

    def test_skips_non_strings(self):
        """Non-string values are left out without stray separators."""
        assert map_to_ifc({"b": "2", "a": 1, "c": "3", "d": {"x": "y"}}) == "b=2 c=3"


class TestCompileSelector:
    """Tests for compile_selector."""

    def test_empty(self):
        assert compile_selector(None) == ""
        assert compile_selector({}) == ""

    def test_match_labels_and_expressions(self):
        """Requirements are sorted by key and values within a set."""
        selector = {
            "matchLabels": {"app": "web"},
            "matchExpressions": [
                {"key": "tier", "operator": "In", "values": ["fe", "be"]},
                {"key": "env", "operator": "NotIn", "values": ["dev"]},
                {"key": "canary", "operator": "DoesNotExist"},
                {"key": "example.com/owner", "operator": "Exists"},
            ],
        }
        assert compile_selector(selector) == "app=web,!canary,env notin (dev),example.com/owner,tier in (be,fe)"

    @pytest.mark.parametrize(
        "selector",
        [
            "app=web",
            {"matchLabels": ["app"]},
            {"matchExpressions": [{"key": "a", "operator": "Like", "values": ["x"]}]},
            {"matchExpressions": [{"key": "a", "operator": "In", "values": []}]},
            {"matchExpressions": [{"key": "a", "operator": "Exists", "values": ["x"]}]},
            {"matchExpressions": ["a"]},
            {"matchExpressions": 5},
            {"matchExpressions": True},
            {"matchExpressions": {"key": "a", "operator": "Exists"}},
            {"matchLabels": {"-bad": "x"}},
            {"matchLabels": {"Bad.Prefix/app": "x"}},
            {"matchLabels": {"app": "has space"}},
        ],
    )
    def test_invalid(self, selector):
        with pytest.raises(SelectorError):
            compile_selector(selector)


class TestAsSelector:
    """Tests for as_selector."""

    def test_ok(self):
        assert as_selector({"matchLabels": {"app": "web"}}) == "app=web"

    def test_failure_is_na_and_logged(self, caplog):
        """A bad selector renders n/a and leaves an error record."""
        bad = {"matchExpressions": [{"key": "a", "operator": "Like"}]}
        with caplog.at_level(logging.ERROR, logger="kube-render-mcp-server"):
            assert as_selector(bad) == "n/a"
        assert "Selector conversion failed" in caplog.text

    def test_non_list_expressions_are_na(self):
        """A matchExpressions value that is not a list renders n/a."""
        assert as_selector({"matchExpressions": 5}) == "n/a"
        assert selector_outcome({"matchExpressions": True}).kind is OutcomeKind.MALFORMED

    def test_outcome_kind(self):
        bad = {"matchExpressions": [{"key": "a", "operator": "Like"}]}
        assert selector_outcome(bad).kind is OutcomeKind.MALFORMED
        assert selector_outcome(None).is_ok
