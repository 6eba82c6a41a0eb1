"""Tests for byte humanization, decimal scaling and ratio annotation."""

import pytest

from kube_render_mcp_server.utils.formatting import (
    decimal,
    decimal_pct,
    format_mebibytes,
    format_millicores,
    format_units,
    humanize_bytes,
    mem_pct,
    parse_quantity,
    to_bytes,
    to_millicores,
)


class TestHumanizeBytes:
    """Tests for humanize_bytes."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0"),
            (7, "7 B"),
            (9, "9 B"),
            (10, "10"),
            (1023, "1023"),
            (1024, "1K"),
            (1100, "1.1K"),
            (1536, "1.5K"),
            (10240, "10K"),
            (512 * 1024 * 1024, "512M"),
            (1073741824, "1G"),
            (1024**6, "1E"),
            (2**63 - 1, "8E"),
        ],
    )
    def test_values(self, size, expected):
        """Known sizes pick the expected unit and precision."""
        assert humanize_bytes(size) == expected

    def test_output_is_short(self):
        """Non-zero sizes always render in 2 to 6 characters."""
        for size in [1, 9, 10, 99, 1000, 1023, 1025, 99999, 1048575, 10**9, 10**12, 10**15, 2**62]:
            out = humanize_bytes(size)
            assert 2 <= len(out) <= 6, (size, out)

    def test_negative_raises(self):
        """Negative byte counts are rejected."""
        with pytest.raises(ValueError):
            humanize_bytes(-1)

    def test_beyond_exabytes_raises(self):
        """Sizes past the last unit are rejected instead of mislabelled."""
        with pytest.raises(OverflowError):
            humanize_bytes(1024**7)


class TestDecimal:
    """Tests for decimal."""

    @pytest.mark.parametrize(
        "v,expected",
        [
            (0, "0"),
            (5, "0"),
            (-500, "0"),
            (10, ".01"),
            (50, ".05"),
            (100, ".1"),
            (500, ".5"),
            (550, ".55"),
            (999, "1"),
            (1000, "1"),
            (1500, "1.5"),
            (2000, "2"),
            (9999, "10"),
            (12345, "12"),
        ],
    )
    def test_values(self, v, expected):
        """Precision shrinks as the magnitude grows."""
        assert decimal(v) == expected

    def test_monotonic(self):
        """The value implied by the output never decreases."""
        previous = 0.0
        for v in range(0, 30000, 3):
            current = float(decimal(v))
            assert current >= previous, (v, decimal(v))
            previous = current


class TestRatios:
    """Tests for mem_pct and decimal_pct."""

    def test_mem_pct(self):
        """Used and limit bytes are humanized with a percentage."""
        assert mem_pct(512 * 1024 * 1024, 1024**3) == "512M/1G(50%)"

    def test_mem_pct_without_limit(self):
        """No limit falls back to the used value alone."""
        assert mem_pct(1536, 0) == "1.5K"
        assert mem_pct(1536, -1) == "1.5K"

    def test_mem_pct_zero_used(self):
        """Zero usage keeps the zero marker on the used side."""
        assert mem_pct(0, 1024) == "0/1K(0%)"

    def test_decimal_pct(self):
        """Used and limit millicores are scaled with a percentage."""
        assert decimal_pct(250, 1000) == ".25/1(25%)"

    def test_decimal_pct_without_limit(self):
        """No limit degrades to the plain decimal value."""
        assert decimal_pct(50, 0) == decimal(50)

    def test_over_limit_is_not_clamped(self):
        """Percentages above 100 are shown as is."""
        assert decimal_pct(1500, 1000) == "1.5/1(150%)"

    def test_percentage_rounds(self):
        """The percentage rounds to the nearest integer."""
        assert decimal_pct(2000, 3000).endswith("(67%)")


class TestZeroPolicies:
    """Tests for the raw-quantity formatters and their zero handling."""

    def test_units_zero_is_na(self):
        assert format_units(0) == "n/a"
        assert format_units(3) == "3"

    def test_millicores_zero_is_zero_marker(self):
        assert format_millicores(0) == "0"
        assert format_millicores(250) == "250"

    def test_mebibytes(self):
        assert format_mebibytes(0) == "0"
        assert format_mebibytes(3 * 2**20) == "3"
        assert format_mebibytes(2**20 - 1) == "0"


class TestParseQuantity:
    """Tests for Kubernetes quantity parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("500m", 0.5),
            ("1Gi", 2**30),
            ("2k", 2000),
            ("1M", 10**6),
            ("1.5", 1.5),
            ("", 0.0),
            ("abc", 0.0),
            ("nan", 0.0),
            ("inf", 0.0),
            ("1e400", 0.0),
            ("1e300Ei", 0.0),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_quantity(value) == expected

    def test_to_millicores(self):
        assert to_millicores("250m") == 250
        assert to_millicores("2") == 2000

    def test_to_millicores_out_of_range(self):
        """Quantities too large to scale count as zero."""
        assert to_millicores("1e308") == 0
        assert to_millicores("nan") == 0

    def test_to_bytes(self):
        assert to_bytes("1Ki") == 1024
        assert to_bytes("256Mi") == 256 * 2**20
