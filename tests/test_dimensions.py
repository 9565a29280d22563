"""
Tests for dimension parsing and selection.
"""
import random

import pytest

from badge_gen.core.dimensions import (
    DEFAULT_DIMENSION,
    Dimension,
    MalformedDimensionSpec,
    parse_dimension,
    randomize_dimensions,
)

SUPPORTED = [
    Dimension(768, 1344),
    Dimension(640, 1536),
    Dimension(1024, 1024),
]


class TestParseDimension:
    """Test WxH parsing."""

    @pytest.mark.parametrize("spec,expected", [
        ("900x800", Dimension(900, 800)),
        ("1x1", Dimension(1, 1)),
        ("2100x1500", Dimension(2100, 1500)),
    ])
    def test_valid_specs(self, spec, expected):
        """Test valid strings parse to the exact integers."""
        assert parse_dimension(spec) == expected

    @pytest.mark.parametrize("spec", ["x800", "900x", "900", "abcx100", "", "0x100", "900by800"])
    def test_malformed_specs(self, spec):
        """Test every malformed input fails the same way and names the input."""
        with pytest.raises(MalformedDimensionSpec) as excinfo:
            parse_dimension(spec)

        message = str(excinfo.value)
        assert f"Invalid dimension format: {spec}." in message
        assert "Expected format: WxH" in message

    def test_malformed_is_value_error(self):
        """Test callers can catch it as ValueError."""
        with pytest.raises(ValueError):
            parse_dimension("nope")

    def test_str_round_trip(self):
        """Test a Dimension prints back as WxH."""
        assert str(parse_dimension("768x1344")) == "768x1344"


class TestRandomizeDimensions:
    """Test closest-area selection among supported sizes."""

    def test_result_is_supported_portrait(self):
        """Test results are always supported portrait-or-square sizes."""
        rng = random.Random(42)
        for _ in range(200):
            result = randomize_dimensions("900x800", "2100x1500", SUPPORTED, rng)
            assert result in SUPPORTED
            assert result.height >= result.width

    def test_empty_supported_returns_default(self):
        """Test empty supported list falls back to 1024x1024."""
        result = randomize_dimensions("100x100", "5000x5000", [])
        assert result == DEFAULT_DIMENSION == Dimension(1024, 1024)

    def test_only_landscape_returns_first(self):
        """Test non-portrait supported sizes fall back to the first entry."""
        landscape = [Dimension(1344, 768), Dimension(1536, 640)]
        result = randomize_dimensions("900x800", "2100x1500", landscape)
        assert result == Dimension(1344, 768)

    def test_landscape_entries_are_skipped(self):
        """Test landscape sizes are never chosen when a portrait one exists."""
        mixed = [Dimension(2000, 1000), Dimension(640, 1536)]
        result = randomize_dimensions("1900x900", "1900x900", mixed)
        assert result == Dimension(640, 1536)

    def test_closest_area_wins(self):
        """Test the size nearest in area to the draw is selected."""
        # Area 1,000,000: gaps 32,192 / 16,960 / 48,576
        result = randomize_dimensions("1000x1000", "1000x1000", SUPPORTED)
        assert result == Dimension(640, 1536)

    def test_exact_area_match_wins(self):
        """Test a draw equal to a supported size selects that size."""
        result = randomize_dimensions("1024x1024", "1024x1024", SUPPORTED)
        assert result == Dimension(1024, 1024)

    def test_ties_keep_first(self):
        """Test equal-area candidates resolve to the first in order."""
        tied = [Dimension(500, 800), Dimension(400, 1000)]
        result = randomize_dimensions("20x20000", "20x20000", tied)
        assert result == Dimension(500, 800)

    def test_malformed_bounds_raise(self):
        """Test malformed bounds raise before any selection."""
        with pytest.raises(MalformedDimensionSpec):
            randomize_dimensions("900", "2100x1500", SUPPORTED)

    def test_draw_uses_inclusive_bounds(self):
        """Test the random draw stays within both bounds."""
        class RecordingRandom(random.Random):
            def __init__(self):
                super().__init__(7)
                self.calls = []

            def randint(self, a, b):
                self.calls.append((a, b))
                return super().randint(a, b)

        rng = RecordingRandom()
        randomize_dimensions("900x800", "2100x1500", SUPPORTED, rng)
        assert rng.calls == [(900, 2100), (800, 1500)]
