"""
Unit tests for number formatting and the default labeler.
"""

import pytest
import numpy as np
from plotscale.formatting import default_labeler, format_numbers


class TestDefaultLabeler:
    """Tests for the default_labeler function."""

    def test_empty_sequence(self):
        """Empty sequences should return empty list."""
        result = default_labeler([])
        assert result == []

    def test_integers(self):
        """Integers should be formatted without decimal points."""
        result = default_labeler([1, 2, 3, 4, 5])
        assert result == ["1", "2", "3", "4", "5"]

    def test_floats_with_matching_precision(self):
        """Floats should be formatted with matching precision."""
        result = default_labeler([1.1, 2.2, 3.3, 4.4, 5.5])
        assert result == ["1.1", "2.2", "3.3", "4.4", "5.5"]

    def test_mixed_precision_numbers(self):
        """Numbers with varying precision should use consistent precision."""
        result = default_labeler([1.0, 1.5, 1.23, 1.456, 1.789])
        decimals = [len(label.split(".")[1]) for label in result]
        assert decimals == [3, 3, 3, 3, 3]

    def test_small_decimals(self):
        """Small decimal numbers should be formatted appropriately."""
        result = default_labeler([0.1, 0.2, 0.3, 0.4, 0.5])
        assert result == ["0.1", "0.2", "0.3", "0.4", "0.5"]

    def test_strings(self):
        """String values should be passed through with str()."""
        result = default_labeler(["apple", "banana", "cherry"])
        assert result == ["apple", "banana", "cherry"]

    def test_mixed_types(self):
        """Mixed types should fall back to str() conversion."""
        result = default_labeler([1, "two", 3.0, None])
        assert result == ["1", "two", "3.0", "None"]

    def test_numpy_types(self):
        """Numpy numeric types should be formatted with precision."""
        result = default_labeler([np.float64(1.1), np.float64(2.2), np.float64(3.3)])
        assert result == ["1.1", "2.2", "3.3"]

    def test_precision_beyond_max_is_rounded(self):
        result = default_labeler([1.123456, 2.0])
        assert result == ["1.12346", "2.00000"]


class TestFormatNumbers:
    def test_trailing_zeros_removed(self):
        assert format_numbers([1.0, 2.0, 3.0]) == ["1", "2", "3"]

    def test_minimal_precision_preserved(self):
        assert format_numbers([1.0, 1.1, 1.2]) == ["1.0", "1.1", "1.2"]

    def test_negative_zero(self):
        assert format_numbers([-0.0, 1.0]) == ["0", "1"]

    def test_auto_switches_to_scientific_for_large_numbers(self):
        assert format_numbers([1e6, 2e6]) == ["1e6", "2e6"]

    def test_auto_switches_to_scientific_for_small_numbers(self):
        result = format_numbers([0.00001, 0.00002, 0.00003])
        assert result == ["1e-5", "2e-5", "3e-5"]

    def test_plain_keeps_large_numbers(self):
        assert format_numbers([1e6, 2e6], "plain") == ["1000000", "2000000"]

    def test_scientific_zero(self):
        assert format_numbers([0.0, 1e7], "scientific") == ["0", "1e7"]

    def test_engineering(self):
        result = format_numbers([1500.0, 25000.0], "engineering")
        assert result == ["1.5e3", "25.0e3"]

    def test_non_finite(self):
        result = format_numbers([1.0, np.nan, np.inf, -np.inf])
        assert result == ["1", "NaN", "∞", "-∞"]

    def test_none_format_means_auto(self):
        assert format_numbers([1.5, 2.5], None) == ["1.5", "2.5"]

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown number format"):
            format_numbers([1.0], "roman")
