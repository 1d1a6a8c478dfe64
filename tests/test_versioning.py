"""
Tests for versiongate.versioning module.

Tests version parsing and comparison including:
- Component-wise numeric ordering
- Zero-padding of shorter versions
- Rejection of malformed version strings
- Ordering properties (reflexive, antisymmetric, transitive)
"""

from __future__ import annotations

import itertools

import pytest

from versiongate.exceptions import InvalidVersionFormat
from versiongate.versioning import (
    SemanticVersion,
    compare_versions,
    is_less_than,
    is_valid_version,
)


class TestVersionComparison:
    """Tests for compare_versions()."""

    def test_basic_comparison(self):
        """Test basic three-part comparison."""
        assert compare_versions("1.2.0", "1.1.9") == 1  # newer
        assert compare_versions("1.1.9", "1.2.0") == -1  # older
        assert compare_versions("1.2.0", "1.2.0") == 0  # equal

    def test_major_minor_patch(self):
        """Test that components compare numerically, not lexically."""
        assert compare_versions("2.0.0", "1.9.9") == 1
        assert compare_versions("1.10.0", "1.9.0") == 1
        assert compare_versions("1.0.10", "1.0.9") == 1

    def test_shorter_version_is_zero_padded(self):
        """Test that 1.2.3 equals 1.2.3.0 and 1.2.3.0.0."""
        assert compare_versions("1.2.3", "1.2.3.0") == 0
        assert compare_versions("1.2.3.0.0", "1.2.3") == 0
        assert compare_versions("1.2.3", "1.2.3.1") == -1
        assert compare_versions("1.2.4", "1.2.3.9") == 1

    def test_leading_zeros_are_numeric(self):
        """Test that 01 and 1 are the same component."""
        assert compare_versions("1.02.3", "1.2.3") == 0

    def test_accepts_semantic_version_objects(self):
        """Test that parsed versions and strings can be mixed."""
        assert compare_versions(SemanticVersion.parse("2.4.5"), "2.4.4") == 1

    def test_is_less_than(self):
        """Test that equality never counts as less than."""
        assert is_less_than("2.0.0", "2.4.5")
        assert not is_less_than("2.4.5", "2.4.5")
        assert not is_less_than("2.4.5.0", "2.4.5")
        assert not is_less_than("3.0.0", "2.4.5")

    def test_invalid_version_raises(self):
        """Test that an invalid operand raises InvalidVersionFormat."""
        with pytest.raises(InvalidVersionFormat):
            compare_versions("2.0", "2.0.0")


class TestOrderingProperties:
    """Tests for the total order over a sample of versions."""

    SAMPLE = ["0.0.1", "1.0.0", "1.0.0.0", "1.2.3", "1.2.10", "2.0.0", "2.0.0.1"]

    def test_reflexive(self):
        """Test compare(a, a) == 0."""
        for a in self.SAMPLE:
            assert compare_versions(a, a) == 0

    def test_antisymmetric(self):
        """Test compare(a, b) == -compare(b, a)."""
        for a, b in itertools.product(self.SAMPLE, repeat=2):
            assert compare_versions(a, b) == -compare_versions(b, a)

    def test_transitive(self):
        """Test a < b and b < c implies a < c."""
        for a, b, c in itertools.product(self.SAMPLE, repeat=3):
            if compare_versions(a, b) < 0 and compare_versions(b, c) < 0:
                assert compare_versions(a, c) < 0


class TestSemanticVersion:
    """Tests for the SemanticVersion value type."""

    def test_parse_keeps_text(self):
        """Test that the original text is preserved."""
        v = SemanticVersion.parse("2.4.5.0")
        assert v.text == "2.4.5.0"
        assert v.components == (2, 4, 5, 0)
        assert str(v) == "2.4.5.0"

    def test_rich_comparisons(self):
        """Test comparison operators."""
        a = SemanticVersion.parse("1.2.3")
        b = SemanticVersion.parse("1.2.4")
        assert a < b
        assert a <= b
        assert b > a
        assert b >= a
        assert a != b

    def test_equality_and_hash_follow_padding(self):
        """Test that padded-equal versions are equal and hash alike."""
        a = SemanticVersion.parse("1.2.3")
        b = SemanticVersion.parse("1.2.3.0")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_not_equal_to_string(self):
        """Test that a version does not compare equal to its text."""
        assert SemanticVersion.parse("1.2.3") != "1.2.3"

    def test_immutable(self):
        """Test that a parsed version cannot be modified."""
        v = SemanticVersion.parse("1.2.3")
        with pytest.raises(AttributeError):
            v.text = "9.9.9"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "2.0",
            "1",
            "1.2.-3",
            "1..3",
            "1.2.3.",
            "a.b.c",
            "1.2.3-beta",
            " 1.2.3",
            "+1.2.3",
            "v1.2.3",
        ],
    )
    def test_invalid_formats_rejected(self, text):
        """Test that malformed strings raise InvalidVersionFormat."""
        with pytest.raises(InvalidVersionFormat):
            SemanticVersion.parse(text)
        assert is_valid_version(text) is False

    def test_non_string_rejected(self):
        """Test that non-string input raises InvalidVersionFormat."""
        with pytest.raises(InvalidVersionFormat):
            SemanticVersion.parse(None)  # type: ignore[arg-type]

    def test_invalid_version_is_value_error(self):
        """Test that InvalidVersionFormat can be caught as ValueError."""
        with pytest.raises(ValueError):
            SemanticVersion.parse("2.0")

    def test_is_valid_version(self):
        """Test is_valid_version on good input."""
        assert is_valid_version("1.2.3")
        assert is_valid_version("10.20.30.40")
