"""
Tests for semantic version parsing, ordering and feature bands.
"""

import pytest

from sdkdoctor.core.models.version import InvalidVersion, SemanticVersion, feature_band


class TestParse:
    def test_three_part(self):
        v = SemanticVersion.parse("6.0.100")
        assert (v.major, v.minor, v.patch, v.revision) == (6, 0, 100, 0)
        assert not v.is_prerelease

    def test_four_part(self):
        v = SemanticVersion.parse("1.2.3.4")
        assert v.revision == 4
        assert str(v) == "1.2.3.4"

    def test_prerelease_and_metadata(self):
        v = SemanticVersion.parse("6.0.100-preview.7.21379.14+abc")
        assert v.prerelease == ("preview", "7", "21379", "14")
        assert v.metadata == "abc"
        assert str(v) == "6.0.100-preview.7.21379.14+abc"

    def test_lenient_forms(self):
        assert SemanticVersion.parse("8.0") == SemanticVersion.parse("8.0.0")
        assert str(SemanticVersion.parse("8.0")) == "8.0.0"
        assert SemanticVersion.parse("01.0.0").major == 1
        assert SemanticVersion.parse("6.0-rc.1").prerelease == ("rc", "1")

    @pytest.mark.parametrize("text", ["", "6", "garbage", "6.0.x", "6.0.100-", "1.2.3.4.5"])
    def test_invalid(self, text):
        with pytest.raises(InvalidVersion):
            SemanticVersion.parse(text)
        assert SemanticVersion.try_parse(text) is None


class TestOrdering:
    def test_numeric_parts(self):
        assert SemanticVersion.parse("6.0.100") < SemanticVersion.parse("6.0.200")
        assert SemanticVersion.parse("6.0.200") < SemanticVersion.parse("7.0.100")

    def test_release_above_prerelease(self):
        assert SemanticVersion.parse("6.0.100-rc.1") < SemanticVersion.parse("6.0.100")

    def test_prerelease_numeric_identifiers(self):
        assert SemanticVersion.parse("6.0.100-preview.7") < SemanticVersion.parse("6.0.100-preview.10")

    def test_metadata_ignored(self):
        a = SemanticVersion.parse("1.0.0+one")
        b = SemanticVersion.parse("1.0.0+two")
        assert a == b
        assert hash(a) == hash(b)

    def test_max(self):
        versions = [SemanticVersion.parse(v) for v in ("6.0.100", "7.0.100-rc.2", "6.0.400")]
        assert str(max(versions)) == "7.0.100-rc.2"


class TestFeatureBand:
    def test_release(self):
        assert feature_band(SemanticVersion.parse("6.0.105")) == "6.0.100"
        assert feature_band(SemanticVersion.parse("6.0.100")) == "6.0.100"
        assert feature_band(SemanticVersion.parse("7.0.312")) == "7.0.300"

    def test_prerelease(self):
        v = SemanticVersion.parse("6.0.100-preview.7.21379.14")
        assert feature_band(v) == "6.0.100-preview.7"
