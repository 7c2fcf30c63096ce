"""Tests for collection, source type and input kind parsing."""

import pytest

from lapingest.errors import InvalidArgumentError, UnsupportedSourceTypeError
from lapingest.ingestion.types import Collection, InputKind, LoadResult, SourceType


class TestCollection:
    """Tests for Collection."""

    @pytest.mark.parametrize("label", ["grade", "GRADE", "Grade", "  grade "])
    def test_parse_case_insensitive(self, label: str) -> None:
        """Test that labels match regardless of case and padding."""
        assert Collection.parse(label) is Collection.GRADE

    def test_parse_passthrough(self) -> None:
        """Test that enum members are returned as-is."""
        assert Collection.parse(Collection.COURSE) is Collection.COURSE

    def test_parse_invalid(self) -> None:
        """Test that unknown labels raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError, match="valid collections"):
            Collection.parse("grades")

    def test_invalid_label_is_value_error(self) -> None:
        """Test that callers catching ValueError also catch bad labels."""
        with pytest.raises(ValueError):
            Collection.parse("")

    def test_ordered(self) -> None:
        """Test canonical ordering and de-duplication."""
        ordered = Collection.ordered(
            [Collection.ACTIVITY, Collection.PERSONAL, Collection.ACTIVITY]
        )
        assert ordered == [Collection.PERSONAL, Collection.ACTIVITY]


class TestSourceType:
    """Tests for SourceType."""

    @pytest.mark.parametrize("label", ["samplecsv", "SAMPLE_CSV", "sample-csv", "SampleCSV"])
    def test_parse_sample_spellings(self, label: str) -> None:
        """Test the accepted spellings of the sample source."""
        assert SourceType.parse(label) is SourceType.SAMPLE_CSV

    def test_parse_known(self) -> None:
        """Test plain labels."""
        assert SourceType.parse("database") is SourceType.DATABASE
        assert SourceType.parse("http") is SourceType.HTTP

    def test_parse_unknown(self) -> None:
        """Test that unknown labels raise UnsupportedSourceTypeError."""
        with pytest.raises(UnsupportedSourceTypeError, match="valid types"):
            SourceType.parse("ftp")


class TestInputKind:
    """Tests for InputKind."""

    def test_parse(self) -> None:
        """Test case-insensitive parsing of both kinds."""
        assert InputKind.parse("csv") is InputKind.CSV
        assert InputKind.parse("Storage") is InputKind.STORAGE

    def test_parse_unknown(self) -> None:
        """Test that unknown kinds raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError, match="input type"):
            InputKind.parse("xml")


class TestLoadResult:
    """Tests for LoadResult."""

    def test_ok(self) -> None:
        """Test the success constructor."""
        result = LoadResult.ok(Collection.GRADE, 12, source_type=SourceType.CSV)
        assert result.success
        assert result.records == 12
        assert result.error is None

    def test_failed(self) -> None:
        """Test the failure constructor."""
        result = LoadResult.failed(Collection.GRADE, "file missing")
        assert not result.success
        assert result.records == 0
        assert result.error == "file missing"

    def test_negative_records_rejected(self) -> None:
        """Test that record counts cannot be negative."""
        with pytest.raises(ValueError, match="records"):
            LoadResult(Collection.GRADE, True, records=-1)
