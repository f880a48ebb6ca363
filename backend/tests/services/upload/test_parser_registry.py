# tests/services/upload/test_parser_registry.py
"""
Tests for the extension -> parser registry.
"""

import pytest

from balance_tracker.services.exceptions import InvalidFileFormatError
from balance_tracker.services.upload.parsers import (
    DelimitedFileParser,
    ParserRegistry,
    SpreadsheetFileParser,
    UnsupportedFileTypeError,
    build_default_registry,
)


@pytest.fixture
def registry() -> ParserRegistry:
    return build_default_registry()


class TestParserRegistry:

    def test_supported_extensions(self, registry):
        assert registry.supported_extensions == [".csv", ".tsv", ".txt", ".xls", ".xlsx"]

    @pytest.mark.parametrize("extension,delimiter", [
        (".csv", ","),
        (".txt", ","),
        (".tsv", "\t"),
    ])
    def test_delimited_extensions(self, registry, extension, delimiter):
        parser = registry.select(extension)

        assert isinstance(parser, DelimitedFileParser)
        assert parser.delimiter == delimiter

    @pytest.mark.parametrize("extension", [".xlsx", ".xls"])
    def test_excel_extensions(self, registry, extension):
        assert isinstance(registry.select(extension), SpreadsheetFileParser)

    def test_lookup_is_case_insensitive(self, registry):
        assert registry.select(".CSV") is registry.select(".csv")

    def test_select_for_filename(self, registry):
        assert registry.select_for_filename("August Balances.XLSX").name == "Excel"

    def test_unknown_extension(self, registry):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            registry.select(".pdf")

        assert str(exc_info.value) == "File type '.pdf' is not supported"
        assert exc_info.value.supported == registry.supported_extensions

    def test_missing_extension(self, registry):
        with pytest.raises(UnsupportedFileTypeError, match="File extension is required"):
            registry.select_for_filename("balances")

    def test_unsupported_type_is_a_file_format_error(self, registry):
        with pytest.raises(InvalidFileFormatError):
            registry.select(".doc")

    def test_contains(self, registry):
        assert ".tsv" in registry
        assert ".json" not in registry

    def test_registry_cannot_be_mutated(self, registry):
        with pytest.raises(TypeError):
            registry._parsers[".json"] = SpreadsheetFileParser()  # type: ignore[index]
