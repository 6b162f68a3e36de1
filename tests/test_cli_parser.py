"""Tests for CLI command parsing."""

import pytest

from cli.models import InfoCommand, MergeCommand, ScanCommand, SplitCommand, VerifyCommand
from cli.parser import ParseError, parse_command, parse_tokens


class TestSplitParsing:
    """Tests for the split command."""

    def test_file_only(self):
        assert parse_command("split movie.mkv") == SplitCommand(file_path="movie.mkv")

    def test_file_and_parts(self):
        assert parse_command("split movie.mkv 4") == SplitCommand(file_path="movie.mkv", parts=4)

    def test_all_options(self):
        cmd = parse_command("split movie.mkv 3 --out parts/ --prefix film")
        assert cmd == SplitCommand(file_path="movie.mkv", parts=3, output_dir="parts/", prefix="film")

    def test_size_option(self):
        cmd = parse_command("split movie.mkv --size 2.5")
        assert cmd.part_size_mib == 2.5
        assert cmd.parts is None

    def test_quoted_path(self):
        cmd = parse_command('split "my movie.mkv" 2')
        assert cmd.file_path == "my movie.mkv"

    def test_parts_not_a_number(self):
        with pytest.raises(ParseError, match="integer"):
            parse_command("split movie.mkv three")

    def test_parts_and_size_conflict(self):
        with pytest.raises(ParseError, match="either"):
            parse_command("split movie.mkv 3 --size 10")

    @pytest.mark.parametrize("size", ["0", "-1", "big", "inf", "-inf", "nan"])
    def test_invalid_size(self, size):
        with pytest.raises(ParseError):
            parse_command(f"split movie.mkv --size {size}")

    def test_flag_without_value(self):
        with pytest.raises(ParseError, match="requires a value"):
            parse_command("split movie.mkv --out")

    def test_unknown_flag(self):
        with pytest.raises(ParseError, match="Unknown option"):
            parse_command("split movie.mkv --fast")

    def test_missing_file(self):
        with pytest.raises(ParseError):
            parse_command("split")

    def test_too_many_positionals(self):
        with pytest.raises(ParseError):
            parse_command("split a b c")

    def test_single_part_is_left_to_the_engine(self):
        assert parse_command("split movie.mkv 1").parts == 1


class TestOtherCommands:
    """Tests for verify, merge, info and scan."""

    def test_verify(self):
        assert parse_command("verify a.split_metadata") == VerifyCommand(metadata_path="a.split_metadata")

    def test_verify_requires_one_argument(self):
        with pytest.raises(ParseError):
            parse_command("verify")
        with pytest.raises(ParseError):
            parse_command("verify a b")

    def test_merge_with_and_without_output(self):
        assert parse_command("merge a.split_metadata") == MergeCommand(metadata_path="a.split_metadata")
        assert parse_command("merge a.split_metadata out.bin") == MergeCommand(
            metadata_path="a.split_metadata", output_path="out.bin"
        )

    def test_merge_too_many_arguments(self):
        with pytest.raises(ParseError):
            parse_command("merge a b c")

    def test_info(self):
        assert parse_command("info a.split_metadata") == InfoCommand(metadata_path="a.split_metadata")

    def test_scan_defaults_to_current_directory(self):
        assert parse_command("scan") == ScanCommand(directory=".")
        assert parse_command("scan parts") == ScanCommand(directory="parts")

    def test_command_name_is_case_insensitive(self):
        assert isinstance(parse_command("VERIFY a.split_metadata"), VerifyCommand)


class TestParserErrors:
    """Tests for invalid input."""

    def test_empty_command(self):
        with pytest.raises(ParseError, match="Empty command"):
            parse_command("   ")

    def test_unknown_command(self):
        with pytest.raises(ParseError, match="Unknown command"):
            parse_command("explode file.bin")

    def test_unbalanced_quotes(self):
        with pytest.raises(ParseError, match="Invalid syntax"):
            parse_command('split "movie.mkv')

    def test_parse_tokens_from_argv(self):
        assert parse_tokens(["split", "file.iso", "3"]) == SplitCommand(file_path="file.iso", parts=3)
