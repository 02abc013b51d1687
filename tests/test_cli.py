"""
tipack CLI Tests
================

Tests for the tipack command: option handling, exit codes and the bytes
it writes.
"""

import struct
from pathlib import Path

import pytest
from click.testing import CliRunner

from tipack import __version__
from tipack.cli.errors import ExitCode, exit_code_for
from tipack.cli.tipack import main, make_logger
from tipack.errors import (
    FileErrorCode,
    FileWriteError,
    InputError,
    NameConversionError,
    UnknownTypeError,
)
from tipack.files import parse_regular_file


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    path = tmp_path / "prog.bin"
    path.write_bytes(bytes([1, 2, 3]))
    return path


# =============================================================================
# Success Paths
# =============================================================================

class TestPacking:
    """Tests for successful runs."""

    def test_program_from_file(self, runner, input_file):
        result = runner.invoke(main, ["-t", "8xp", str(input_file)])
        assert result.exit_code == 0, result.output

        out = input_file.with_suffix(".8xp")
        record = parse_regular_file(out, verify=True).entries[0]
        assert record.name == b"PROG"
        assert record.data == bytes([3, 0, 1, 2, 3])

    def test_end_to_end_bytes(self, runner, input_file, tmp_path):
        out = tmp_path / "PROG.82p"
        result = runner.invoke(main, ["-o", str(out), "-c", "", str(input_file)])
        assert result.exit_code == 0, result.output

        data = out.read_bytes()
        entry = (
            struct.pack("<HHB", 0x0B, 5, 0x05)
            + b"PROG\x00\x00\x00\x00"
            + struct.pack("<H", 5)
            + bytes([3, 0, 1, 2, 3])
        )
        expected = (
            b"**TI82**\x1a\x0a\x00"
            + bytes(42)
            + struct.pack("<H", len(entry))
            + entry
            + struct.pack("<H", sum(entry) & 0xFFFF)
        )
        assert data == expected

    def test_stdin(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["-t", "8xv", "-n", "DATA"], input=b"\x01\x02")
            assert result.exit_code == 0, result.output
            record = parse_regular_file("a.8xv").entries[0]
        assert record.name == b"DATA"
        assert record.data == b"\x02\x00\x01\x02"

    def test_stdin_dash(self, runner, tmp_path):
        out = tmp_path / "X.89t"
        result = runner.invoke(main, ["-o", str(out), "-"], input=b"text")
        assert result.exit_code == 0, result.output
        assert parse_regular_file(out).entries[0].data == b"text"

    def test_raw(self, runner, input_file, tmp_path):
        out = tmp_path / "P.8xp"
        result = runner.invoke(main, ["-r", "-o", str(out), str(input_file)])
        assert result.exit_code == 0, result.output
        assert parse_regular_file(out).entries[0].data == bytes([1, 2, 3])

    def test_flags(self, runner, input_file, tmp_path):
        out = tmp_path / "P.8xp"
        result = runner.invoke(main, ["-p", "-a", "-o", str(out), str(input_file)])
        assert result.exit_code == 0, result.output
        record = parse_regular_file(out).entries[0]
        assert record.type_id == 0x06
        assert record.is_archived

    def test_complex(self, runner, input_file, tmp_path):
        out = tmp_path / "L1.83l"
        result = runner.invoke(main, ["-C", "-o", str(out), str(input_file)])
        assert result.exit_code == 0, result.output
        record = parse_regular_file(out).entries[0]
        assert record.type_id == 0x0D
        assert record.name == b"\x5d\x00"

    def test_comment_template(self, runner, input_file, tmp_path):
        out = tmp_path / "P.8xp"
        result = runner.invoke(main, ["-c", "Year %Y", "-o", str(out), str(input_file)])
        assert result.exit_code == 0, result.output
        assert parse_regular_file(out).comment.startswith("Year 2")

    def test_default_comment(self, runner, input_file, tmp_path):
        out = tmp_path / "P.8xp"
        runner.invoke(main, ["-o", str(out), str(input_file)])
        assert parse_regular_file(out).comment == f"Created by tipack {__version__}"

    def test_comment_from_environment(self, runner, input_file, tmp_path):
        out = tmp_path / "P.8xp"
        runner.invoke(
            main, ["-o", str(out), str(input_file)],
            env={"TIPACK_COMMENT": "From env"},
        )
        assert parse_regular_file(out).comment == "From env"

    def test_quiet_by_default(self, runner, input_file, tmp_path):
        result = runner.invoke(main, ["-o", str(tmp_path / "P.8xp"), str(input_file)])
        assert result.exit_code == 0
        assert result.output == ""

    def test_verbose(self, runner, input_file, tmp_path):
        out = tmp_path / "P.8xp"
        result = runner.invoke(main, ["-v", "-o", str(out), str(input_file)])
        assert result.exit_code == 0, result.output
        assert "Model:     TI-83 Plus" in result.output
        assert "Entries:   1" in result.output
        assert f"Wrote {out}" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--type" in result.output


# =============================================================================
# Error Paths
# =============================================================================

class TestExitCodes:
    """Tests for exit codes and error messages."""

    def test_missing_type(self, runner, input_file):
        result = runner.invoke(main, [str(input_file)])
        assert result.exit_code == ExitCode.USAGE_ERROR
        assert "Error: no variable type specified" in result.output

    def test_unknown_type(self, runner, input_file):
        result = runner.invoke(main, ["-t", "8xq", str(input_file)])
        assert result.exit_code == 1
        assert "invalid variable type 8xq" in result.output

    def test_unknown_type_from_output(self, runner, input_file, tmp_path):
        result = runner.invoke(main, ["-o", str(tmp_path / "a.txt"), str(input_file)])
        assert result.exit_code == 1

    def test_name_conversion_failure(self, runner, input_file, tmp_path):
        result = runner.invoke(main, ["-o", str(tmp_path / "my-list.8xl"), str(input_file)])
        assert result.exit_code == 1
        assert "my-list" in result.output

    def test_unknown_option(self, runner, input_file):
        result = runner.invoke(main, ["--bogus", str(input_file)])
        assert result.exit_code == 1
        assert "--bogus" in result.output

    def test_missing_option_value(self, runner):
        result = runner.invoke(main, ["-t"])
        assert result.exit_code == 1

    def test_extra_argument(self, runner, input_file):
        result = runner.invoke(main, ["-t", "8xp", str(input_file), "extra"])
        assert result.exit_code == 1

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(main, ["-t", "8xp", str(tmp_path / "none.bin")])
        assert result.exit_code == ExitCode.INPUT_ERROR
        assert "none.bin" in result.output

    def test_input_is_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["-o", str(tmp_path / "P.8xp"), str(tmp_path)])
        assert result.exit_code == 2

    def test_unwritable_output(self, runner, input_file, tmp_path):
        out = tmp_path / "missing" / "P.8xp"
        result = runner.invoke(main, ["-o", str(out), str(input_file)])
        assert result.exit_code == ExitCode.OUTPUT_ERROR

    def test_archive_unsupported(self, runner, input_file, tmp_path):
        out = tmp_path / "P.83p"
        result = runner.invoke(main, ["-a", "-o", str(out), str(input_file)])
        assert result.exit_code == 3
        assert "archive" in result.output
        assert not out.exists()

    def test_no_verbose_summary_on_failure(self, runner, input_file, tmp_path):
        out = tmp_path / "missing" / "P.8xp"
        result = runner.invoke(main, ["-v", "-o", str(out), str(input_file)])
        assert result.exit_code == 3
        assert "Model:" not in result.output


class TestErrorMapping:
    """Tests for the exception to exit code mapping."""

    def test_mapping(self):
        assert exit_code_for(UnknownTypeError("x")) == ExitCode.USAGE_ERROR
        assert exit_code_for(NameConversionError("x", "y")) == ExitCode.USAGE_ERROR
        assert exit_code_for(InputError("x", "y")) == ExitCode.INPUT_ERROR
        assert exit_code_for(FileWriteError(FileErrorCode.FILE_WRITE)) == ExitCode.OUTPUT_ERROR


class TestLogger:
    """Tests for the run logger."""

    def test_silent_without_verbose(self):
        log = make_logger(False)
        assert not log.propagate
        assert not log.isEnabledFor(40)

    def test_debug_with_verbose(self):
        log = make_logger(True)
        assert log.isEnabledFor(10)
        assert len(log.handlers) == 1
