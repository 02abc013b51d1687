"""
Pack Orchestration Unit Tests
=============================

Tests for path/type resolution, configuration and the full pack pipeline.
"""

import io
import logging
import struct
from pathlib import Path

import pytest

from tipack.calcs import DeviceFamily
from tipack.config import PackConfig
from tipack.errors import (
    FileErrorCode,
    FileWriteError,
    InputError,
    NameConversionError,
    OutputError,
    UnknownTypeError,
    UsageError,
)
from tipack.files import parse_regular_file
from tipack.packer import PackRequest, pack, resolve_paths, resolve_type


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    """A raw 3-byte input file."""
    path = tmp_path / "prog.bin"
    path.write_bytes(b"\x01\x02\x03")
    return path


# =============================================================================
# Resolution Tests
# =============================================================================

class TestResolvePaths:
    """Tests for output path and type defaults."""

    def test_output_from_input_and_type(self):
        assert resolve_paths("src/prog.txt", None, "8xp") == (Path("src/prog.8xp"), "8xp")

    def test_only_last_extension_replaced(self):
        assert resolve_paths("a.b.c", None, "83p") == (Path("a.b.83p"), "83p")

    def test_input_without_extension(self):
        assert resolve_paths("prog", None, "82p") == (Path("prog.82p"), "82p")

    def test_stdin_default_output(self):
        assert resolve_paths(None, None, "8xv") == (Path("a.8xv"), "8xv")
        assert resolve_paths("-", None, "8xv") == (Path("a.8xv"), "8xv")

    def test_stdin_basename(self):
        assert resolve_paths(None, None, "89p", basename="out") == (Path("out.89p"), "89p")

    def test_type_from_output(self):
        assert resolve_paths(None, "dir/LIST.83l", None) == (Path("dir/LIST.83l"), "83l")

    def test_explicit_values_kept(self):
        assert resolve_paths("x.bin", "y.dat", "8xp") == (Path("y.dat"), "8xp")

    def test_no_type_anywhere(self):
        with pytest.raises(UsageError, match="no variable type"):
            resolve_paths("prog.bin", None, None)

    def test_output_without_extension(self):
        with pytest.raises(UsageError):
            resolve_paths(None, "PROG", None)


class TestResolveType:
    """Tests for type resolution with variants."""

    def test_plain(self):
        var_type, type_id = resolve_type("8xp")
        assert var_type.family == DeviceFamily.TI83P
        assert type_id == 0x05

    def test_protect(self):
        assert resolve_type("83p", protect=True)[1] == 0x06

    def test_complex(self):
        assert resolve_type("83l", complexify=True)[1] == 0x0D
        assert resolve_type("85m", complexify=True)[1] == 0x07

    def test_unknown(self):
        with pytest.raises(UnknownTypeError, match="invalid variable type 8xq"):
            resolve_type("8xq")

    def test_unknown_is_usage_error(self):
        assert issubclass(UnknownTypeError, UsageError)
        assert issubclass(NameConversionError, UsageError)


# =============================================================================
# Configuration Tests
# =============================================================================

class TestConfig:
    """Tests for pack defaults."""

    def test_defaults(self):
        config = PackConfig()
        assert config.default_comment.startswith("Created by tipack ")
        assert config.default_basename == "a"
        assert config.comment_max == 40

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TIPACK_COMMENT", "Packed %Y")
        monkeypatch.setenv("TIPACK_BASENAME", "stdin")
        config = PackConfig.from_env()
        assert config.default_comment == "Packed %Y"
        assert config.default_basename == "stdin"

    def test_from_env_unset(self, monkeypatch):
        monkeypatch.delenv("TIPACK_COMMENT", raising=False)
        monkeypatch.delenv("TIPACK_BASENAME", raising=False)
        assert PackConfig.from_env() == PackConfig()


# =============================================================================
# Pipeline Tests
# =============================================================================

class TestPack:
    """Tests for the full pack pipeline."""

    def test_program(self, input_file):
        result = pack(PackRequest(input_path=input_file, type_string="8xp"))
        assert result.output_path == input_file.with_suffix(".8xp")
        assert result.type_id == 0x05
        assert result.bytes_written == 79

        record = parse_regular_file(result.output_path).entries[0]
        assert record.name == b"PROG"
        assert record.data == b"\x03\x00\x01\x02\x03"

    def test_raw_mode(self, input_file, tmp_path):
        out = tmp_path / "RAW.8xp"
        pack(PackRequest(input_path=input_file, output_path=out, raw=True))
        assert parse_regular_file(out).entries[0].data == b"\x01\x02\x03"

    def test_unframed_type(self, input_file, tmp_path):
        out = tmp_path / "L1.8xl"
        pack(PackRequest(input_path=input_file, output_path=out))
        record = parse_regular_file(out).entries[0]
        assert record.data == b"\x01\x02\x03"
        assert record.name == b"\x5d\x00"

    def test_stdin(self, tmp_path):
        out = tmp_path / "STR.8xs"
        result = pack(
            PackRequest(output_path=out, name="Q"),
            stdin=io.BytesIO(b"hello"),
        )
        record = result.content.entries[0]
        assert record.name == b"Q"
        assert record.data == struct.pack("<H", 5) + b"hello"

    def test_stdin_default_output(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = pack(PackRequest(type_string="89p"), stdin=io.BytesIO(b"\x00"))
        assert result.output_path == Path("a.89p")
        assert (tmp_path / "a.89p").exists()
        assert result.content.entries[0].name == b"A"

    def test_config_basename(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = PackConfig(default_basename="stdin")
        result = pack(PackRequest(type_string="89p"), stdin=io.BytesIO(b""), config=config)
        assert result.output_path == Path("stdin.89p")

    def test_explicit_name_not_converted(self, input_file, tmp_path):
        out = tmp_path / "x.8xp"
        result = pack(PackRequest(input_path=input_file, output_path=out, name="hello"))
        assert result.content.entries[0].name == b"hello"

    def test_protect_and_archive(self, input_file, tmp_path):
        out = tmp_path / "GAME.8xp"
        result = pack(PackRequest(
            input_path=input_file, output_path=out, protect=True, archive=True,
        ))
        record = parse_regular_file(out).entries[0]
        assert result.type_id == 0x06
        assert record.type_id == 0x06
        assert record.is_archived

    def test_comment(self, input_file, tmp_path):
        out = tmp_path / "C.8xp"
        pack(PackRequest(input_path=input_file, output_path=out, comment="z" * 50))
        assert parse_regular_file(out).comment == "z" * 40

    def test_default_comment(self, input_file, tmp_path):
        out = tmp_path / "C.8xp"
        config = PackConfig(default_comment="From config")
        pack(PackRequest(input_path=input_file, output_path=out), config=config)
        assert parse_regular_file(out).comment == "From config"

    def test_transliterated_name(self, input_file, tmp_path):
        out = tmp_path / "my-file.2.82p"
        result = pack(PackRequest(input_path=input_file, output_path=out))
        assert result.content.entries[0].name == b"MY[FILE["

    def test_empty_derived_name(self, input_file, tmp_path):
        out = tmp_path / ".85p"
        with pytest.raises(FileWriteError) as exc_info:
            pack(PackRequest(input_path=input_file, output_path=out))
        assert exc_info.value.code == FileErrorCode.EMPTY_NAME
        assert not out.exists()

    def test_name_conversion_failure(self, input_file, tmp_path):
        out = tmp_path / "my-list.8xl"
        with pytest.raises(NameConversionError):
            pack(PackRequest(input_path=input_file, output_path=out))
        assert not out.exists()

    def test_missing_input(self, tmp_path):
        with pytest.raises(InputError) as exc_info:
            pack(PackRequest(input_path=tmp_path / "none.bin", type_string="8xp"))
        assert "none.bin" in str(exc_info.value)

    def test_unwritable_output(self, input_file, tmp_path):
        out = tmp_path / "missing" / "P.8xp"
        with pytest.raises(OutputError):
            pack(PackRequest(input_path=input_file, output_path=out))

    def test_archive_unsupported(self, input_file, tmp_path):
        with pytest.raises(FileWriteError) as exc_info:
            pack(PackRequest(input_path=input_file, type_string="83p", archive=True))
        assert exc_info.value.code == FileErrorCode.INVALID_ATTRIBUTE

    def test_uses_injected_logger(self, input_file, caplog):
        log = logging.getLogger("tipack.test.pack")
        with caplog.at_level(logging.DEBUG, logger="tipack.test.pack"):
            pack(PackRequest(input_path=input_file, type_string="8xp"), logger=log)
        assert "TI-83 Plus" in caplog.text
        assert "Wrote" in caplog.text
