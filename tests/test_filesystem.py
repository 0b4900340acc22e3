from __future__ import annotations

import os
import uuid
from pathlib import Path

import pytest

from guard_buddy.cli import cli
from guard_buddy.detector import detect_state
from guard_buddy.filesystem import (
    MAX_FILE_SIZE_ENV_VAR,
    collect_file_stat,
    ensure_file_unchanged,
    get_max_file_size,
    normalize_filepath,
    read_document,
    write_document,
)
from guard_buddy.models import ProtectionKind


def test_read_document_keeps_line_endings(tmp_path: Path):
    target = tmp_path / "a.h"
    target.write_bytes(b"#pragma once\r\nint a;\r\n")

    document = read_document(target)

    assert document.path == target
    assert document.text == "#pragma once\r\nint a;\r\n"
    assert document.line_at(0) == "#pragma once"


def test_byte_order_mark_survives_read_and_write(tmp_path: Path):
    target = tmp_path / "a.h"
    target.write_bytes(b"\xef\xbb\xbf#pragma once\r\nint a;\r\n")
    initial = collect_file_stat(target)

    document = read_document(target)

    assert document.bom is True
    assert document.line_at(0) == "#pragma once"
    assert detect_state(document).kind is ProtectionKind.PRAGMA_ONCE

    write_document(document, target, initial, initial)

    assert target.read_bytes() == b"\xef\xbb\xbf#pragma once\r\nint a;\r\n"


def test_file_without_byte_order_mark_is_written_without_one(tmp_path: Path):
    target = tmp_path / "a.h"
    target.write_bytes(b"int a;\n")
    initial = collect_file_stat(target)

    write_document(read_document(target), target, initial, initial)

    assert target.read_bytes() == b"int a;\n"


def test_read_document_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "bin.h"
    target.write_bytes(b"\xff\xfe\x00")
    with pytest.raises(IOError, match="not valid UTF-8"):
        read_document(target)


def test_write_document_refuses_changed_file(tmp_path: Path):
    target = tmp_path / "a.h"
    target.write_text("int a;\n", encoding="utf-8")
    initial = collect_file_stat(target)
    document = read_document(target)

    target.write_text("int a; int b;\n", encoding="utf-8")

    with pytest.raises(IOError, match="changed during processing"):
        write_document(document, target, initial, initial)
    assert target.read_text(encoding="utf-8") == "int a; int b;\n"


def test_write_document_preserves_permissions(tmp_path: Path):
    target = tmp_path / "a.h"
    target.write_text("int a;\n", encoding="utf-8")
    os.chmod(target, 0o640)
    initial = collect_file_stat(target)
    document = read_document(target)

    write_document(document, target, initial, initial)

    assert target.stat().st_mode & 0o777 == 0o640
    assert list(tmp_path.iterdir()) == [target]


def test_ensure_file_unchanged_accepts_identical_stats(tmp_path: Path):
    target = tmp_path / "a.h"
    target.write_text("x", encoding="utf-8")
    snapshot = collect_file_stat(target)
    ensure_file_unchanged(snapshot, collect_file_stat(target), target)


def test_normalize_filepath_rejects_missing_and_outside(tmp_path: Path):
    with pytest.raises(ValueError, match="does not exist"):
        normalize_filepath(str(tmp_path / "missing.h"), tmp_path)

    inside = tmp_path / "inside"
    inside.mkdir()
    outside = tmp_path / "outside.h"
    outside.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="outside of the working directory"):
        normalize_filepath(str(outside), inside)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_symlink_rejected(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "source.h"
    source.write_text("int a;\n", encoding="utf-8")
    link = tmp_path / "alias.h"
    try:
        os.symlink(source, link, target_is_directory=False)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    result = cli_runner.invoke(cli, ["insert", str(link)])

    assert result.exit_code != 0
    assert "Symlinks" in result.output
    assert source.read_text(encoding="utf-8") == "int a;\n"


def test_path_traversal_prevented(cli_runner, tmp_path, monkeypatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    outside = tmp_path / f"outside-{uuid.uuid4().hex}.h"
    outside.write_text("int a;\n", encoding="utf-8")

    result = cli_runner.invoke(cli, ["insert", str(outside)])

    assert result.exit_code != 0
    assert "outside of the working directory" in result.output


def test_max_file_size_from_environment(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "2048")
    assert get_max_file_size(default=1) == 2048

    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "zero")
    with pytest.raises(ValueError, match="expected positive integer"):
        get_max_file_size()

    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "-5")
    with pytest.raises(ValueError, match="must be a positive integer"):
        get_max_file_size()


def test_oversized_file_is_rejected(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "4")
    target = tmp_path / "big.h"
    target.write_text("int big;\n", encoding="utf-8")

    result = cli_runner.invoke(cli, ["insert", str(target)])

    assert result.exit_code != 0
    assert "exceeds the maximum allowed size" in result.output
    assert target.read_text(encoding="utf-8") == "int big;\n"
