from __future__ import annotations

import io
import json

import pytest

from hzn_sdk.errors import EXIT_FILE_IO_ERROR, FileIOError
from hzn_sdk.files import confirm_remove, expand_env, read_file, read_json_file


def test_read_file_from_disk(tmp_path) -> None:
    path = tmp_path / "input.json"
    path.write_bytes(b'{"a": 1}')
    assert read_file(path) == b'{"a": 1}'


def test_read_file_dash_reads_stdin() -> None:
    assert read_file("-", stdin=io.StringIO("from stdin")) == b"from stdin"


def test_read_missing_file_fails(tmp_path) -> None:
    with pytest.raises(FileIOError) as exc_info:
        read_file(tmp_path / "missing.json")
    assert exc_info.value.exit_code == EXIT_FILE_IO_ERROR


def test_expand_env_warns_about_undefined_vars(monkeypatch) -> None:
    monkeypatch.setenv("HZN_TEST_DEFINED", "value")
    monkeypatch.delenv("HZN_TEST_UNDEFINED", raising=False)
    err = io.StringIO()

    result = expand_env("$HZN_TEST_DEFINED-${HZN_TEST_UNDEFINED}", stderr=err)

    assert result == "value-"
    assert err.getvalue() == (
        "Warning: environment variable 'HZN_TEST_UNDEFINED' is referenced in input file, "
        "but not defined in the environment.\n"
    )


def test_read_json_file_strips_comments_and_expands_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HZN_TEST_ARCH", "arm64")
    monkeypatch.delenv("HZN_DONT_SUBST_ENV_VARS", raising=False)
    path = tmp_path / "service.json"
    path.write_text(
        '{\n  /* the service arch,\n     set by the build */\n  "arch": "$HZN_TEST_ARCH"\n}\n',
        encoding="utf-8",
    )

    assert json.loads(read_json_file(path, stderr=io.StringIO())) == {"arch": "arm64"}


def test_read_json_file_can_skip_env_substitution(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HZN_DONT_SUBST_ENV_VARS", "1")
    path = tmp_path / "service.json"
    path.write_text('{"arch": "$ARCH"}', encoding="utf-8")

    assert json.loads(read_json_file(path)) == {"arch": "$ARCH"}


def test_confirm_remove() -> None:
    out = io.StringIO()
    assert confirm_remove("Delete it?", stdin=io.StringIO("y\n"), stdout=out) is True
    assert "Delete it? [y/N]: " in out.getvalue()

    out = io.StringIO()
    assert confirm_remove("Delete it?", stdin=io.StringIO("\n"), stdout=out) is False
    assert "Exiting." in out.getvalue()
