"""Tests for well-known paths."""

from pathlib import Path

import pytest

from sandman.core.paths import (
    CONFIG_DIR_ENV,
    CONFIG_FILENAME,
    HISTORY_FILENAME,
    IGNORE_FILENAME,
    get_config_dir,
    get_config_file,
    get_global_ignore_file,
    history_file_for,
    ignore_file_for,
    is_history_file,
)


class TestConfigDir:
    """Tests for the configuration directory."""

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The environment variable overrides the default location."""
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))

        assert get_config_dir() == tmp_path
        assert get_config_file() == tmp_path / CONFIG_FILENAME
        assert get_global_ignore_file() == tmp_path / IGNORE_FILENAME

    def test_default_in_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without override, the directory is ~/.sandman."""
        monkeypatch.delenv(CONFIG_DIR_ENV, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_config_dir() == tmp_path / ".sandman"


class TestTargetFiles:
    """Tests for files inside a target directory."""

    def test_history_file(self, tmp_path: Path) -> None:
        """The sidecar sits at the root of the target directory."""
        assert history_file_for(tmp_path) == tmp_path / HISTORY_FILENAME
        assert history_file_for(str(tmp_path)) == tmp_path / HISTORY_FILENAME

    def test_ignore_file(self, tmp_path: Path) -> None:
        """The per-target ignore file sits at the root of the target directory."""
        assert ignore_file_for(tmp_path) == tmp_path / IGNORE_FILENAME

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            (HISTORY_FILENAME, True),
            (f"{HISTORY_FILENAME}.k3j9x_a1.tmp", True),
            (f"{HISTORY_FILENAME}.bak", False),
            ("notes.tmp", False),
            ("a.txt", False),
        ],
    )
    def test_is_history_file(self, name: str, expected: bool) -> None:
        """The sidecar and its temporary files are recognized by name."""
        assert is_history_file(name) is expected
