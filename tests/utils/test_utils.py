# tests/utils/test_utils.py
"""Unit tests for configuration helpers in `panedit.utils.utils`."""

from pathlib import Path
from unittest.mock import patch

import toml

from panedit.utils import utils


def test_deep_merge() -> None:
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    assert result == {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_hex_to_xterm_valid_color() -> None:
    assert utils.hex_to_xterm("#ffffff") == 231
    assert utils.hex_to_xterm("000000") == 16
    assert utils.hex_to_xterm("#ff0000") == 196


def test_hex_to_xterm_invalid_color() -> None:
    assert utils.hex_to_xterm("#zzz") == 255
    assert utils.hex_to_xterm("#gg0000") == 255
    assert utils.hex_to_xterm("12") == 255


def test_load_config_merges_user_file(tmp_path: Path) -> None:
    user_file = tmp_path / "config.toml"
    user_file.write_text('[editor]\ntab_size = 8\n\n[keybindings]\nquit = "ctrl+x"\n')
    config = utils.load_config(user_file)
    assert config["editor"]["tab_size"] == 8
    assert config["editor"]["use_spaces"] is True
    assert config["keybindings"]["quit"] == "ctrl+x"
    assert config["layout"] == utils.DEFAULT_CONFIG["layout"]


def test_load_config_with_broken_file_uses_defaults(tmp_path: Path) -> None:
    user_file = tmp_path / "config.toml"
    user_file.write_text("[editor\ntab_size = ")
    assert utils.load_config(user_file) == utils.DEFAULT_CONFIG


def test_load_config_does_not_mutate_defaults(tmp_path: Path) -> None:
    config = utils.load_config(tmp_path / "missing.toml")
    config["editor"]["tab_size"] = 99
    assert utils.DEFAULT_CONFIG["editor"]["tab_size"] == 4


def test_ensure_user_config_exists_creates_templates(tmp_path: Path) -> None:
    with patch.object(utils, "get_config_dir", return_value=tmp_path / "panedit"):
        utils.ensure_user_config_exists()
        (tmp_path / "panedit" / "config.toml").write_text("# edited\n")
        utils.ensure_user_config_exists()

    config_dir = tmp_path / "panedit"
    assert (config_dir / "nanorc").is_dir()
    assert "PANEDIT_NANORC_DIR" in (config_dir / ".env").read_text()
    assert (config_dir / "config.toml").read_text() == "# edited\n"


def test_generated_config_round_trips(tmp_path: Path) -> None:
    with patch.object(utils, "get_config_dir", return_value=tmp_path):
        utils.ensure_user_config_exists()
    assert toml.load(tmp_path / "config.toml") == utils.DEFAULT_CONFIG
