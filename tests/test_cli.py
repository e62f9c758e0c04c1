"""Tests for the command-line interface."""

import json

import pytest
import structlog

from oceanrace.cli import build_parser, main
from oceanrace.render import TITLE

KEY = "tl-ocean-solo-race-v1"


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def save_path(tmp_path):
    return tmp_path / "save.json"


def saved(path) -> dict:
    return json.loads(json.loads(path.read_text())[KEY])


class TestParser:
    """Tests for argument parsing."""

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_steer_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["steer", "NE"])
        assert build_parser().parse_args(["steer", "N"]).heading == "N"


class TestCommands:
    """End-to-end command runs against a temporary save file."""

    def test_show_creates_save(self, save_path, capsys):
        assert main(["--save", str(save_path), "show"]) == 0

        assert TITLE in capsys.readouterr().out
        assert "seed" in saved(save_path)

    def test_show_keeps_voyage(self, save_path):
        main(["--save", str(save_path), "show"])
        first = saved(save_path)["seed"]

        main(["--save", str(save_path), "show"])

        assert saved(save_path)["seed"] == first

    def test_steer_is_persisted(self, save_path):
        assert main(["--save", str(save_path), "steer", "N"]) == 0
        assert saved(save_path)["boat"]["heading"] == "N"

    def test_anchor_toggles(self, save_path):
        main(["--save", str(save_path), "anchor"])
        assert saved(save_path)["boat"]["anchored"] is True

        main(["--save", str(save_path), "anchor"])
        assert saved(save_path)["boat"]["anchored"] is False

    def test_map_preview_never_saves(self, save_path, capsys):
        assert main(["--save", str(save_path), "map", "--seed", "42"]) == 0

        out = capsys.readouterr().out
        assert TITLE in out
        assert "SEED:42" in out
        assert not save_path.exists()

    def test_sail_frames(self, save_path, capsys):
        assert main(["--save", str(save_path), "sail", "--frames", "2", "--fps", "100"]) == 0
        assert capsys.readouterr().out.count(TITLE) == 2

    def test_named_config(self, save_path):
        assert main(["--config", "brisk", "--save", str(save_path), "show"]) == 0
        assert save_path.exists()

    def test_unknown_config(self, save_path):
        assert main(["--config", "nope", "--save", str(save_path), "show"]) == 2
        assert not save_path.exists()
