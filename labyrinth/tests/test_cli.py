"""
Tests for the command-line interface.
"""

import json

from ..cli import main
from ..content.labyrinth_base import create_base_catalog


class TestValidateCommand:
    """Tests for `labyrinth validate`."""

    def test_builtin_catalog(self, capsys):
        assert main(["validate"]) == 0
        assert "Catalog is valid" in capsys.readouterr().out

    def test_catalog_file(self, tmp_path, capsys):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(create_base_catalog().to_dict()), encoding="utf-8")

        assert main(["validate", "--catalog", str(path)]) == 0
        assert f"Validating: {path}" in capsys.readouterr().out

    def test_invalid_catalog_file(self, tmp_path, capsys):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"events": [], "items": [], "statusEffects": []}), encoding="utf-8")

        assert main(["validate", "--catalog", str(path)]) == 1
        assert "Need at least" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["validate", "--catalog", str(tmp_path / "missing.json")]) == 1
        assert "File not found" in capsys.readouterr().out


class TestSimulateCommand:
    """Tests for `labyrinth simulate`."""

    def test_runs(self, capsys):
        assert main(["simulate", "--seed", "3", "--turns", "5"]) == 0
        out = capsys.readouterr().out
        assert "(seed 3)" in out
        assert "Turn 1" in out

    def test_seed_is_reproducible(self, capsys):
        main(["simulate", "--seed", "12", "--turns", "8"])
        first = capsys.readouterr().out.split("\n", 1)[1]
        main(["simulate", "--seed", "12", "--turns", "8"])
        second = capsys.readouterr().out.split("\n", 1)[1]
        assert first == second


def test_no_command():
    assert main([]) == 1
