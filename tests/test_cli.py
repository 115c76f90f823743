"""Tests for the Typer command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image
from typer.testing import CliRunner

from tile_mosaic.cli import app

runner = CliRunner()


@pytest.fixture
def photos(tmp_path: Path) -> Path:
    src = tmp_path / "photos"
    src.mkdir()
    Image.new("RGB", (8, 8), (255, 0, 0)).save(src / "red.png")
    Image.new("RGB", (8, 8), (0, 0, 255)).save(src / "blue.png")
    return src


@pytest.fixture
def target(tmp_path: Path) -> Path:
    p = tmp_path / "target.png"
    Image.new("RGB", (5, 4), (220, 10, 10)).save(p)
    return p


class TestScan:
    def test_creates_library(self, tmp_path: Path, photos: Path) -> None:
        db = tmp_path / "db"
        result = runner.invoke(app, ["scan", str(photos), "--db", str(db), "-W", "2", "-H", "2"])
        assert result.exit_code == 0, result.output
        assert "Folder created" in result.output
        assert sorted(p.name for p in db.iterdir()) == ["blue.jpg", "red.jpg"]
        assert Image.open(db / "red.jpg").size == (2, 2)

    def test_missing_folder(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["scan", str(tmp_path / "nope"), "--db", str(tmp_path / "db")])
        assert result.exit_code == 1


class TestGet:
    def test_missing_target(self, tmp_path: Path) -> None:
        out = tmp_path / "result.png"
        result = runner.invoke(
            app, ["get", str(tmp_path / "nope.png"), "--db", str(tmp_path / "db"), "-o", str(out)],
        )
        assert result.exit_code == 1
        assert "does not exist" in result.output
        assert not out.exists()

    def test_empty_library(self, tmp_path: Path, target: Path) -> None:
        out = tmp_path / "result.png"
        result = runner.invoke(
            app, ["get", str(target), "--db", str(tmp_path / "db"), "-o", str(out)],
        )
        assert result.exit_code == 1
        assert "scan" in result.output
        assert not out.exists()

    def test_invalid_sampling(self, tmp_path: Path, target: Path) -> None:
        result = runner.invoke(
            app, ["get", str(target), "--db", str(tmp_path / "db"), "--sampling", "median"],
        )
        assert result.exit_code == 2

    def test_scan_then_get(self, tmp_path: Path, photos: Path, target: Path) -> None:
        db = tmp_path / "db"
        out = tmp_path / "result.png"
        sheet = tmp_path / "sheet.png"
        scan = runner.invoke(app, ["scan", str(photos), "--db", str(db), "-W", "2", "-H", "2"])
        assert scan.exit_code == 0, scan.output

        result = runner.invoke(app, [
            "get", str(target), "--db", str(db), "-o", str(out),
            "-W", "2", "-H", "2", "--seed", "1", "--comparison", str(sheet),
        ])
        assert result.exit_code == 0, result.output
        img = Image.open(out)
        assert img.size == (4, 4)
        assert img.mode == "RGBA"
        assert sheet.exists()
        r, g, b, a = img.getpixel((0, 0))
        assert r > 200 and b < 50 and a == 255

    def test_unwritable_output(self, tmp_path: Path, photos: Path, target: Path) -> None:
        db = tmp_path / "db"
        out = tmp_path / "no_such_dir" / "result.png"
        runner.invoke(app, ["scan", str(photos), "--db", str(db), "-W", "2", "-H", "2"])

        result = runner.invoke(app, [
            "get", str(target), "--db", str(db), "-o", str(out), "-W", "2", "-H", "2",
        ])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Cannot write" in result.output
        assert not out.exists()
