"""Tests for charforge CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from charforge.canvas import create_canvas
from charforge.cli import main
from charforge.draw import set_pixel
from charforge.image_io import read_png, write_png
from charforge.layers import add_layer, create_layered_canvas
from charforge.storage import write_layered_sprite

from conftest import RED


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------


def test_cli_help_flag(cli_runner: CliRunner) -> None:
    """Test that --help lists every command."""
    result = cli_runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    for command in ("render", "pack", "flatten", "parts"):
        assert command in result.output


def test_cli_version_flag(cli_runner: CliRunner) -> None:
    """Test that --version shows the version."""
    result = cli_runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output.lower()


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------


def test_render_writes_sheet_and_character(
    cli_runner: CliRunner, recipe_file: Path, tmp_path: Path
) -> None:
    """Test that render exports the sheet files and the character JSON."""
    base = tmp_path / "out" / "hero"
    result = cli_runner.invoke(main, ["render", str(recipe_file), "-o", str(base)])

    assert result.exit_code == 0, result.output
    assert "Rendered" in result.output
    assert read_png(tmp_path / "out" / "hero.png").size == (65, 48)
    meta = json.loads((tmp_path / "out" / "hero.json").read_text())
    assert [f["name"] for f in meta["frames"]] == ["hero_front", "hero_back"]
    assert (tmp_path / "out" / "hero.tiled.json").is_file()
    saved = json.loads((tmp_path / "out" / "hero.character.json").read_text())
    assert saved["id"] == "hero"
    assert set(saved["equippedParts"]) == {"hair-front", "eyes", "torso"}


def test_render_uses_recipe_output_path(cli_runner: CliRunner, recipe_file: Path) -> None:
    """Test that without -o the recipe's output_path is used."""
    with cli_runner.isolated_filesystem():
        result = cli_runner.invoke(main, ["render", str(recipe_file)])
        assert result.exit_code == 0, result.output
        assert Path("output/hero.png").is_file()


def test_render_invalid_recipe(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that a bad recipe exits with status 1 and an error message."""
    recipe = tmp_path / "bad.yaml"
    recipe.write_text("character: {id: x}\nviews: []\n")
    result = cli_runner.invoke(main, ["render", str(recipe), "-o", str(tmp_path / "x")])
    assert result.exit_code == 1
    assert "Render failed" in result.output


def test_render_missing_recipe(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that click rejects a recipe path that does not exist."""
    result = cli_runner.invoke(main, ["render", str(tmp_path / "nope.yaml")])
    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# pack
# ---------------------------------------------------------------------------


def test_pack_frames(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that pack names frames after their files."""
    frames = []
    for name in ("idle_0", "idle_1", "idle_2"):
        canvas = create_canvas(4, 4)
        set_pixel(canvas, 0, 0, RED)
        frames.append(str(write_png(tmp_path / f"{name}.png", canvas)))

    base = tmp_path / "sheet"
    result = cli_runner.invoke(
        main,
        ["pack", *frames, "-o", str(base), "--layout", "strip-vertical", "--padding", "2"],
    )

    assert result.exit_code == 0, result.output
    assert read_png(tmp_path / "sheet.png").size == (4, 16)
    meta = json.loads((tmp_path / "sheet.json").read_text())
    assert [f["name"] for f in meta["frames"]] == ["idle_0", "idle_1", "idle_2"]


def test_pack_rejects_unknown_layout(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that the layout option only accepts known layouts."""
    frame = write_png(tmp_path / "a.png", create_canvas(1, 1))
    result = cli_runner.invoke(
        main, ["pack", str(frame), "-o", str(tmp_path / "s"), "--layout", "diagonal"]
    )
    assert result.exit_code == 2


def test_pack_unreadable_frame(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that a frame that is not an image fails cleanly."""
    frame = tmp_path / "a.png"
    frame.write_text("not an image")
    result = cli_runner.invoke(main, ["pack", str(frame), "-o", str(tmp_path / "s")])
    assert result.exit_code == 1
    assert "Pack failed" in result.output


# ---------------------------------------------------------------------------
# flatten
# ---------------------------------------------------------------------------


def test_flatten_layered_sprite(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that flatten writes the composited sprite."""
    sprite = create_layered_canvas(3, 3)
    top = create_canvas(3, 3)
    set_pixel(top, 2, 2, RED)
    add_layer(sprite, "top", buffer=top.buffer)
    write_layered_sprite(tmp_path / "hero", sprite)

    out = tmp_path / "flat.png"
    result = cli_runner.invoke(main, ["flatten", str(tmp_path / "hero"), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert "2 layers" in result.output
    flat = read_png(out)
    assert flat.buffer[-4:] == bytearray([255, 0, 0, 255])


def test_flatten_missing_sprite(cli_runner: CliRunner, tmp_path: Path) -> None:
    """Test that a missing sprite exits with status 1."""
    result = cli_runner.invoke(main, ["flatten", str(tmp_path / "ghost")])
    assert result.exit_code == 1
    assert "Flatten failed" in result.output


# ---------------------------------------------------------------------------
# parts
# ---------------------------------------------------------------------------


def test_parts_lists_everything(cli_runner: CliRunner) -> None:
    """Test that parts prints every built-in part."""
    result = cli_runner.invoke(main, ["parts"])
    assert result.exit_code == 0
    for part_id in ("hair-spiky", "eyes-anime", "torso-robe"):
        assert part_id in result.output


def test_parts_filtered_by_slot(cli_runner: CliRunner) -> None:
    """Test that --slot limits the listing."""
    result = cli_runner.invoke(main, ["parts", "--slot", "eyes"])
    assert result.exit_code == 0
    assert "eyes-round" in result.output
    assert "hair-spiky" not in result.output


def test_parts_search(cli_runner: CliRunner) -> None:
    """Test that --search matches part ids."""
    result = cli_runner.invoke(main, ["parts", "--search", "CURLY"])
    assert result.exit_code == 0
    assert "hair-curly" in result.output
    assert "eyes-round" not in result.output
