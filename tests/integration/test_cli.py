"""Tests for the command line interface."""

from pathlib import Path

import ezdxf
import pytest
from typer.testing import CliRunner

from loopsmith import __version__
from loopsmith.cli.app import app

runner = CliRunner()


@pytest.fixture
def log_args(tmp_path: Path) -> list[str]:
    return ["--log-file", str(tmp_path / "cli.log")]


def square(size: float, x0: float, y0: float) -> list[tuple[float, float]]:
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]


@pytest.fixture
def exploded_drawing(tmp_path: Path) -> Path:
    """A framed square as loose lines on CUT, and a small square on NOTES."""
    doc = ezdxf.new("R2010")
    msp = doc.modelspace()
    for corners, layer in (
        (square(20, 0, 0), "CUT"),
        (square(10, 5, 5), "CUT"),
        (square(2, 50, 0), "NOTES"),
    ):
        for a, b in zip(corners, corners[1:] + corners[:1]):
            msp.add_line(a, b, dxfattribs={"layer": layer})
    path = tmp_path / "exploded.dxf"
    doc.saveas(path)
    return path


@pytest.fixture
def framed_drawing(tmp_path: Path) -> Path:
    """Two nested closed polylines."""
    doc = ezdxf.new("R2010")
    msp = doc.modelspace()
    msp.add_lwpolyline(square(20, 0, 0), close=True)
    msp.add_lwpolyline(square(10, 5, 5), close=True)
    path = tmp_path / "frame.dxf"
    doc.saveas(path)
    return path


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestReconstructCommand:
    def test_default_output(self, log_args, exploded_drawing):
        result = runner.invoke(app, [*log_args, "-q", "reconstruct", str(exploded_drawing)])
        assert result.exit_code == 0
        assert (exploded_drawing.parent / "exploded-loops.dxf").exists()

    def test_layer_filter(self, log_args, exploded_drawing, tmp_path):
        output = tmp_path / "cut.dxf"
        result = runner.invoke(
            app,
            [*log_args, "-q", "reconstruct", str(exploded_drawing), "-o", str(output), "-l", "cut"],
        )
        assert result.exit_code == 0
        msp = ezdxf.readfile(output).modelspace()
        assert len(msp.query("LWPOLYLINE")) == 2

    def test_missing_input(self, log_args, tmp_path):
        result = runner.invoke(app, [*log_args, "reconstruct", str(tmp_path / "missing.dxf")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_broken_input(self, log_args, tmp_path):
        path = tmp_path / "broken.dxf"
        path.write_text("not a drawing\n")
        result = runner.invoke(app, [*log_args, "-q", "reconstruct", str(path)])
        assert result.exit_code == 1

    def test_empty_drawing(self, log_args, tmp_path):
        path = tmp_path / "empty.dxf"
        ezdxf.new("R2010").saveas(path)
        result = runner.invoke(app, [*log_args, "reconstruct", str(path)])
        assert result.exit_code == 1
        assert "No closed loops" in result.output


class TestOffsetCommand:
    def test_offset(self, log_args, framed_drawing, tmp_path):
        output = tmp_path / "offset.dxf"
        result = runner.invoke(
            app,
            [*log_args, "offset", str(framed_drawing), "-o", str(output), "-d", "1.5"],
        )
        assert result.exit_code == 0
        msp = ezdxf.readfile(output).modelspace()
        assert len(msp.query("LWPOLYLINE")) == 4
        assert len(msp.query("HATCH")) == 4

    def test_zero_distance(self, log_args, framed_drawing):
        result = runner.invoke(app, [*log_args, "offset", str(framed_drawing), "-d", "0"])
        assert result.exit_code == 1

    def test_needs_two_polylines(self, log_args, tmp_path):
        doc = ezdxf.new("R2010")
        doc.modelspace().add_line((0, 0), (1, 0))
        path = tmp_path / "lines.dxf"
        doc.saveas(path)
        result = runner.invoke(app, [*log_args, "-q", "offset", str(path)])
        assert result.exit_code == 1


class TestLoopsCommand:
    def test_lists_loops(self, log_args, exploded_drawing):
        result = runner.invoke(app, [*log_args, "loops", str(exploded_drawing)])
        assert result.exit_code == 0
        assert "3 loops" in result.output
        assert "outer" in result.output
        assert "hole" in result.output
