"""End-to-end test that reconstructs an exploded drawing and verifies the output."""

import math
import random
from pathlib import Path

import ezdxf
import pytest

from loopsmith.config import LoggingConfig, LoopsmithSettings
from loopsmith.core.processor import BoundaryProcessor
from loopsmith.io import DrawingReader

SLOT_AREA = 80.0 + 4.0 * math.pi
HOLE_AREA = math.pi


def write_exploded_slot(path: Path, seed: int) -> None:
    """Write a 20x4 slot with rounded ends and a round hole as loose entities.

    Entities are shuffled and lines randomly reversed, so the drawing order
    says nothing about the loop order.
    """
    rng = random.Random(seed)
    entities: list[tuple] = [
        ("line", (0, 0), (20, 0)),
        ("arc", (20, 2), 2, 270, 90),
        ("line", (20, 4), (0, 4)),
        ("arc", (0, 2), 2, 90, 270),
    ]
    entities += [("arc", (10, 2), 1, 90 * k, 90 * (k + 1)) for k in range(4)]
    rng.shuffle(entities)

    doc = ezdxf.new("R2010")
    msp = doc.modelspace()
    for entity in entities:
        if entity[0] == "line":
            _, start, end = entity
            if rng.random() < 0.5:
                start, end = end, start
            msp.add_line(start, end)
        else:
            _, center, radius, start_angle, end_angle = entity
            msp.add_arc(center, radius, start_angle, end_angle)
    doc.saveas(path)


@pytest.fixture
def processor(tmp_path: Path) -> BoundaryProcessor:
    settings = LoopsmithSettings(logging=LoggingConfig(log_file=tmp_path / "pipeline.log"))
    return BoundaryProcessor(settings, quiet=True)


class TestReconstructionPipeline:
    """Reconstruct exploded drawings and read the result back."""

    @pytest.mark.parametrize("seed", [0, 1, 7])
    def test_slot_with_hole(self, processor, tmp_path, seed):
        input_path = tmp_path / "slot.dxf"
        output_path = tmp_path / "slot-loops.dxf"
        write_exploded_slot(input_path, seed)

        stats = processor.process(input_path, output_path)

        assert stats.fragments_read == 8
        assert stats.loops_assembled == 2
        assert stats.incomplete_loops == 0
        assert stats.holes_subtracted == 1
        assert stats.error_count == 0

        with DrawingReader(output_path) as reader:
            loops = list(reader.iter_loops())
        assert all(loop.complete for loop in loops)
        areas = sorted(loop.area for loop in loops)
        assert areas == pytest.approx([HOLE_AREA, SLOT_AREA])
        assert sorted(len(loop.vertices) for loop in loops) == [4, 4]

        hatches = list(ezdxf.readfile(output_path).modelspace().query("HATCH"))
        assert len(hatches) == 1
        assert len(hatches[0].paths) == 2

    def test_output_reassembles(self, processor, tmp_path):
        """Exploding the written loops and rebuilding them gives the same areas."""
        input_path = tmp_path / "slot.dxf"
        output_path = tmp_path / "slot-loops.dxf"
        write_exploded_slot(input_path, seed=3)
        processor.process(input_path, output_path)

        fragments, _ = processor.read_fragments(output_path)
        result = processor.reconstruct(fragments)
        try:
            assert len(result.assembly.complete_loops) == 2
            (composition,) = result.compositions.values()
            assert composition.region.area == pytest.approx(SLOT_AREA - HOLE_AREA, rel=1e-2)
        finally:
            result.release()
