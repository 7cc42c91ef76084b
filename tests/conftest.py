import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from ttlatency.schedule import ProgramSchedule
from ttlatency.workload import Flow, Workload

SAMPLES = ROOT / "Samples"


def make_workload(*flows: Flow, hyper_period: int | None = None) -> Workload:
    wl = Workload("test", hyper_period=hyper_period)
    for f in flows:
        wl.add_flow(f)
    return wl


@pytest.fixture
def f1_workload() -> Workload:
    """F1: A -> B -> C, 1 attempt on A->B, 2 on B->C, T=10, D=8."""
    return make_workload(
        Flow("F1", ["A", "B", "C"], period=10, deadline=8, tx_attempts=[1, 2]),
        hyper_period=20,
    )


@pytest.fixture
def f1_schedule() -> ProgramSchedule:
    return ProgramSchedule.from_cells(
        ["A", "B", "C"],
        {
            (0, "A"): "push(F1: A->B, #1)",
            (0, "B"): "push(F1: B->C, #2)",
            (2, "C"): "pull(F1: B->C, #2)",
        },
        num_slots=20,
    )


@pytest.fixture
def sample_xml() -> Path:
    return SAMPLES / "example.xml"
