import pytest

from conftest import make_workload
from ttlatency.errors import InvalidFlowDefinition, InvalidTimingConfiguration
from ttlatency.workload import Flow


def test_defaults():
    f = Flow("F", ["A", "B", "C"], period=10)
    assert f.deadline == 10
    assert f.phase == 0
    assert f.tx_attempts == [1, 1]
    assert f.hops() == [("A", "B"), ("B", "C")]


def test_hyper_period_is_lcm_of_periods():
    wl = make_workload(Flow("F1", ["A", "B"], period=4),
                       Flow("F2", ["B", "C"], period=6))
    assert wl.hyper_period == 12


def test_explicit_hyper_period_wins():
    wl = make_workload(Flow("F1", ["A", "B"], period=4), hyper_period=40)
    assert wl.hyper_period == 40


def test_priority_order_is_insertion_order():
    wl = make_workload(Flow("Z", ["A", "B"], period=4),
                       Flow("A", ["A", "B"], period=4))
    assert wl.flow_names_in_priority_order() == ["Z", "A"]


@pytest.mark.parametrize("from_time, expected", [
    (0, 0), (1, 10), (9, 10), (10, 10), (11, 20), (18, 20),
])
def test_next_release_time(from_time, expected):
    wl = make_workload(Flow("F", ["A", "B"], period=10, deadline=8))
    assert wl.next_release_time("F", from_time) == expected


def test_next_release_time_with_phase():
    wl = make_workload(Flow("F", ["A", "B"], period=10, phase=3))
    assert wl.next_release_time("F", 0) == 3
    assert wl.next_release_time("F", 3) == 3
    assert wl.next_release_time("F", 4) == 13
    assert wl.next_absolute_deadline("F", 13) == 23


def test_num_instances():
    wl = make_workload(Flow("F1", ["A", "B"], period=10),
                       Flow("F2", ["A", "B"], period=3), hyper_period=20)
    assert wl.num_instances("F1") == 2
    assert wl.num_instances("F2") == 7


def test_unknown_flow():
    wl = make_workload(Flow("F", ["A", "B"], period=10))
    with pytest.raises(InvalidFlowDefinition):
        wl.nodes_in_flow("nope")


@pytest.mark.parametrize("kwargs, error", [
    (dict(route=["A"]), InvalidFlowDefinition),
    (dict(route=["A", "B", "C"], tx_attempts=[1]), InvalidFlowDefinition),
    (dict(route=["A", "B"], tx_attempts=[0]), InvalidFlowDefinition),
    (dict(route=["A", "B"], period=0), InvalidTimingConfiguration),
    (dict(route=["A", "B"], deadline=0), InvalidTimingConfiguration),
    (dict(route=["A", "B"], phase=-1), InvalidTimingConfiguration),
])
def test_validate_rejects_bad_flows(kwargs, error):
    kwargs.setdefault("period", 10)
    with pytest.raises(error):
        Flow("F", **kwargs).validate()


def test_num_instances_rejects_zero_period():
    wl = make_workload(Flow("F", ["A", "B"], period=0), hyper_period=10)
    with pytest.raises(InvalidTimingConfiguration):
        wl.num_instances("F")
