################################################################@
"""
Workload model: periodic multi-hop flows and their timing functions.

A flow instance k is released at ``phase + k * period`` and must complete
by ``release + deadline``.  The hyperperiod is the least common multiple
of all flow periods unless the workload file fixes it explicitly.
"""
################################################################@

import logging
import math

from .errors import InvalidFlowDefinition, InvalidTimingConfiguration

logger = logging.getLogger(__name__)


# ---------- Flow ---------- #

class Flow:
    """
    A periodic communication flow along a fixed route.

    ``tx_attempts[i]`` is the number of transmission attempts scheduled on
    hop ``route[i] → route[i + 1]``.
    """

    def __init__(self, name: str, route: list[str], period: int,
                 deadline: int | None = None, phase: int = 0,
                 tx_attempts: list[int] | None = None,
                 priority: int | None = None):
        self.name = name
        self.route = list(route)            # node names, source first
        self.period = period                # time slots
        self.deadline = period if deadline is None else deadline
        self.phase = phase                  # release offset, time slots
        if tx_attempts is None:
            tx_attempts = [1] * max(len(self.route) - 1, 0)
        self.tx_attempts = list(tx_attempts)
        self.priority = priority            # smaller = higher, optional

    def hops(self) -> list[tuple[str, str]]:
        return list(zip(self.route, self.route[1:]))

    def validate(self) -> None:
        """Raise if the route or attempt budget is malformed."""
        if len(self.route) < 2:
            raise InvalidFlowDefinition(
                f"flow {self.name!r} needs at least 2 nodes, "
                f"route is {self.route}", self.name)
        if len(self.tx_attempts) != len(self.route) - 1:
            raise InvalidFlowDefinition(
                f"flow {self.name!r} has {len(self.route) - 1} hops but "
                f"{len(self.tx_attempts)} attempt counts", self.name)
        if any(n < 1 for n in self.tx_attempts):
            raise InvalidFlowDefinition(
                f"flow {self.name!r} has a non-positive attempt count "
                f"{self.tx_attempts}", self.name)
        if self.period <= 0:
            raise InvalidTimingConfiguration(
                f"flow {self.name!r} has non-positive period {self.period}",
                self.name)
        if self.deadline <= 0:
            raise InvalidTimingConfiguration(
                f"flow {self.name!r} has non-positive deadline "
                f"{self.deadline}", self.name)
        if self.phase < 0:
            raise InvalidTimingConfiguration(
                f"flow {self.name!r} has negative phase {self.phase}",
                self.name)

    def __repr__(self):
        return (f"Flow({self.name!r}, route={self.route}, T={self.period}, "
                f"D={self.deadline}, tx={self.tx_attempts})")


# ---------- Workload container ---------- #

class Workload:
    """
    Read-only view of the flows an analysis run works on.

    Flows are kept in priority order (highest priority first).
    """

    def __init__(self, name: str = "", hyper_period: int | None = None):
        self.name = name
        self.flows: dict[str, Flow] = {}     # name → Flow, priority order
        self._hyper_period = hyper_period

    def add_flow(self, flow: Flow) -> None:
        self.flows[flow.name] = flow

    def get_flow(self, name: str) -> Flow:
        """Lookup a flow by name. Raises InvalidFlowDefinition if absent."""
        try:
            return self.flows[name]
        except KeyError:
            raise InvalidFlowDefinition(
                f"unknown flow {name!r}", name) from None

    # ---- queries used by the latency scanner ---- #

    def flow_names_in_priority_order(self) -> list[str]:
        return list(self.flows)

    def nodes_in_flow(self, name: str) -> list[str]:
        return list(self.get_flow(name).route)

    def num_tx_attempts_per_link(self, name: str) -> list[int]:
        return list(self.get_flow(name).tx_attempts)

    @property
    def hyper_period(self) -> int:
        if self._hyper_period is not None:
            return self._hyper_period
        periods = [f.period for f in self.flows.values()]
        if not periods:
            return 0
        return math.lcm(*periods)

    def next_release_time(self, name: str, from_time: int) -> int:
        """Smallest release of flow *name* at or after *from_time*."""
        flow = self.get_flow(name)
        if from_time <= flow.phase:
            return flow.phase
        if flow.period <= 0:
            raise InvalidTimingConfiguration(
                f"flow {name!r} has non-positive period {flow.period}", name)
        k = -(-(from_time - flow.phase) // flow.period)    # ceil division
        return flow.phase + k * flow.period

    def next_absolute_deadline(self, name: str, release_time: int) -> int:
        return release_time + self.get_flow(name).deadline

    def num_instances(self, name: str) -> int:
        """Releases of flow *name* inside ``[0, hyper_period)``."""
        flow = self.get_flow(name)
        if flow.phase >= self.hyper_period:
            return 0
        if flow.period <= 0:
            raise InvalidTimingConfiguration(
                f"flow {name!r} has non-positive period {flow.period}", name)
        return -(-(self.hyper_period - flow.phase) // flow.period)

    def __repr__(self):
        return (f"Workload({self.name!r}, flows={len(self.flows)}, "
                f"H={self.hyper_period})")
