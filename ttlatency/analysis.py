################################################################@
"""
Latency analysis of a time-triggered program table.

For each flow (in priority order) every periodic instance inside the
hyperperiod is replayed against the schedule.  Only the final hop
``src → snk`` of the route is watched: once the number of matching
push/pull attempts seen in the src and snk columns reaches the number of
attempts the flow needs on that hop, the instance is complete and its
latency is ``completion slot - release + 1``.

Output, one line per instance plus a separator per flow:

    Maximum latency for F1:0 is 3
    Maximum latency for F1:1 is 9 => DEADLINE MISS
    UNKNOWN latency for F1:2; Not enough transmissions attempted
    ******************************

Instances whose window ``[release, next release)`` closes before the
attempt count completes are reported as UNKNOWN.  This assumes
deadline <= period.
"""
################################################################@

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace

from .config import AnalysisSettings
from .errors import InvalidFlowDefinition, InvalidTimingConfiguration
from .instructions import count_matching
from .report import (FLOW_SEPARATOR, LatencyReport, latency_finding,
                     unknown_finding)
from .schedule import ProgramSchedule
from .workload import Workload

logger = logging.getLogger(__name__)


# ---------- Per-flow setup ---------- #

@dataclass(frozen=True)
class FinalHop:
    """Everything the instance scan needs about one flow."""

    flow: str
    src: str
    snk: str
    src_column: int
    snk_column: int
    tx_required: int


@dataclass(frozen=True)
class ScanState:
    """State of one instance scan; ``latency`` is None until complete."""

    time: int
    tx_processed: int = 0
    latency: int | None = None


def resolve_final_hop(flow: str, workload: Workload,
                      node_index: Mapping[str, int]) -> FinalHop:
    """Check *flow*'s definition and locate its last hop in the table."""
    workload.get_flow(flow).validate()
    nodes = workload.nodes_in_flow(flow)
    attempts = workload.num_tx_attempts_per_link(flow)
    snk = nodes[-1]
    src = nodes[-2]
    for node in (src, snk):
        if node not in node_index:
            raise InvalidFlowDefinition(
                f"node {node!r} of flow {flow!r} is not a schedule column",
                flow)
    return FinalHop(flow, src, snk, node_index[src], node_index[snk],
                    attempts[-1])


def check_timing(flow: str, workload: Workload) -> None:
    """Reject timing functions that would stall the instance loop."""
    if workload.hyper_period <= 0:
        raise InvalidTimingConfiguration(
            f"hyperperiod must be positive, got {workload.hyper_period}",
            flow)
    release = workload.next_release_time(flow, 0)
    deadline = workload.next_absolute_deadline(flow, release)
    next_release = workload.next_release_time(flow, deadline)
    if release < 0 or deadline <= release or next_release <= release:
        raise InvalidTimingConfiguration(
            f"release times of flow {flow!r} do not advance "
            f"(release={release}, deadline={deadline}, "
            f"next release={next_release})", flow)


# ---------- Instance scan ---------- #

def scan_instance(hop: FinalHop, schedule: ProgramSchedule, release: int,
                  next_release: int,
                  settings: AnalysisSettings) -> ScanState:
    """Walk slots ``[release, next_release)`` until the final hop has seen
    its required attempts.  Returns the state at loop exit."""
    state = ScanState(time=release)
    while state.time < next_release:
        t = state.time
        matched = (
            count_matching(hop.flow, hop.src, hop.snk,
                           schedule.get(t, hop.src_column))
            + count_matching(hop.flow, hop.src, hop.snk,
                             schedule.get(t, hop.snk_column))
        )
        state = replace(state, tx_processed=state.tx_processed + matched)
        if settings.is_complete(state.tx_processed, hop.tx_required):
            return replace(state, latency=t - release + 1)
        state = replace(state, time=t + 1)
    return state


def analyze_flow(hop: FinalHop, schedule: ProgramSchedule,
                 workload: Workload,
                 settings: AnalysisSettings) -> list[str]:
    """Finding lines for every instance of one flow, separator included."""
    lines: list[str] = []
    hyper_period = workload.hyper_period
    time = 0
    instance = 0
    while time < hyper_period:
        release = workload.next_release_time(hop.flow, time)
        if release >= hyper_period:
            break
        deadline = workload.next_absolute_deadline(hop.flow, release)
        next_release = workload.next_release_time(hop.flow, deadline)
        if next_release <= release:
            raise InvalidTimingConfiguration(
                f"release times of flow {hop.flow!r} stop advancing "
                f"at {release}", hop.flow)

        state = scan_instance(hop, schedule, release, next_release, settings)
        if state.latency is not None:
            missed = settings.misses(state.latency, release, deadline)
            lines.append(latency_finding(hop.flow, instance,
                                         state.latency, missed))
        else:
            lines.append(unknown_finding(hop.flow, instance))
        logger.debug("%s:%d release=%d deadline=%d window_end=%d tx=%d/%d "
                     "latency=%s", hop.flow, instance, release, deadline,
                     next_release, state.tx_processed, hop.tx_required,
                     state.latency)

        time = next_release
        instance += 1
    lines.append(FLOW_SEPARATOR)
    return lines


# ---------- Entry point ---------- #

def analyze(flows: Sequence[str], schedule: ProgramSchedule,
            node_index: Mapping[str, int], workload: Workload,
            sink: LatencyReport | None = None, *,
            settings: AnalysisSettings | None = None) -> LatencyReport:
    """Append the latency findings of *flows* to *sink* and return it.

    *flows* must be in priority order; it only fixes the output order.
    Every flow is validated before the first instance is scanned, so an
    invalid flow aborts the whole run and leaves *sink* untouched.
    """
    if settings is None:
        settings = AnalysisSettings()
    if sink is None:
        sink = LatencyReport()

    hops = []
    for flow in flows:
        hop = resolve_final_hop(flow, workload, node_index)
        check_timing(flow, workload)
        f = workload.get_flow(flow)
        if f.deadline > f.period:
            logger.warning("flow %s has deadline %d > period %d; "
                           "instance windows overlap the next release",
                           flow, f.deadline, f.period)
        hops.append(hop)

    if settings.max_workers > 1 and len(hops) > 1:
        with ThreadPoolExecutor(max_workers=settings.max_workers) as pool:
            results = list(pool.map(
                lambda h: analyze_flow(h, schedule, workload, settings), hops))
    else:
        results = [analyze_flow(h, schedule, workload, settings)
                   for h in hops]

    for lines in results:
        sink.extend(lines)

    logger.info("latency analysis: %d flows, hyperperiod %d, %d findings",
                len(hops), workload.hyper_period, len(sink))
    return sink


def latency_report(workload: Workload, schedule: ProgramSchedule,
                   settings: AnalysisSettings | None = None) -> LatencyReport:
    """Analyze every flow of *workload* in its priority order."""
    return analyze(workload.flow_names_in_priority_order(), schedule,
                   schedule.node_index, workload, settings=settings)
