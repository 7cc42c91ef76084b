################################################################@
"""
XML input: workload flows plus the program table to analyze.

    <workload name="Example" hyperperiod="20">
      <flow name="F1" period="10" deadline="8" phase="0" tx-attempts="1,2">
        <path node="A" />
        <path node="B" />
        <path node="C" />
      </flow>
      <schedule>
        <node name="A" />
        <node name="B" />
        <node name="C" />
        <slot time="0">
          <cell node="B">push(F1: B->C, #1)</cell>
        </slot>
      </schedule>
    </workload>

Flows keep document order as priority order unless every flow has a
``priority`` attribute (smaller = higher).  ``deadline`` defaults to the
period, ``phase`` to 0 and ``tx-attempts`` to one attempt per hop.
Without ``<node>`` tags the schedule columns follow the order in which
nodes first appear along the flow routes.
"""
################################################################@

import logging
import os.path
import xml.etree.ElementTree as ET

from .errors import LoaderError
from .schedule import ProgramSchedule
from .workload import Flow, Workload

logger = logging.getLogger(__name__)


def _parse_int(el: ET.Element, attr: str, default: int | None = None) -> int | None:
    raw = el.get(attr)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise LoaderError(
            f"<{el.tag}> attribute {attr}={raw!r} is not an integer") from None


def _parse_int_list(raw: str | None) -> list[int] | None:
    """``"1,2, 3"`` → ``[1, 2, 3]``."""
    if raw is None:
        return None
    try:
        return [int(x) for x in raw.replace(" ", "").split(",") if x]
    except ValueError:
        raise LoaderError(f"bad attempt list {raw!r}") from None


def _parse_workload_attributes(root: ET.Element) -> Workload:
    """Read the root tag's name and optional fixed hyperperiod."""
    return Workload(root.get("name", ""),
                    hyper_period=_parse_int(root, "hyperperiod"))


def _parse_flows(root: ET.Element, wl: Workload) -> None:
    """Parse every <flow> tag with its <path> nodes."""
    flows: list[Flow] = []
    for el in root.findall("flow"):
        name = el.get("name")
        if not name:
            raise LoaderError("<flow> without a name")
        period = _parse_int(el, "period")
        if period is None:
            raise LoaderError(f"flow {name!r} has no period")
        route = [pt.get("node") for pt in el.findall("path")]
        flows.append(Flow(name, route,
                          period=period,
                          deadline=_parse_int(el, "deadline"),
                          phase=_parse_int(el, "phase", 0),
                          tx_attempts=_parse_int_list(el.get("tx-attempts")),
                          priority=_parse_int(el, "priority")))

    if flows and all(f.priority is not None for f in flows):
        flows.sort(key=lambda f: f.priority)     # stable
    for flow in flows:
        if flow.name in wl.flows:
            raise LoaderError(f"duplicate flow {flow.name!r}")
        wl.add_flow(flow)


def _schedule_columns(sched: ET.Element | None, wl: Workload) -> list[str]:
    if sched is not None:
        names = [n.get("name") for n in sched.findall("node")]
        if names:
            return names
    names: list[str] = []
    for flow in wl.flows.values():
        for node in flow.route:
            if node not in names:
                names.append(node)
    return names


def _parse_schedule(root: ET.Element, wl: Workload) -> ProgramSchedule:
    """Parse the <schedule> tag into a program table."""
    sched = root.find("schedule")
    columns = _schedule_columns(sched, wl)
    cells: dict[tuple[int, str], str] = {}
    if sched is not None:
        for slot in sched.findall("slot"):
            time = _parse_int(slot, "time")
            if time is None or time < 0:
                raise LoaderError(f"<slot> needs a non-negative time, "
                                  f"got {slot.get('time')!r}")
            if wl.flows and time >= wl.hyper_period > 0:
                logger.warning("slot %d lies beyond the hyperperiod %d",
                               time, wl.hyper_period)
            for cell in slot.findall("cell"):
                node = cell.get("node")
                if node not in columns:
                    logger.warning("slot %d: cell for unknown node %r ignored",
                                   time, node)
                    continue
                text = (cell.text or "").strip()
                key = (time, node)
                # several <cell> tags for one node share the slot
                cells[key] = f"{cells[key]}; {text}" if key in cells else text
    return ProgramSchedule.from_cells(columns, cells)


# ---------- top-level entry point ---------- #

def parse_workload(xml_file: str) -> tuple[Workload, ProgramSchedule]:
    """Parse a workload/schedule XML file."""
    if not os.path.isfile(xml_file):
        raise LoaderError(f"File not found: {xml_file}")
    try:
        tree = ET.parse(xml_file)
    except ET.ParseError as exc:
        raise LoaderError(f"{xml_file}: {exc}") from exc
    root = tree.getroot()

    wl = _parse_workload_attributes(root)
    _parse_flows(root, wl)
    schedule = _parse_schedule(root, wl)
    logger.debug("loaded %r and %r from %s", wl, schedule, xml_file)
    return wl, schedule


def trace(wl: Workload, schedule: ProgramSchedule) -> None:
    """Print a summary of the loaded input."""
    print(f"Workload {wl.name!r}  (hyperperiod={wl.hyper_period})")
    print("\nFlows (priority order):")
    for f in wl.flows.values():
        print(f"\t{f.name}: route={' -> '.join(f.route)}  "
              f"(T={f.period}, D={f.deadline}, phase={f.phase}, "
              f"instances={wl.num_instances(f.name)})")
        for (a, b), n in zip(f.hops(), f.tx_attempts):
            print(f"\t\t{a} -> {b}  tx={n}")
    print("\nSchedule columns:")
    for name, col in schedule.node_index.items():
        print(f"\t{col}: {name}")
    print(f"\t({schedule.num_slots} slots)\n")
