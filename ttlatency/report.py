################################################################@
"""
Latency report: the append-only finding sink plus its file writers.

The analysis engine only ever calls :meth:`LatencyReport.add`.  Turning
the lines into files (plain text or XML) is done here, selected through
:data:`REPORT_WRITERS`.
"""
################################################################@

import os.path
import re
from collections.abc import Iterator
from enum import Enum
from xml.sax.saxutils import quoteattr

from .workload import Workload

DEADLINE_MISS = " => DEADLINE MISS"
FLOW_SEPARATOR = "*" * 30

_LATENCY_RE = re.compile(
    r"^Maximum latency for (?P<flow>.+):(?P<instance>\d+) is "
    r"(?P<latency>\d+)(?P<miss>" + re.escape(DEADLINE_MISS) + r")?$")
_UNKNOWN_RE = re.compile(
    r"^UNKNOWN latency for (?P<flow>.+):(?P<instance>\d+); "
    r"Not enough transmissions attempted$")


# ---------- Finding lines ---------- #

def latency_finding(flow: str, instance: int, latency: int,
                    missed: bool) -> str:
    line = f"Maximum latency for {flow}:{instance} is {latency}"
    if missed:
        line += DEADLINE_MISS
    return line


def unknown_finding(flow: str, instance: int) -> str:
    return (f"UNKNOWN latency for {flow}:{instance}; "
            f"Not enough transmissions attempted")


class LatencyReport:
    """Ordered, append-only sequence of report lines."""

    def __init__(self):
        self._lines: list[str] = []

    def add(self, line: str) -> None:
        self._lines.append(line)

    def extend(self, lines: list[str]) -> None:
        self._lines.extend(lines)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    def groups(self) -> list[list[str]]:
        """Finding lines split per flow, separators dropped."""
        out: list[list[str]] = []
        current: list[str] = []
        for line in self._lines:
            if line == FLOW_SEPARATOR:
                out.append(current)
                current = []
            else:
                current.append(line)
        if current:
            out.append(current)
        return out

    def groups_by_flow(self) -> dict[str, list[str]]:
        """Finding lines keyed by the flow they report on.

        Groups without a finding line are skipped; when a flow was analyzed
        more than once into this report, its latest group wins.
        """
        out: dict[str, list[str]] = {}
        for group in self.groups():
            for line in group:
                m = _LATENCY_RE.match(line) or _UNKNOWN_RE.match(line)
                if m:
                    out[m.group("flow")] = group
                    break
        return out

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __str__(self):
        return "".join(line + "\n" for line in self._lines)

    def __repr__(self):
        return f"LatencyReport(lines={len(self._lines)})"


# ---------- Writers ---------- #

class ReportKind(Enum):
    TEXT = "text"
    XML = "xml"


def write_text_report(report: LatencyReport, workload: Workload,
                      filename: str) -> None:
    with open(filename, "w", encoding="utf-8") as f:
        f.write(str(report))


def write_xml_report(report: LatencyReport, workload: Workload,
                     filename: str) -> None:
    """Write the findings as XML.

    Structure:
    <results workload="…" hyperperiod="…">
        <latencies>
            <flow name="…" deadline="…" period="…">
                <instance index="0" latency="3" deadline-miss="false" />
                <instance index="1" status="UNKNOWN" />
            </flow>
        </latencies>
    </results>
    """
    by_flow = report.groups_by_flow()
    with open(filename, "w", encoding="utf-8") as f:
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        f.write(f'<results workload={quoteattr(workload.name)} '
                f'hyperperiod="{workload.hyper_period}">\n')
        f.write('\t<latencies>\n')
        for name in workload.flow_names_in_priority_order():
            flow = workload.get_flow(name)
            f.write(f'\t\t<flow name={quoteattr(name)} '
                    f'deadline="{flow.deadline}" period="{flow.period}">\n')
            for line in by_flow.get(name, []):
                m = _LATENCY_RE.match(line)
                if m:
                    missed = "true" if m.group("miss") else "false"
                    f.write(f'\t\t\t<instance index="{m.group("instance")}" '
                            f'latency="{m.group("latency")}" '
                            f'deadline-miss="{missed}" />\n')
                    continue
                m = _UNKNOWN_RE.match(line)
                if m:
                    f.write(f'\t\t\t<instance index="{m.group("instance")}" '
                            f'status="UNKNOWN" />\n')
            f.write('\t\t</flow>\n')
        f.write('\t</latencies>\n')
        f.write('</results>\n')


REPORT_WRITERS = {
    ReportKind.TEXT: write_text_report,
    ReportKind.XML: write_xml_report,
}

REPORT_SUFFIXES = {
    ReportKind.TEXT: "_latency.txt",
    ReportKind.XML: "_latency.xml",
}


def report_file_name(input_file: str, kind: ReportKind = ReportKind.TEXT) -> str:
    """``dir/example.xml`` → ``dir/example_latency.txt`` (or ``.xml``)."""
    root, _ = os.path.splitext(input_file)
    return root + REPORT_SUFFIXES[kind]


def export_report(report: LatencyReport, workload: Workload, filename: str,
                  kind: ReportKind = ReportKind.TEXT) -> None:
    REPORT_WRITERS[kind](report, workload, filename)


def file_to_stdout(filename: str):
    """Print a written report file."""
    if os.path.isfile(filename):
        with open(filename, "r", encoding="utf-8") as f:
            print(f.read(), end="")
