"""Latency analysis of time-triggered transmission schedules."""

from .analysis import analyze, latency_report
from .config import AnalysisSettings
from .errors import (InvalidFlowDefinition, InvalidTimingConfiguration,
                     LatencyAnalysisError, LoaderError)
from .instructions import Other, Pull, Push, count_matching, decode
from .loader import parse_workload
from .report import LatencyReport, ReportKind
from .schedule import ProgramSchedule
from .workload import Flow, Workload

__all__ = [
    "AnalysisSettings",
    "Flow",
    "InvalidFlowDefinition",
    "InvalidTimingConfiguration",
    "LatencyAnalysisError",
    "LatencyReport",
    "LoaderError",
    "Other",
    "ProgramSchedule",
    "Pull",
    "Push",
    "ReportKind",
    "Workload",
    "analyze",
    "count_matching",
    "decode",
    "latency_report",
    "parse_workload",
]
