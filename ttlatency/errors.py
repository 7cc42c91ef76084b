"""Exceptions raised by the latency analysis engine and its loaders.

Deadline misses and missing transmissions are *findings*, not errors, and
never surface through this module.
"""


class LatencyAnalysisError(Exception):
    """Base class for every fatal analysis precondition failure."""

    def __init__(self, message: str, flow: str | None = None):
        super().__init__(message)
        self.flow = flow


class InvalidFlowDefinition(LatencyAnalysisError):
    """A flow's route or attempt budget breaks the workload contract."""


class InvalidTimingConfiguration(LatencyAnalysisError):
    """Timing inputs would make the instance scan loop never terminate."""


class LoaderError(Exception):
    """An input file could not be read or parsed."""
