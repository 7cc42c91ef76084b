"""Analysis settings."""

from dataclasses import dataclass

# Instance completes when matches == required (prior results) or >= required
COMPLETION_EXACT = "exact"
COMPLETION_AT_LEAST = "at-least"
COMPLETION_RULES = (COMPLETION_EXACT, COMPLETION_AT_LEAST)

# Deadline miss when latency > release + D, or latency > D
MISS_ABSOLUTE = "absolute"
MISS_RELATIVE = "relative"
MISS_REFERENCES = (MISS_ABSOLUTE, MISS_RELATIVE)


@dataclass(frozen=True)
class AnalysisSettings:
    """Knobs for one latency analysis run.

    The defaults reproduce the reports of earlier analysis runs exactly.
    """

    completion_rule: str = COMPLETION_EXACT
    miss_reference: str = MISS_ABSOLUTE
    max_workers: int = 1

    def __post_init__(self):
        if self.completion_rule not in COMPLETION_RULES:
            raise ValueError(
                f"completion_rule must be one of {COMPLETION_RULES}, "
                f"got {self.completion_rule!r}")
        if self.miss_reference not in MISS_REFERENCES:
            raise ValueError(
                f"miss_reference must be one of {MISS_REFERENCES}, "
                f"got {self.miss_reference!r}")
        if self.max_workers < 1:
            raise ValueError(
                f"max_workers must be >= 1, got {self.max_workers}")

    def is_complete(self, tx_processed: int, tx_required: int) -> bool:
        if self.completion_rule == COMPLETION_AT_LEAST:
            return tx_processed >= tx_required
        return tx_processed == tx_required

    def misses(self, latency: int, release: int, deadline: int) -> bool:
        """*deadline* is the instance's absolute deadline."""
        if self.miss_reference == MISS_RELATIVE:
            return latency > deadline - release
        return latency > deadline
