################################################################@
"""
Program table: the time-triggered schedule under analysis.

Rows are time slots, columns are nodes.  Each cell holds the encoded
instruction string one node executes in one slot (see
:mod:`ttlatency.instructions`).
"""
################################################################@

from collections.abc import Iterable, Mapping
from types import MappingProxyType


class ProgramSchedule:
    """
    Read-only ``(time slot, node column)`` → instruction-cell table.

    The node index is fixed at construction and exposed as a read-only
    mapping.  Slots past the end of the table and columns past the end of a
    row read as the empty cell.
    """

    def __init__(self, node_names: Iterable[str],
                 rows: Iterable[Iterable[str]] = ()):
        names = list(node_names)
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate node names in schedule: {names}")
        self._node_index: Mapping[str, int] = MappingProxyType(
            {name: col for col, name in enumerate(names)})
        self._rows: list[tuple[str, ...]] = [
            tuple("" if c is None else str(c) for c in row) for row in rows
        ]

    @classmethod
    def from_cells(cls, node_names: Iterable[str],
                   cells: Mapping[tuple[int, str], str],
                   num_slots: int = 0) -> "ProgramSchedule":
        """Build a table from a sparse ``{(time, node): cell}`` mapping."""
        names = list(node_names)
        col = {name: i for i, name in enumerate(names)}
        length = max([num_slots] + [t + 1 for t, _ in cells])
        rows = [[""] * len(names) for _ in range(length)]
        for (time, node), content in cells.items():
            rows[time][col[node]] = content
        return cls(names, rows)

    @property
    def node_index(self) -> Mapping[str, int]:
        return self._node_index

    @property
    def node_names(self) -> list[str]:
        return list(self._node_index)

    @property
    def num_slots(self) -> int:
        return len(self._rows)

    def get(self, time_slot: int, column: int) -> str:
        """Raw cell content, ``""`` when nothing is scheduled."""
        if time_slot < 0 or time_slot >= len(self._rows):
            return ""
        row = self._rows[time_slot]
        if column < 0 or column >= len(row):
            return ""
        return row[column]

    def __repr__(self):
        return (f"ProgramSchedule(nodes={self.node_names}, "
                f"slots={self.num_slots})")
