################################################################@
"""
Instruction-cell decoder for time-triggered program tables.

A program table cell holds the instructions one node executes in one time
slot, encoded as a single string.  Several instructions may share a cell
(separated by ``;``) and a single instruction may carry more than one
``opcode(args)`` token, e.g. ``if has(F0) push(F0: A->B, #1) else
pull(F0: A->B, #1)``.

Only ``push`` and ``pull`` tokens carry flow semantics.  Their first three
arguments are the flow name, the source node and the sink node; arguments
are separated by ``,``, ``:`` or ``->``.  Every other token (``has``,
``sleep``, ``wait`` ...) decodes to an :class:`Other` record that never
matches a flow.

Decoding is total: no string makes :func:`decode` raise.
"""
################################################################@

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import ClassVar

INSTRUCTION_SEPARATOR = ";"

# opcode must start the instruction or follow whitespace / a closing paren
_TOKEN_RE = re.compile(r"(?<![^\s)])([A-Za-z_]\w*)\s*\(([^()]*)\)")
_ARG_SPLIT_RE = re.compile(r"->|[,:]")
_BARE_OPCODE_RE = re.compile(r"[A-Za-z_]\w*")


# ---------- Instruction variants ---------- #

class Instruction(ABC):
    """One decoded instruction token."""

    @abstractmethod
    def is_transmission(self) -> bool:
        ...

    def matches(self, flow: str, src: str, snk: str) -> bool:
        """True if this record is a transmission attempt for the
        hop *src* → *snk* of *flow*."""
        return False


@dataclass(frozen=True)
class Transmission(Instruction):
    """A push or pull attempt on one hop of one flow."""

    flow: str
    src: str
    snk: str

    opcode: ClassVar[str] = ""

    def is_transmission(self) -> bool:
        return True

    def matches(self, flow: str, src: str, snk: str) -> bool:
        return self.flow == flow and self.src == src and self.snk == snk

    def __repr__(self):
        return f"{self.__class__.__name__}({self.flow}: {self.src}->{self.snk})"


class Push(Transmission):
    opcode = "push"


class Pull(Transmission):
    opcode = "pull"


@dataclass(frozen=True)
class Other(Instruction):
    """Any token without flow semantics, including malformed text."""

    opcode: str
    text: str = ""

    def is_transmission(self) -> bool:
        return False


TRANSMISSION_OPCODES: dict[str, type[Transmission]] = {
    Push.opcode: Push,
    Pull.opcode: Pull,
}


# ---------- Decoder ---------- #

def _split_args(raw: str) -> list[str]:
    return [a.strip() for a in _ARG_SPLIT_RE.split(raw)]


def _decode_token(opcode: str, raw_args: str, text: str) -> Instruction:
    variant = TRANSMISSION_OPCODES.get(opcode)
    if variant is None:
        return Other(opcode, text)
    args = _split_args(raw_args)
    if len(args) < 3 or not all(args[:3]):
        return Other(opcode, text)
    return variant(args[0], args[1], args[2])


def _decode_instruction(instr: str) -> list[Instruction]:
    records: list[Instruction] = []
    for m in _TOKEN_RE.finditer(instr):
        records.append(_decode_token(m.group(1), m.group(2), m.group(0)))
    if not records:
        # bare opcode (e.g. "sleep") or unparseable text
        bare = _BARE_OPCODE_RE.match(instr)
        records.append(Other(bare.group(0) if bare else "", instr))
    return records


@lru_cache(maxsize=4096)
def _decode_cell(cell: str) -> tuple[Instruction, ...]:
    records: list[Instruction] = []
    for instr in cell.split(INSTRUCTION_SEPARATOR):
        instr = instr.strip()
        if instr:
            records.extend(_decode_instruction(instr))
    return tuple(records)


def decode(cell: str | None) -> tuple[Instruction, ...]:
    """Decode one program table cell into its instruction records.

    An empty (or ``None``) cell yields an empty tuple.  The result is
    immutable and identical for identical input.
    """
    if not cell:
        return ()
    return _decode_cell(str(cell))


def count_matching(flow: str, src: str, snk: str, cell: str | None) -> int:
    """Number of transmission attempts in *cell* for hop *src* → *snk*
    of *flow*."""
    if flow is None or src is None or snk is None:
        return 0
    return sum(1 for rec in decode(cell)
               if rec.is_transmission() and rec.matches(flow, src, snk))
