"""Reading distributed meshes and writing partition and ordering vectors."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from partkit.graphio import distribute_evenly


class MeshFormatError(ValueError):
    """Raised when a mesh file is malformed."""


# Nodes per element and default number of common nodes, indexed by element type.
ELEMENT_SIZES = {1: 3, 2: 4, 3: 8, 4: 4}
COMMON_NODES = {1: 2, 2: 3, 3: 4, 4: 2}


@dataclass
class Mesh:
    """A mesh whose elements are split across processors.

    ``elements`` holds ``esize`` node ids per element, renumbered so that the
    smallest node id in the whole mesh is 0. ``gnns`` is the number of nodes.
    """

    elmdist: list[int]
    elements: list[int]
    etype: int
    gnns: int

    @property
    def npes(self) -> int:
        return len(self.elmdist) - 1

    @property
    def gnelms(self) -> int:
        return self.elmdist[-1]

    @property
    def esize(self) -> int:
        return ELEMENT_SIZES[self.etype]

    @property
    def ncommon(self) -> int:
        """Default number of shared nodes that make two elements neighbours."""
        return COMMON_NODES[self.etype]

    def local_elements(self, pe: int) -> list[int]:
        """Return the flat node lists of the elements owned by ``pe``."""
        if not 0 <= pe < self.npes:
            raise IndexError(f"processor {pe} out of range 0..{self.npes - 1}")
        esize = self.esize
        return self.elements[self.elmdist[pe] * esize:self.elmdist[pe + 1] * esize]


def _ints(line: str, count: int, path: str | Path) -> list[int]:
    tokens = line.split()
    if len(tokens) < count:
        raise MeshFormatError(f"expected {count} numbers on a line of '{path}'")
    try:
        return [int(tok) for tok in tokens[:count]]
    except ValueError as exc:
        raise MeshFormatError(f"bad number in '{path}': {exc}") from exc


def read_mesh(path: str | Path, npes: int = 1) -> Mesh:
    """Read a mesh file and distribute its elements over ``npes`` processors.

    The header (after ``%`` comment lines) holds the element count and type.
    """
    with open(path, encoding="utf-8") as fh:
        lines = iter(fh)
        header = next((line for line in lines if not line.startswith("%")), None)
        if header is None:
            raise MeshFormatError(f"missing header in '{path}'")
        gnelms, etype = _ints(header, 2, path)
        if gnelms < 0:
            raise MeshFormatError(f"negative element count in '{path}'")
        if etype not in ELEMENT_SIZES:
            raise MeshFormatError(f"unknown element type {etype} in '{path}'")
        esize = ELEMENT_SIZES[etype]

        elements: list[int] = []
        for _ in range(gnelms):
            line = next(lines, None)
            if line is None:
                raise MeshFormatError(f"unexpected end of file in '{path}'")
            elements.extend(_ints(line, esize, path))

    gnns = 0
    if elements:
        lowest = min(elements)
        elements = [node - lowest for node in elements]
        gnns = max(elements) + 1

    return Mesh(
        elmdist=distribute_evenly(gnelms, npes),
        elements=elements,
        etype=etype,
        gnns=gnns,
    )


def write_partition(gname: str | Path, part: Iterable[int]) -> Path:
    """Write a partition vector, one entry per line, to ``gname.part``."""
    out = Path(f"{gname}.part")
    with open(out, "w", encoding="utf-8") as fh:
        fh.writelines(f"{p}\n" for p in part)
    return out


def ordering_problems(order: Sequence[int]) -> list[tuple[int, int]]:
    """Return ``(index, count)`` for every position not used exactly once by ``order``."""
    n = len(order)
    counts = [0] * n
    for o in order:
        if not 0 <= o < n:
            raise ValueError(f"ordering entry {o} out of range 0..{n - 1}")
        counts[o] += 1
    return [(i, c) for i, c in enumerate(counts) if c != 1]


def write_ordering(
    gname: str | Path, order: Sequence[int], npes: int
) -> tuple[Path, list[tuple[int, int]]]:
    """Write an ordering vector to ``gname.order.npes`` and check it.

    Returns the path written and the problems found by :func:`ordering_problems`.
    """
    problems = ordering_problems(order)
    out = Path(f"{gname}.order.{npes}")
    with open(out, "w", encoding="utf-8") as fh:
        fh.writelines(f"{o}\n" for o in order)
    return out, problems


def separator_opc(sizes: Sequence[int], npes: int) -> int:
    """Return the operation count of the top separators of a nested-dissection ordering.

    With ``nparts`` the largest power of two not above ``npes``, ``sizes`` holds
    ``nparts`` part sizes followed by ``nparts - 1`` separator sizes; each
    separator of size ``s`` contributes ``s*(s+1)/2``.
    """
    if npes < 1:
        raise ValueError("npes must be at least 1")
    nparts = 1 << (npes.bit_length() - 1)
    if len(sizes) < 2 * nparts - 1:
        raise ValueError(f"sizes must hold at least {2 * nparts - 1} entries")
    return sum(s * (s + 1) // 2 for s in sizes[nparts:2 * nparts - 1])