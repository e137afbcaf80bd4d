"""Moving a metadata-carrying graph so that each processor holds its own parts.

After partitioning into ``npes * nparts_per_pe`` parts, processor ``pe`` takes
over parts ``pe*nparts_per_pe`` to ``(pe+1)*nparts_per_pe - 1``. Vertices are
relabelled so that every part occupies a contiguous range of ids. Inside a
part, vertices keep their previous global order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from partkit.dglio import DglGraph


@dataclass
class MovedGraph:
    """A graph after its vertices were moved to the processors of their parts.

    ``vtxdist`` has one entry per part plus one: part ``p`` owns the ids
    ``vtxdist[p]`` to ``vtxdist[p+1] - 1``. ``where`` is the part of every
    vertex. ``edge_meta`` is ``None`` for edges without metadata.
    """

    vtxdist: list[int]
    nparts_per_pe: int
    xadj: list[int]
    adjncy: list[int]
    where: list[int]
    vtype: list[int]
    vertex_meta: list[str]
    edge_meta: list[str | None]

    @property
    def nparts(self) -> int:
        return len(self.vtxdist) - 1

    @property
    def npes(self) -> int:
        return self.nparts // self.nparts_per_pe

    @property
    def gnvtxs(self) -> int:
        return self.vtxdist[-1]

    @property
    def nedges(self) -> int:
        return len(self.adjncy)

    def local_vertices(self, pe: int) -> range:
        """Return the ids of the vertices held by processor ``pe``."""
        if not 0 <= pe < self.npes:
            raise IndexError(f"processor {pe} out of range 0..{self.npes - 1}")
        k = self.nparts_per_pe
        return range(self.vtxdist[pe * k], self.vtxdist[(pe + 1) * k])


def move_graph(graph: DglGraph, part: Sequence[int], nparts_per_pe: int) -> MovedGraph:
    """Relabel ``graph`` by the partition ``part`` and gather every part's vertices.

    ``part`` gives the part of every vertex, in ``0..npes*nparts_per_pe - 1``.
    """
    if nparts_per_pe < 1:
        raise ValueError("nparts_per_pe must be at least 1")
    gnvtxs = graph.gnvtxs
    if len(part) != gnvtxs:
        raise ValueError("partition vector length does not match the number of vertices")
    nparts = graph.npes * nparts_per_pe
    for p in part:
        if not 0 <= p < nparts:
            raise ValueError(f"part {p} out of range 0..{nparts - 1}")

    counts = [0] * nparts
    for p in part:
        counts[p] += 1
    mvtxdist = [0]
    for c in counts:
        mvtxdist.append(mvtxdist[-1] + c)

    nextlabel = mvtxdist[:-1]
    newlabel = [0] * gnvtxs
    for v, p in enumerate(part):
        newlabel[v] = nextlabel[p]
        nextlabel[p] += 1

    old_of = [0] * gnvtxs
    for v, n in enumerate(newlabel):
        old_of[n] = v

    xadj = [0]
    adjncy: list[int] = []
    edge_meta: list[str | None] = []
    for v in old_of:
        for j in range(graph.xadj[v], graph.xadj[v + 1]):
            adjncy.append(newlabel[graph.adjncy[j]])
            edge_meta.append(graph.edge_meta[j])
        xadj.append(len(adjncy))

    return MovedGraph(
        vtxdist=mvtxdist,
        nparts_per_pe=nparts_per_pe,
        xadj=xadj,
        adjncy=adjncy,
        where=[part[v] for v in old_of],
        vtype=[graph.vtype[v] for v in old_of],
        vertex_meta=[graph.vertex_meta[v] for v in old_of],
        edge_meta=edge_meta,
    )


def check_moved_graph(
    mgraph: MovedGraph, pe: int, nparts_per_pe: int
) -> list[tuple[int, int]]:
    """Check the local consistency of processor ``pe``'s part of ``mgraph``.

    Returns ``(i, k)`` in local indices for every problem: ``(i, i)`` for a
    self loop, otherwise an edge ``(i, k)`` between local vertices whose
    reverse ``(k, i)`` is missing.
    """
    nparts = len(mgraph.vtxdist) - 1
    if nparts_per_pe < 1 or not 0 <= pe * nparts_per_pe < nparts:
        raise IndexError(f"processor {pe} out of range")
    first = mgraph.vtxdist[pe * nparts_per_pe]
    last = mgraph.vtxdist[min((pe + 1) * nparts_per_pe, nparts)]

    problems: list[tuple[int, int]] = []
    for i in range(last - first):
        v = first + i
        for j in range(mgraph.xadj[v], mgraph.xadj[v + 1]):
            u = mgraph.adjncy[j]
            if u == v:
                problems.append((i, i))
            if first <= u < last:
                back = mgraph.adjncy[mgraph.xadj[u]:mgraph.xadj[u + 1]]
                if v not in back:
                    problems.append((i, u - first))
    return problems