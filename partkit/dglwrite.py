"""Writing a moved metadata-carrying graph as one pair of text files per part.

Inside every processor the vertices are relabelled so that they are grouped
by part, then by vertex type, keeping their previous order otherwise. Each
part ``p`` is written to ``p<ppp>-<stem>_nodes.txt`` and
``p<ppp>-<stem>_edges.txt``.
"""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import Iterator

from partkit.dglmove import MovedGraph


def _processor_ranges(mgraph: MovedGraph, nparts_per_pe: int) -> Iterator[tuple[int, int, int]]:
    nparts = len(mgraph.vtxdist) - 1
    if nparts_per_pe < 1:
        raise ValueError("nparts_per_pe must be at least 1")
    if nparts % nparts_per_pe:
        raise ValueError(
            f"{nparts} parts cannot be split into groups of {nparts_per_pe} per processor"
        )
    for pe in range(nparts // nparts_per_pe):
        yield (
            pe,
            mgraph.vtxdist[pe * nparts_per_pe],
            mgraph.vtxdist[(pe + 1) * nparts_per_pe],
        )


def relabel_moved_graph(mgraph: MovedGraph, nparts_per_pe: int) -> list[int]:
    """Return the final label of every vertex of ``mgraph``.

    Each processor's vertices keep its id range but are sorted by
    ``(part, vertex type, current id)``.
    """
    newlabel = [0] * mgraph.gnvtxs
    for pe, first, last in _processor_ranges(mgraph, nparts_per_pe):
        low, high = pe * nparts_per_pe, (pe + 1) * nparts_per_pe
        for v in range(first, last):
            if not low <= mgraph.where[v] < high:
                raise ValueError(
                    f"vertex {v} of part {mgraph.where[v]} is not held by processor {pe}"
                )
        order = sorted(
            range(first, last), key=lambda v: (mgraph.where[v], mgraph.vtype[v], v)
        )
        for label, v in enumerate(order, start=first):
            newlabel[v] = label
    return newlabel


def write_dgl_graphs(
    fstem: str,
    mgraph: MovedGraph,
    nparts_per_pe: int,
    directory: str | Path = ".",
) -> list[Path]:
    """Write the node and edge files of every part into ``directory``.

    Node lines are ``label metadata``; edge lines, written only for edges that
    carry metadata, are ``label neighbour-label metadata``. Returns the paths
    written, the nodes file then the edges file of each part in part order.
    """
    newlabel = relabel_moved_graph(mgraph, nparts_per_pe)
    nparts = len(mgraph.vtxdist) - 1
    outdir = Path(directory)

    paths: list[Path] = []
    for p in range(nparts):
        paths.append(outdir / f"p{p:03d}-{fstem}_nodes.txt")
        paths.append(outdir / f"p{p:03d}-{fstem}_edges.txt")

    order = [0] * mgraph.gnvtxs
    for v, label in enumerate(newlabel):
        order[label] = v

    with ExitStack() as stack:
        handles = [stack.enter_context(open(path, "w", encoding="utf-8")) for path in paths]
        for v in order:
            p = mgraph.where[v]
            nodefh, edgefh = handles[2 * p], handles[2 * p + 1]
            nodefh.write(f"{newlabel[v]} {mgraph.vertex_meta[v]}\n")
            for j in range(mgraph.xadj[v], mgraph.xadj[v + 1]):
                meta = mgraph.edge_meta[j]
                if meta is not None:
                    edgefh.write(
                        f"{newlabel[v]} {newlabel[mgraph.adjncy[j]]} {meta}\n"
                    )
    return paths