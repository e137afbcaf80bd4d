"""Simple strategies that perturb graph weights to exercise repartitioning."""

from __future__ import annotations

import random
from typing import Sequence

from partkit.graphio import Graph


def _rng(seed: int, pe: int, factor: int) -> random.Random:
    return random.Random(f"{seed}:{pe}:{factor}")


def _ensure_weights(graph: Graph) -> None:
    if graph.vwgt is None:
        graph.vwgt = [1] * (graph.gnvtxs * graph.ncon)
    if graph.adjwgt is None:
        graph.adjwgt = [1] * (graph.nedges * graph.nobj)


def load_imbalance(graph: Graph) -> tuple[float, int, int, int]:
    """Return ``(max*npes/sum, min, max, sum)`` over the per-processor vertex weights.

    Each processor's weight is the sum of the first constraint of its vertices.
    """
    vwgt = graph.vwgt if graph.vwgt is not None else [1] * (graph.gnvtxs * graph.ncon)
    loads = []
    for pe in range(graph.npes):
        first, last = graph.local_range(pe)
        loads.append(sum(vwgt[v * graph.ncon] for v in range(first, last)))
    total = sum(loads)
    high, low = max(loads), min(loads)
    imbalance = high * graph.npes / total if total else 0.0
    return imbalance, low, high, total


def adapt_graph(graph: Graph, afactor: int, seed: int = 0) -> tuple[float, int, int, int]:
    """Multiply the weights of a random subset of each processor's vertices by ``afactor``.

    Returns the resulting load imbalance as given by :func:`load_imbalance`.
    """
    _ensure_weights(graph)
    for pe in range(graph.npes):
        rng = _rng(seed, pe, afactor)
        first, last = graph.local_range(pe)
        perm = list(range(first, last))
        rng.shuffle(perm)
        nvtxs = len(perm)
        nadapt = 0
        if nvtxs:
            for _ in range(3):
                nadapt = rng.randrange(nvtxs)
        for v in perm[:nadapt]:
            for h in range(graph.ncon):
                graph.vwgt[v * graph.ncon + h] *= afactor
    return load_imbalance(graph)


def adapt_graph_by_processor(graph: Graph, afactor: int, seed: int = 0) -> list[int]:
    """Scale all weights on a few random processors and reweight their local edges.

    A processor adapts when a draw from ``0..npes`` falls below 2. Every edge
    between two vertices of the same processor then gets weight
    ``int(min(w_u, w_v) ** 0.6667)``, at least 1. Returns the adapted processors.
    """
    _ensure_weights(graph)
    adapted = []
    for pe in range(graph.npes):
        rng = _rng(seed, pe, afactor)
        first, last = graph.local_range(pe)
        if rng.randrange(graph.npes + 1) < 2:
            adapted.append(pe)
            for v in range(first, last):
                for h in range(graph.ncon):
                    graph.vwgt[v * graph.ncon + h] *= afactor

    for pe in range(graph.npes):
        first, last = graph.local_range(pe)
        for v in range(first, last):
            for j in range(graph.xadj[v], graph.xadj[v + 1]):
                u = graph.adjncy[j]
                if first <= u < last:
                    smaller = min(graph.vwgt[v * graph.ncon], graph.vwgt[u * graph.ncon])
                    graph.adjwgt[j * graph.nobj] = max(1, int((1.0 * smaller) ** 0.6667))
    return adapted


def mc_adapt_graph(
    graph: Graph, part: Sequence[int], ncon: int, nparts: int, seed: int = 0
) -> list[int]:
    """Give every vertex the random per-part weights of its part, for ``ncon`` constraints.

    Part weights are drawn from 1..20. Returns the flat ``nparts*ncon`` weight table.
    """
    if len(part) != graph.gnvtxs:
        raise ValueError("partition vector length does not match the number of vertices")
    rng = _rng(seed, 0, nparts * ncon)
    pwgts = [rng.randrange(20) + 1 for _ in range(nparts * ncon)]
    vwgt = []
    for p in part:
        if not 0 <= p < nparts:
            raise ValueError(f"part {p} out of range 0..{nparts - 1}")
        vwgt.extend(pwgts[p * ncon:(p + 1) * ncon])
    graph.vwgt = vwgt
    graph.ncon = ncon
    return pwgts