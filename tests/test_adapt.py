import pytest

from partkit.adapt import (
    adapt_graph,
    adapt_graph_by_processor,
    load_imbalance,
    mc_adapt_graph,
)
from partkit.graphio import Graph, distribute_evenly


def _grid(n=12, npes=3):
    adjncy = []
    xadj = [0]
    for v in range(n):
        nbrs = [(v - 1) % n, (v + 1) % n]
        adjncy.extend(nbrs)
        xadj.append(len(adjncy))
    return Graph(vtxdist=distribute_evenly(n, npes), xadj=xadj, adjncy=adjncy)


def test_load_imbalance_uniform():
    graph = _grid(12, 3)
    imbalance, low, high, total = load_imbalance(graph)
    assert total == 12
    assert low == high
    assert imbalance == pytest.approx(1.0)


def test_adapt_graph_scales_subset():
    graph = _grid(30, 3)
    result = adapt_graph(graph, 4, seed=7)
    assert set(graph.vwgt) <= {1, 4}
    assert graph.adjwgt == [1] * len(graph.adjncy)
    assert result == load_imbalance(graph)
    assert result[3] == sum(graph.vwgt)


def test_adapt_graph_deterministic():
    a, b = _grid(30, 3), _grid(30, 3)
    adapt_graph(a, 4, seed=3)
    adapt_graph(b, 4, seed=3)
    assert a.vwgt == b.vwgt


def test_adapt_graph_afactor_one_is_identity():
    graph = _grid(20, 4)
    adapt_graph(graph, 1, seed=5)
    assert graph.vwgt == [1] * 20


def test_adapt_graph_by_processor_single_pe_always_adapts():
    graph = _grid(8, 1)
    adapted = adapt_graph_by_processor(graph, 8, seed=0)
    assert adapted == [0]
    assert graph.vwgt == [8] * 8
    assert all(w >= 1 for w in graph.adjwgt)
    assert len(set(graph.adjwgt)) == 1


def test_adapt_graph_by_processor_invariants():
    graph = _grid(24, 4)
    graph.adjwgt = [7] * len(graph.adjncy)
    adapted = adapt_graph_by_processor(graph, 5, seed=11)
    for pe in range(graph.npes):
        first, last = graph.local_range(pe)
        expected = 5 if pe in adapted else 1
        assert graph.vwgt[first:last] == [expected] * (last - first)
        for v in range(first, last):
            for j in range(graph.xadj[v], graph.xadj[v + 1]):
                if not first <= graph.adjncy[j] < last:
                    assert graph.adjwgt[j] == 7
                else:
                    assert graph.adjwgt[j] >= 1


def test_mc_adapt_graph_weights_follow_parts():
    graph = _grid(12, 2)
    part = [v % 3 for v in range(12)]
    pwgts = mc_adapt_graph(graph, part, ncon=2, nparts=3, seed=1)
    assert len(pwgts) == 6
    assert all(1 <= w <= 20 for w in pwgts)
    assert graph.ncon == 2
    assert len(graph.vwgt) == 24
    for v, p in enumerate(part):
        assert graph.vwgt[2 * v:2 * v + 2] == pwgts[2 * p:2 * p + 2]


def test_mc_adapt_graph_rejects_bad_part():
    graph = _grid(4, 1)
    with pytest.raises(ValueError):
        mc_adapt_graph(graph, [0, 1, 2, 5], ncon=1, nparts=3)


def test_mc_adapt_graph_rejects_wrong_length():
    graph = _grid(4, 1)
    with pytest.raises(ValueError):
        mc_adapt_graph(graph, [0, 1], ncon=1, nparts=2)