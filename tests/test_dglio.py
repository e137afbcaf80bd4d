import pytest

from partkit.dglio import (
    DglInputError,
    map_from_cyclic,
    map_to_cyclic,
    read_dgl_graph,
    sort_edges_val_asc,
    sort_edges_val_desc,
)


def _write(tmp_path, stats, nodes, edges, stem="g"):
    base = tmp_path / stem
    (tmp_path / f"{stem}_stats.txt").write_text(stats)
    (tmp_path / f"{stem}_nodes.txt").write_text(nodes)
    (tmp_path / f"{stem}_edges.txt").write_text(edges)
    return base


NODES = "".join(f"{u % 2} {10 + u} node{u}\n" for u in range(7))
EDGES = "1 0 a\n2 1 b\n3 2 c\n6 5 d\n0 6 e\n4 3 f\n"


@pytest.fixture
def graph(tmp_path):
    return read_dgl_graph(_write(tmp_path, "7 6 1\n", NODES, EDGES), npes=3)


def test_cyclic_round_trip():
    vtxdist = [0, 4, 7, 10]
    images = [map_to_cyclic(u, 3, vtxdist) for u in range(10)]
    assert sorted(images) == list(range(10))
    assert all(map_from_cyclic(map_to_cyclic(u, 3, vtxdist), 3, vtxdist) == u for u in range(10))


def test_map_from_cyclic_out_of_range():
    with pytest.raises(ValueError):
        map_from_cyclic(10, 3, [0, 4, 7, 10])


def test_sorts():
    entries = [(1, 2, 0), (1, 2, 5), (0, 3, -1)]
    assert sort_edges_val_desc(entries) == [(0, 3, -1), (1, 2, 5), (1, 2, 0)]
    assert sort_edges_val_asc(entries) == [(0, 3, -1), (1, 2, 0), (1, 2, 5)]


def test_distribution(graph):
    assert graph.vtxdist[-1] == 7
    sizes = [len(graph.local_vertices(pe)) for pe in range(3)]
    assert sizes == [3, 2, 2]
    assert graph.ncon == 1


def test_vertices_follow_cyclic_map(graph):
    for u in range(7):
        v = map_to_cyclic(u, 3, graph.vtxdist)
        assert graph.vtype[v] == u % 2
        assert graph.vwgt[v] == 10 + u
        assert graph.vertex_meta[v] == f"{u % 2} {10 + u} node{u}"


def test_edges_and_metadata(graph):
    assert graph.nedges == 12
    assert graph.xadj[-1] == graph.nedges
    for line in EDGES.splitlines():
        vv, uu = int(line.split()[0]), int(line.split()[1])
        u = map_to_cyclic(uu, 3, graph.vtxdist)
        v = map_to_cyclic(vv, 3, graph.vtxdist)
        fwd = graph.adjncy.index(v, graph.xadj[u], graph.xadj[u + 1])
        assert graph.edge_meta[fwd] == line
        back = graph.adjncy.index(u, graph.xadj[v], graph.xadj[v + 1])
        assert graph.edge_meta[back] is None


def test_adjacency_symmetric_and_sorted(graph):
    for u in range(graph.gnvtxs):
        nbrs = graph.adjncy[graph.xadj[u]:graph.xadj[u + 1]]
        assert nbrs == sorted(nbrs)
        for v in nbrs:
            assert u in graph.adjncy[graph.xadj[v]:graph.xadj[v + 1]]


def test_duplicate_keeps_last(tmp_path):
    nodes = "0 1\n0 1\n"
    g = read_dgl_graph(_write(tmp_path, "2 2 1\n", nodes, "1 0 first\n1 0 second\n"))
    assert g.nedges == 2
    assert "1 0 second" in g.edge_meta
    assert "1 0 first" not in g.edge_meta
    assert g.duplicates == [("1 0 first", "1 0 second")]


def test_missing_files(tmp_path):
    with pytest.raises(DglInputError):
        read_dgl_graph(tmp_path / "absent")


def test_bad_stats(tmp_path):
    with pytest.raises(DglInputError):
        read_dgl_graph(_write(tmp_path, "7 6\n", NODES, EDGES), npes=3)


def test_vertex_out_of_range(tmp_path):
    with pytest.raises(DglInputError):
        read_dgl_graph(_write(tmp_path, "7 6 1\n", NODES, "9 0 x\n"), npes=3)


def test_wrong_node_count(tmp_path):
    with pytest.raises(DglInputError):
        read_dgl_graph(_write(tmp_path, "8 6 1\n", NODES, EDGES), npes=3)


def test_local_vertices_bad_pe(graph):
    with pytest.raises(IndexError):
        graph.local_vertices(3)