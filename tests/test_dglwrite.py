from pathlib import Path

import pytest

from partkit.dglio import read_dgl_graph
from partkit.dglmove import move_graph
from partkit.dglwrite import relabel_moved_graph, write_dgl_graphs

NODE_LINES = ["1 5 n0", "0 3 n1", "1 2 n2", "0 1 n3", "1 1 n4", "0 4 n5"]
EDGE_LINES = ["1 0 e01", "2 1 e12", "3 2 e23", "4 3 e34", "5 4 e45", "0 5 e50"]
PART = [0, 2, 1, 3, 1, 2]
NPARTS_PER_PE = 2


@pytest.fixture
def moved(tmp_path):
    stem = tmp_path / "graph"
    Path(f"{stem}_stats.txt").write_text("6 6 1\n", encoding="utf-8")
    Path(f"{stem}_nodes.txt").write_text("\n".join(NODE_LINES) + "\n", encoding="utf-8")
    Path(f"{stem}_edges.txt").write_text("\n".join(EDGE_LINES) + "\n", encoding="utf-8")
    graph = read_dgl_graph(stem, npes=2)
    return move_graph(graph, PART, NPARTS_PER_PE)


def test_relabel_is_permutation(moved):
    labels = relabel_moved_graph(moved, NPARTS_PER_PE)
    assert sorted(labels) == list(range(moved.gnvtxs))


def test_relabel_keeps_processor_ranges_and_groups(moved):
    labels = relabel_moved_graph(moved, NPARTS_PER_PE)
    for pe in range(moved.npes):
        verts = list(moved.local_vertices(pe))
        assert sorted(labels[v] for v in verts) == verts
        ordered = sorted(verts, key=lambda v: labels[v])
        keys = [(moved.where[v], moved.vtype[v]) for v in ordered]
        assert keys == sorted(keys)


def test_relabel_rejects_bad_group_size(moved):
    with pytest.raises(ValueError):
        relabel_moved_graph(moved, 3)


def test_relabel_rejects_foreign_part(moved):
    v = moved.local_vertices(0)[0]
    moved.where[v] = 3
    with pytest.raises(ValueError):
        relabel_moved_graph(moved, NPARTS_PER_PE)


def test_write_file_names(moved, tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    paths = write_dgl_graphs("graph", moved, NPARTS_PER_PE, out)
    assert paths[0] == out / "p000-graph_nodes.txt"
    assert paths[1] == out / "p000-graph_edges.txt"
    assert len(paths) == 2 * moved.nparts
    assert all(p.is_file() for p in paths)