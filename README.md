# partkit

Tools for the data side of distributed graph partitioning: reading and
writing graphs and meshes in the METIS text formats, splitting them across
a number of processing elements, perturbing vertex weights to create load
changes, and redistributing a graph (with its vertex and edge metadata)
according to a partition vector.

Everything is pure Python with no third-party dependencies. The
processing elements are modelled explicitly: a graph carries a `vtxdist`
list that says which global vertices belong to which processor, and
methods such as `local_range`, `local_xadj` and `local_vertices` give
per-processor views.

## Installation

```
pip install .
```

## Modules

- `partkit.graphio` – `Graph` (CSR graph with `vtxdist`, `xadj`, `adjncy`,
  `vwgt`, `adjwgt`, `ncon`, `nobj`), `GraphFormatError`,
  `distribute_evenly`, `read_graph`, `read_metis_graph`,
  `read_weighted_metis_graph` (returns the graph and its weight flag),
  `read_coordinates` (returns the dimension and one tuple per vertex) and
  `write_graph` (writes to `<filename>.<testset>.<ncon>.<nparts>`).
- `partkit.adapt` – synthetic load changes for repartitioning experiments:
  `adapt_graph`, `adapt_graph_by_processor`, `mc_adapt_graph` and
  `load_imbalance`, which returns `(max*npes/sum, min, max, sum)` over the
  per-processor loads. Random draws are seeded, so results repeat.
- `partkit.meshio` – `Mesh`, `MeshFormatError`, `read_mesh`,
  `write_partition` (to `<gname>.part`), `write_ordering` (to
  `<gname>.order.<npes>`, also returning any ordering problems),
  `ordering_problems` and `separator_opc`.
- `partkit.dglio` – reading `<stem>_stats.txt`, `<stem>_edges.txt` and
  `<stem>_nodes.txt`: `DglGraph`, `DglInputError`, `read_dgl_graph`,
  `map_to_cyclic`, `map_from_cyclic`, `sort_edges_val_desc` and
  `sort_edges_val_asc`.
- `partkit.dglmove` – `MovedGraph`, `move_graph` (relabels vertices so each
  part is a contiguous id range) and `check_moved_graph` (reports self loops
  and missing reverse edges).
- `partkit.dglwrite` – `relabel_moved_graph` and `write_dgl_graphs`, which
  writes `p<ppp>-<stem>_nodes.txt` and `p<ppp>-<stem>_edges.txt` per part.

## Example

```python
from partkit.graphio import read_graph
from partkit.adapt import adapt_graph

graph = read_graph("mesh.graph", npes=4)
imbalance, low, high, total = adapt_graph(graph, afactor=4, seed=1)
print(graph.local_range(0), imbalance)
```

A move-and-write pipeline for input with metadata:

```python
from partkit.dglio import read_dgl_graph
from partkit.dglmove import move_graph
from partkit.dglwrite import write_dgl_graphs

graph = read_dgl_graph("data/mygraph", npes=2)
part = ...  # one part number per vertex, in range(2 * nparts_per_pe)
moved = move_graph(graph, part, nparts_per_pe=1)
write_dgl_graphs("mygraph", moved, nparts_per_pe=1, directory="out")
```

## What the package does not do

- It does not compute partitions or orderings. Partition vectors passed to
  `move_graph`, `write_partition` or `mc_adapt_graph`, and orderings passed
  to `write_ordering`, must come from another tool.
- It has no coordinate-based partitioner: `read_coordinates` reads
  coordinates, but nothing in the package turns them into a partition.
- There is no real message passing; processors are only a view over data
  held in one process.
- It installs no command-line programs; use it as a library.

## Running the tests

```
pip install .[test]
pytest
```