"""Reading graphs with vertex and edge metadata for distributed graph learning.

The input is three text files sharing a stem:

* ``<stem>_stats.txt``: the global vertex count, edge count and number of
  vertex weights;
* ``<stem>_nodes.txt``: one line per vertex holding its type, its weights and
  any further metadata;
* ``<stem>_edges.txt``: one line per edge, ``dest source`` followed by
  metadata.

Vertices are spread over the processors cyclically: input vertex ``u`` goes to
processor ``u % npes``. Inside the graph the vertices are renumbered so that
each processor owns a contiguous range (see :func:`map_to_cyclic`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

_Entry = tuple[int, int, int]


class DglInputError(ValueError):
    """Raised when the input files are missing or malformed."""


@dataclass
class DglGraph:
    """A graph in CSR form with per-vertex and per-edge metadata.

    Vertex ids are the renumbered (contiguous per processor) ids. ``vwgt``
    holds ``ncon`` weights per vertex, ``vtype`` the vertex type.
    ``vertex_meta`` holds the input line of each vertex and ``edge_meta`` the
    input line of each stored edge, or ``None`` for an edge that only exists
    as the reverse of an input edge. ``duplicates`` lists
    ``(dropped_line, kept_line)`` for repeated edges that carried metadata.
    """

    vtxdist: list[int]
    xadj: list[int]
    adjncy: list[int]
    edge_meta: list[str | None]
    vwgt: list[int]
    vtype: list[int]
    vertex_meta: list[str]
    ncon: int
    gnedges: int = 0
    duplicates: list[tuple[str, str | None]] = field(default_factory=list)

    @property
    def npes(self) -> int:
        return len(self.vtxdist) - 1

    @property
    def gnvtxs(self) -> int:
        return self.vtxdist[-1]

    @property
    def nedges(self) -> int:
        return len(self.adjncy)

    def local_vertices(self, pe: int) -> range:
        """Return the renumbered ids of the vertices owned by processor ``pe``."""
        if not 0 <= pe < self.npes:
            raise IndexError(f"processor {pe} out of range 0..{self.npes - 1}")
        return range(self.vtxdist[pe], self.vtxdist[pe + 1])


def map_to_cyclic(u: int, npes: int, vtxdist: Sequence[int]) -> int:
    """Return the renumbered id of input vertex ``u``."""
    return vtxdist[u % npes] + u // npes


def map_from_cyclic(u: int, npes: int, vtxdist: Sequence[int]) -> int:
    """Return the input id of renumbered vertex ``u``."""
    for i in range(npes):
        if u < vtxdist[i + 1]:
            return (u - vtxdist[i]) * npes + i
    raise ValueError(f"vertex {u} lies outside vtxdist")


def sort_edges_val_desc(entries: Iterable[_Entry]) -> list[_Entry]:
    """Sort ``(key1, key2, val)`` by increasing keys and decreasing ``val``."""
    return sorted(entries, key=lambda e: (e[0], e[1], -e[2]))


def sort_edges_val_asc(entries: Iterable[_Entry]) -> list[_Entry]:
    """Sort ``(key1, key2, val)`` by increasing keys and increasing ``val``."""
    return sorted(entries, key=lambda e: (e[0], e[1], e[2]))


def _cyclic_vtxdist(gnvtxs: int, npes: int) -> list[int]:
    vtxdist = [0]
    for pe in range(npes):
        vtxdist.append(vtxdist[-1] + gnvtxs // npes + (1 if pe < gnvtxs % npes else 0))
    return vtxdist


def _leading_ints(line: str, count: int) -> list[int]:
    """Parse ``count`` leading integers; values past the first non-number read as 0."""
    values = []
    tokens = iter(line.split())
    stopped = False
    for _ in range(count):
        tok = None if stopped else next(tokens, None)
        if tok is None:
            stopped = True
            values.append(0)
            continue
        try:
            values.append(int(tok))
        except ValueError:
            stopped = True
            values.append(0)
    return values


def _read_stats(path: Path) -> tuple[int, int, int]:
    tokens = path.read_text(encoding="utf-8").split()
    values = []
    for tok in tokens[:3]:
        try:
            values.append(int(tok))
        except ValueError:
            break
    if len(values) != 3:
        raise DglInputError(
            f"file '{path}' contains {len(values)}/3 required information"
        )
    gnvtxs, gnedges, ncon = values
    if gnvtxs < 0 or ncon < 0:
        raise DglInputError(f"negative counts in '{path}'")
    return gnvtxs, gnedges, ncon


def _read_edges(path: Path, npes: int, vtxdist: Sequence[int], gnvtxs: int):
    meta: list[str] = []
    entries: list[_Entry] = []
    with open(path, encoding="utf-8") as fh:
        for lineno, raw in enumerate(fh, start=1):
            line = raw.rstrip("\n\r")
            tokens = line.split()
            try:
                vv, uu = int(tokens[0]), int(tokens[1])
            except (IndexError, ValueError) as exc:
                raise DglInputError(f"malformed edge on line {lineno} of '{path}'") from exc
            if not (0 <= uu < gnvtxs and 0 <= vv < gnvtxs):
                raise DglInputError(f"vertex out of range on line {lineno} of '{path}'")
            u = map_to_cyclic(uu, npes, vtxdist)
            v = map_to_cyclic(vv, npes, vtxdist)
            entries.append((u, v, len(meta)))
            meta.append(line)
            entries.append((v, u, -1))

    xadj = [0] * (gnvtxs + 1)
    adjncy: list[int] = []
    edge_meta: list[str | None] = []
    duplicates: list[tuple[str, str | None]] = []
    kept: _Entry | None = None
    for entry in sort_edges_val_desc(entries):
        if kept is not None and entry[0] == kept[0] and entry[1] == kept[1]:
            if entry[2] != -1:
                duplicates.append((meta[entry[2]], None if kept[2] == -1 else meta[kept[2]]))
            continue
        kept = entry
        xadj[entry[0] + 1] += 1
        adjncy.append(entry[1])
        edge_meta.append(None if entry[2] == -1 else meta[entry[2]])
    for i in range(gnvtxs):
        xadj[i + 1] += xadj[i]
    return xadj, adjncy, edge_meta, duplicates


def _read_nodes(path: Path, npes: int, vtxdist: Sequence[int], gnvtxs: int, ncon: int):
    vtype = [0] * gnvtxs
    vwgt = [0] * (gnvtxs * ncon)
    vertex_meta = [""] * gnvtxs
    u = 0
    with open(path, encoding="utf-8") as fh:
        for raw in fh:
            if u >= gnvtxs:
                raise DglInputError(f"'{path}' holds more than {gnvtxs} vertices")
            line = raw.rstrip("\n\r")
            values = _leading_ints(line, ncon + 1)
            v = map_to_cyclic(u, npes, vtxdist)
            vtype[v] = values[0]
            vwgt[v * ncon:(v + 1) * ncon] = values[1:]
            vertex_meta[v] = line
            u += 1
    if u != gnvtxs:
        raise DglInputError(f"'{path}' holds {u} vertices, expected {gnvtxs}")
    return vtype, vwgt, vertex_meta


def read_dgl_graph(fstem: str | Path, npes: int = 1) -> DglGraph:
    """Read the ``<fstem>_{stats,edges,nodes}.txt`` files and build the distributed graph.

    Each input edge is stored at its second vertex with the line as metadata
    and at its first vertex without. Repeated edges keep the metadata of the
    last line read; an edge read in both directions keeps both metadata.
    """
    if npes < 1:
        raise ValueError("npes must be at least 1")
    stem = str(fstem)
    stats = Path(f"{stem}_stats.txt")
    edges = Path(f"{stem}_edges.txt")
    nodes = Path(f"{stem}_nodes.txt")
    missing = [str(p) for p in (stats, edges, nodes) if not p.is_file()]
    if missing:
        raise DglInputError("files do not exist: " + ", ".join(f"'{m}'" for m in missing))

    gnvtxs, gnedges, ncon = _read_stats(stats)
    vtxdist = _cyclic_vtxdist(gnvtxs, npes)
    xadj, adjncy, edge_meta, duplicates = _read_edges(edges, npes, vtxdist, gnvtxs)
    vtype, vwgt, vertex_meta = _read_nodes(nodes, npes, vtxdist, gnvtxs, ncon)

    return DglGraph(
        vtxdist=vtxdist,
        xadj=xadj,
        adjncy=adjncy,
        edge_meta=edge_meta,
        vwgt=vwgt,
        vtype=vtype,
        vertex_meta=vertex_meta,
        ncon=ncon,
        gnedges=gnedges,
        duplicates=duplicates,
    )