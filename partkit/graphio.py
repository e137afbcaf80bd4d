"""Reading and writing graphs in the METIS text format, distributed over processors."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence


class GraphFormatError(ValueError):
    """Raised when a graph or coordinate file is malformed or inconsistent."""


@dataclass
class Graph:
    """A graph in CSR form whose vertices are split across processors.

    ``vtxdist[pe]`` is the first global vertex owned by processor ``pe``;
    ``xadj``/``adjncy`` hold the whole adjacency structure with 0-based ids.
    ``vwgt`` holds ``ncon`` weights per vertex, ``adjwgt`` ``nobj`` per edge.
    """

    vtxdist: list[int]
    xadj: list[int]
    adjncy: list[int]
    vwgt: list[int] | None = None
    adjwgt: list[int] | None = None
    ncon: int = 1
    nobj: int = 1

    @property
    def npes(self) -> int:
        return len(self.vtxdist) - 1

    @property
    def gnvtxs(self) -> int:
        return self.vtxdist[-1]

    @property
    def nedges(self) -> int:
        return len(self.adjncy)

    def local_range(self, pe: int) -> tuple[int, int]:
        """Return the half-open range of global vertex ids owned by ``pe``."""
        if not 0 <= pe < self.npes:
            raise IndexError(f"processor {pe} out of range 0..{self.npes - 1}")
        return self.vtxdist[pe], self.vtxdist[pe + 1]

    def local_xadj(self, pe: int) -> list[int]:
        """Return the adjacency pointers of ``pe``'s vertices, starting at 0."""
        first, last = self.local_range(pe)
        base = self.xadj[first]
        return [x - base for x in self.xadj[first:last + 1]]

    def local_adjncy(self, pe: int) -> list[int]:
        """Return the adjacency lists of ``pe``'s vertices (global ids)."""
        first, last = self.local_range(pe)
        return self.adjncy[self.xadj[first]:self.xadj[last]]


def distribute_evenly(n: int, npes: int) -> list[int]:
    """Split ``n`` vertices over ``npes`` processors; later ones get the remainder."""
    if npes < 1:
        raise ValueError("npes must be at least 1")
    if n < 0:
        raise ValueError("n must not be negative")
    vtxdist = [0]
    remaining = n
    for i in range(npes):
        share = remaining // (npes - i)
        vtxdist.append(vtxdist[-1] + share)
        remaining -= share
    return vtxdist


class _Cursor:
    """Walks the whitespace-separated numbers of one line; missing values read as 0."""

    def __init__(self, line: str) -> None:
        self._tokens: Iterator[str] = iter(line.split())
        self._done = False

    def _next(self) -> str | None:
        if self._done:
            return None
        tok = next(self._tokens, None)
        if tok is None:
            self._done = True
        return tok

    def int_(self) -> int:
        tok = self._next()
        if tok is None:
            return 0
        try:
            return int(tok)
        except ValueError:
            self._done = True
            return 0

    def real(self) -> float:
        tok = self._next()
        if tok is None:
            return 0.0
        try:
            return float(tok)
        except ValueError:
            self._done = True
            return 0.0


def _data_line(lines: Iterator[str], path: str | Path, skip_comments: bool = True) -> str:
    for line in lines:
        if skip_comments and line.startswith("%"):
            continue
        return line
    raise GraphFormatError(f"unexpected end of file in '{path}'")


def _header(line: str, path: str | Path) -> list[int]:
    cur = _Cursor(line)
    values = [cur.int_() for _ in range(5)]
    if not line.split():
        raise GraphFormatError(f"missing header in '{path}'")
    if values[0] < 0:
        raise GraphFormatError(f"negative vertex count in '{path}'")
    return values


def read_graph(path: str | Path, npes: int = 1) -> Graph:
    """Read a METIS graph file and distribute it over ``npes`` processors.

    Lines starting with ``%`` are comments. Missing weights default to 1.
    """
    with open(path, encoding="utf-8") as fh:
        lines = iter(fh)
        gnvtxs, _, fmt, ncon, nobj = _header(_data_line(lines, path), path)
        readew = fmt % 10 > 0
        readvw = (fmt // 10) % 10 > 0
        ncon = ncon or 1
        nobj = nobj or 1
        if (ncon > 1 and not readvw) or (nobj > 1 and not readew):
            raise GraphFormatError("fmt and ncon/nobj are inconsistent")

        xadj = [0]
        adjncy: list[int] = []
        vwgt: list[int] = []
        adjwgt: list[int] = []
        for _ in range(gnvtxs):
            cur = _Cursor(_data_line(lines, path))
            if readvw:
                vwgt.extend(cur.int_() for _ in range(ncon))
            else:
                vwgt.extend([1] * ncon)
            while True:
                edge = cur.int_() - 1
                if edge < 0:
                    break
                adjncy.append(edge)
                if readew:
                    adjwgt.extend(cur.int_() for _ in range(nobj))
                else:
                    adjwgt.extend([1] * nobj)
            xadj.append(len(adjncy))

    return Graph(
        vtxdist=distribute_evenly(gnvtxs, npes),
        xadj=xadj,
        adjncy=adjncy,
        vwgt=vwgt,
        adjwgt=adjwgt,
        ncon=ncon,
        nobj=nobj,
    )


def read_metis_graph(path: str | Path) -> tuple[list[int], list[int]]:
    """Read the plain structure of a METIS graph; returns ``(xadj, adjncy)``."""
    with open(path, encoding="utf-8") as fh:
        lines = iter(fh)
        nvtxs = _header(_data_line(lines, path, skip_comments=False), path)[0]
        xadj = [0]
        adjncy: list[int] = []
        for _ in range(nvtxs):
            cur = _Cursor(_data_line(lines, path, skip_comments=False))
            while True:
                edge = cur.int_() - 1
                if edge < 0:
                    break
                adjncy.append(edge)
            xadj.append(len(adjncy))
    return xadj, adjncy


def read_weighted_metis_graph(path: str | Path, npes: int = 1) -> tuple[Graph, int]:
    """Read a weighted METIS graph; returns the graph and its weight flag.

    The weight flag is 1 for edge weights plus 2 for vertex weights.
    Edge weights may be written as reals and are truncated to integers.
    """
    with open(path, encoding="utf-8") as fh:
        lines = iter(fh)
        nvtxs, _, fmt, ncon, nobj = _header(_data_line(lines, path, skip_comments=False), path)
        readew = fmt % 10 > 0
        readvw = (fmt // 10) % 10 > 0
        wgtflag = (1 if readew else 0) + (2 if readvw else 0)
        if (ncon > 0 and not readvw) or (nobj > 0 and not readew):
            raise GraphFormatError("fmt and ncon/nobj are inconsistent")
        ncon = ncon or 1
        nobj = nobj or 1

        xadj = [0]
        adjncy: list[int] = []
        vwgt: list[int] = []
        adjwgt: list[int] = []
        for _ in range(nvtxs):
            cur = _Cursor(_data_line(lines, path))
            if readvw:
                vwgt.extend(cur.int_() for _ in range(ncon))
            else:
                vwgt.extend([1] * ncon)
            while True:
                edge = cur.int_() - 1
                weights = [int(cur.real()) for _ in range(nobj)] if readew else []
                if edge < 0:
                    break
                adjncy.append(edge)
                adjwgt.extend(weights if readew else [1] * nobj)
            xadj.append(len(adjncy))

    graph = Graph(
        vtxdist=distribute_evenly(nvtxs, npes),
        xadj=xadj,
        adjncy=adjncy,
        vwgt=vwgt,
        adjwgt=adjwgt,
        ncon=ncon,
        nobj=nobj,
    )
    return graph, wgtflag


def read_coordinates(path: str | Path, vtxdist: Sequence[int]) -> tuple[int, list[tuple[float, ...]]]:
    """Read vertex coordinates; the first line fixes the dimension (at most 3).

    Returns ``(ndims, coords)`` with one tuple per global vertex.
    """
    text = Path(path).read_text(encoding="utf-8")
    lines = text.splitlines()
    if not lines:
        raise GraphFormatError(f"failed to read from file '{path}'")
    ndims = 0
    for tok in lines[0].split()[:3]:
        try:
            float(tok)
        except ValueError:
            break
        ndims += 1
    if ndims == 0:
        raise GraphFormatError(f"no coordinates on the first line of '{path}'")

    gnvtxs = vtxdist[-1]
    needed = gnvtxs * ndims
    values: list[float] = []
    for tok in text.split():
        if len(values) == needed:
            break
        try:
            values.append(float(tok))
        except ValueError as exc:
            raise GraphFormatError(f"bad coordinate '{tok}' in '{path}'") from exc
    if len(values) < needed:
        raise GraphFormatError(f"failed to read coordinates for all nodes in '{path}'")
    coords = [tuple(values[v * ndims:(v + 1) * ndims]) for v in range(gnvtxs)]
    return ndims, coords


def write_graph(graph: Graph, filename: str | Path, nparts: int, testset: int) -> Path:
    """Write ``graph`` with vertex and edge weights to ``filename.testset.ncon.nparts``."""
    out = Path(f"{filename}.{testset}.{graph.ncon}.{nparts}")
    vwgt = graph.vwgt if graph.vwgt is not None else [1] * (graph.gnvtxs * graph.ncon)
    adjwgt = graph.adjwgt if graph.adjwgt is not None else [1] * graph.nedges
    with open(out, "w", encoding="utf-8") as fh:
        fh.write(f"{graph.gnvtxs} {graph.nedges // 2} 11 {graph.ncon} 1\n")
        for v in range(graph.gnvtxs):
            parts = [f"{w} " for w in vwgt[v * graph.ncon:(v + 1) * graph.ncon]]
            for j in range(graph.xadj[v], graph.xadj[v + 1]):
                parts.append(f"{graph.adjncy[j] + 1} ")
                parts.append(f"{adjwgt[j]} ")
            fh.write("".join(parts) + "\n")
    return out