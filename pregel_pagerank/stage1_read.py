# stage1_read.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 1: Graph store and adjacency-list loader.
#
#   Input format, one adjacency record per line:
#
#       source [target ...]
#       source: [target ...]
#
#   Ids are opaque whitespace-free strings.  Blank lines and lines starting
#   with '#' are ignored.  A source listed on several lines accumulates the
#   targets of every line.  Duplicate targets are kept: each copy is its own
#   edge and carries its own 1/out-degree share of rank.
#
#   Source auto-detection (same idea as the GCS/local reader this stage
#   started from):
#     - `gs://bucket/path` -> download the object with google-cloud-storage.
#     - any other string / PathLike -> read a local file.
#     - anything else -> treated as an iterable of lines (open file, list).
#
# References:
#   [1] Downloading objects from GCS
#       https://cloud.google.com/storage/docs/downloading-objects#download-object-python

import os

from pregel_pagerank.errors import DanglingReference, InputUnavailable, MalformedInput
from pregel_pagerank.utils import print_stage, print_step, print_success, print_summary_box, Timer

GCS_SCHEME = "gs://"


def id_sort_key(vertex_id):
    """
    Sort key for vertex ids.

    Ids of one type keep their natural order; ids of different types
    (a graph built in code from ints and strings) group by type name
    instead of raising TypeError.
    """
    return type(vertex_id).__name__, vertex_id


class Graph:
    """
    Immutable directed graph: vertex id -> ordered tuple of out-edge targets.

    Every edge target must itself be a vertex; this is checked once, here,
    so the compute models never meet an unresolved id.
    """

    def __init__(self, adjacency):
        out = {}
        for source, targets in adjacency.items():
            out[source] = tuple(targets)
        for source, targets in out.items():
            for target in targets:
                if target not in out:
                    raise DanglingReference(source, target)
        self._out = out
        self._num_edges = sum(len(t) for t in out.values())

    @classmethod
    def from_edges(cls, edges, vertices=()):
        """
        Build a graph from (source, target) pairs.

        Every endpoint becomes a vertex; `vertices` adds isolated ones.
        """
        adjacency = {}
        for vertex in vertices:
            adjacency.setdefault(vertex, [])
        for source, target in edges:
            adjacency.setdefault(source, []).append(target)
            adjacency.setdefault(target, [])
        return cls(adjacency)

    def vertex_ids(self):
        return set(self._out)

    def out_edges(self, vertex_id):
        return self._out[vertex_id]

    def out_degree(self, vertex_id):
        return len(self._out[vertex_id])

    def dangling(self):
        """Vertices with no outgoing edges, in insertion order."""
        return [v for v, targets in self._out.items() if not targets]

    def adjacency(self):
        """A copy of the adjacency mapping (id -> list of targets)."""
        return {v: list(targets) for v, targets in self._out.items()}

    @property
    def num_edges(self):
        return self._num_edges

    def __len__(self):
        return len(self._out)

    def __iter__(self):
        return iter(self._out)

    def __contains__(self, vertex_id):
        return vertex_id in self._out

    def __eq__(self, other):
        if not isinstance(other, Graph):
            return NotImplemented
        return self._out == other._out

    def __repr__(self):
        return f"Graph(vertices={len(self)}, edges={self.num_edges})"


def parse_line(line, line_no=0):
    """
    Parse one adjacency record.

    Args:
        line (str): Raw input line
        line_no (int): 1-based line number, used in error messages

    Returns:
        tuple | None: (source, [targets]) or None for blank/comment lines

    Raises:
        MalformedInput: when the record has no source or misplaces ':'
    """
    stripped = line.strip()
    if not stripped or stripped.startswith('#'):
        return None

    tokens = stripped.split()
    head = tokens[0]
    if head.endswith(':'):
        source = head[:-1]
    elif len(tokens) > 1 and tokens[1] == ':':
        # "A : B C"
        source = head
        tokens = [head + ':'] + tokens[2:]
    else:
        source = head

    if not source:
        raise MalformedInput(line_no, line, "record has no source id")
    if ':' in source:
        raise MalformedInput(line_no, line, "':' is only allowed after the source id")

    targets = tokens[1:]
    for target in targets:
        if ':' in target:
            raise MalformedInput(line_no, line, f"unexpected ':' in target {target!r}")
    return source, targets


def parse_lines(lines, implicit_vertices=True):
    """
    Build a Graph from an iterable of adjacency records.

    Args:
        lines (iterable[str]): Input lines
        implicit_vertices (bool): If True, any id seen as a target is a
            vertex.  If False, every vertex needs its own source record and
            an undeclared target raises DanglingReference.

    Returns:
        Graph
    """
    adjacency = {}
    for line_no, line in enumerate(lines, start=1):
        record = parse_line(line, line_no)
        if record is None:
            continue
        source, targets = record
        adjacency.setdefault(source, []).extend(targets)

    if implicit_vertices:
        for targets in list(adjacency.values()):
            for target in targets:
                adjacency.setdefault(target, [])

    return Graph(adjacency)


def loads(text, implicit_vertices=True):
    """Build a Graph from a string holding adjacency records."""
    return parse_lines(text.splitlines(), implicit_vertices=implicit_vertices)


def _decode_lines(raw_lines, encoding='utf-8'):
    """Decode byte lines one by one so a bad byte is reported with its line number."""
    for line_no, raw in enumerate(raw_lines, start=1):
        try:
            yield raw.decode(encoding)
        except UnicodeDecodeError as err:
            raise MalformedInput(line_no, raw, f"not valid {encoding} at byte {err.start}") from err


# ===================================================================
# GCS reading
# ===================================================================

def _split_gcs_url(url):
    """Split gs://bucket/path/to/blob into (bucket, blob)."""
    bucket_name, _, blob_name = url[len(GCS_SCHEME):].partition('/')
    if not bucket_name or not blob_name:
        raise InputUnavailable(f"expected gs://bucket/object, got {url!r}")
    return bucket_name, blob_name


def _read_gcs_bytes(url):
    """
    Download one graph file from GCS.

    Tries an authenticated client first and falls back to an anonymous
    client for public buckets.

    Raises:
        InputUnavailable: bad URL, or the object is missing / forbidden
    """
    from google.api_core.exceptions import GoogleAPIError
    from google.auth.exceptions import DefaultCredentialsError
    from google.cloud import storage

    bucket_name, blob_name = _split_gcs_url(url)
    print_step(f"Connecting to bucket: {bucket_name}")
    try:
        client = storage.Client()
        print_success("Authenticated client")
    except DefaultCredentialsError:
        client = storage.Client.create_anonymous_client()
        print_success("Anonymous client (public endpoint)")

    blob = client.bucket(bucket_name).blob(blob_name)
    try:
        return blob.download_as_bytes()
    except GoogleAPIError as err:
        raise InputUnavailable(f"cannot download {url}: {err}") from err


# ===================================================================
# Unified entry point
# ===================================================================

def load(source, implicit_vertices=True):
    """
    Load a graph.  Auto-detects the source type:
      - `gs://bucket/blob`       -> GCS object
      - other str / os.PathLike  -> local file path
      - anything else            -> iterable of lines (open file, list)

    Args:
        source: Graph source, see above
        implicit_vertices (bool): See parse_lines()

    Returns:
        Graph

    Raises:
        MalformedInput: unparseable record or bytes that are not UTF-8
        DanglingReference: target never declared (implicit_vertices=False)
        InputUnavailable: bad gs:// URL or GCS object not readable
    """
    print_stage("Read", "Load adjacency records")

    with Timer("Total Stage 1"):
        if isinstance(source, str) and source.startswith(GCS_SCHEME):
            print_step(f"Detected GCS object: {source}")
            data = _read_gcs_bytes(source)
            graph = parse_lines(_decode_lines(data.splitlines()), implicit_vertices=implicit_vertices)
            origin = source
        elif isinstance(source, (str, os.PathLike)):
            print_step(f"Detected local file: {source}")
            with open(source, 'rb') as f:
                graph = parse_lines(_decode_lines(f), implicit_vertices=implicit_vertices)
            origin = os.fspath(source)
        else:
            graph = parse_lines(source, implicit_vertices=implicit_vertices)
            origin = type(source).__name__

        print_summary_box("Stage 1 Summary", {
            "Source": origin,
            "Vertices": len(graph),
            "Edges": graph.num_edges,
            "Dangling vertices": len(graph.dangling()),
        })

    return graph
