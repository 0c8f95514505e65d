# vertex_program.py
#
# Project: Pregel PageRank Engine
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   The per-vertex PageRank computation run once per superstep.  It is a
#   pure function of the vertex's own state and its delivered inbox; the
#   coordinator owns every side effect (storing the value, routing the
#   messages, updating the active flag).
#
#   Superstep 0:  value = 1/N
#   Superstep t:  value = (1-d)/N + d * incoming_sum
#
#   incoming_sum already includes the uniform share of the previous
#   round's dangling mass.  After updating, the vertex sends value/C(v)
#   along each out-edge; a dangling vertex (C(v) = 0) hands its whole value
#   to the dangling bucket instead.
#
# References:
#   [1] Malewicz, G. et al. (2010).
#       "Pregel: A System for Large-Scale Graph Processing."  SIGMOD 2010.
#       Section 5.1, PageRank vertex program.

from collections import namedtuple

Message = namedtuple('Message', ['target', 'value'])

# value    - the vertex's new rank
# messages - tuple of Message, one per out-edge
# dangling - mass routed to the dangling bucket (0.0 unless C(v) = 0)
# delta    - |new value - old value|, 0.0 at superstep 0
# halt     - the vertex votes to halt
VertexUpdate = namedtuple('VertexUpdate', ['value', 'messages', 'dangling', 'delta', 'halt'])


def pagerank_program(vertex_id, value, incoming_sum, superstep, num_vertices, damping,
                     out_edges, per_vertex_tolerance=0.0):
    """
    Compute one superstep for one vertex.

    Args:
        vertex_id: Id of the vertex being computed
        value (float): Value after the previous superstep (ignored at 0)
        incoming_sum (float): Summed messages plus dangling share
        superstep (int): Current superstep number
        num_vertices (int): N, total vertex count
        damping (float): d
        out_edges (tuple): Out-edge targets, duplicates included
        per_vertex_tolerance (float): Vote-to-halt threshold on |delta|

    Returns:
        VertexUpdate
    """
    if superstep == 0:
        new_value = 1.0 / num_vertices
        delta = 0.0
        halt = False
    else:
        new_value = (1.0 - damping) / num_vertices + damping * incoming_sum
        delta = abs(new_value - value)
        halt = delta < per_vertex_tolerance

    if out_edges:
        share = new_value / len(out_edges)
        messages = tuple(Message(target, share) for target in out_edges)
        dangling = 0.0
    else:
        messages = ()
        dangling = new_value

    return VertexUpdate(new_value, messages, dangling, delta, halt)
