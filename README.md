# topograph

Small, dependency-free tools for directed graphs that model interconnect
topologies.

## Modules

- `topograph.graph`: `UnidirectionalGraph`, a directed graph with integer
  vertices held as an adjacency list. It provides `add_vertex`, `add_edge`
  (which creates missing endpoints and ignores duplicates), `has_vertex`,
  `has_edge`, `vertex_count`, `edge_count`, `neighbors` (raises `KeyError`
  for an unknown vertex), `vertices` and `print_graph`, which writes one
  `v -> { ... }` line per vertex to stdout or a given file.
- `topograph.builders`: `create_ring`, `create_bidirectional_ring`,
  `create_tensor_product`, `create_torus` and `parse_graph_expression`.
  In a tensor product the pair `(u, v)` becomes vertex `u * (max_v + 1) + v`,
  where `max_v` is the largest vertex of the second graph. Only vertices
  `0 .. 999` take part.
- `topograph.connectivity`: `get_all_vertices` and `is_connected`, which
  tests weak connectivity and ignores edge directions.
- `topograph.spanning_tree`: `compute_spanning_tree`, which raises
  `RuntimeError` if the graph is not connected, and
  `compute_spanning_forest`. Both use depth-first search and raise
  `ValueError` for an empty graph.
- `topograph.hamiltonian`: `find_exact_hamiltonian_cycle`, a backtracking
  search for a directed Hamiltonian cycle, and
  `find_approximate_hamiltonian_cycle`. Both return the cycle with its
  start repeated at the end, or an empty list if there is none.
- `topograph.tsp`: `find_approximate_hamiltonian_cycle` completes the graph
  with weights from an optional matrix. Without a matrix, adjacent pairs
  weigh 1 and other pairs weigh 2. It then returns the preorder walk of a
  minimum spanning tree. `compute_mst_kruskal` and `compute_mst_prim`
  return minimum spanning trees.
- `topograph.partitioning`: exact bisectional bandwidth by brute force for
  graphs of up to 20 vertices. It provides
  `compute_exact_bisectional_bandwidth`, `compute_bisectional_bandwidth`,
  `compute_approximate_bisectional_bandwidth` and `find_bisectional_partition`,
  which returns a `GraphPartition`. `compute_known_topology_bandwidth`
  covers complete graphs and trees. Cuts count directed edges.
- `topograph.reduction`: reduction operations (`SumReduction`,
  `MaxReduction`, `MinReduction`, `AverageReduction`), `CommunicationPattern`,
  `CommunicationStep`, `AllReduceResult` and `NodeState`.
- `topograph.collective`: a simulated all-reduce over tree, hypercube and
  ring patterns. Every message is recorded, and the result carries round
  and message counts and an efficiency score. `all_reduce` picks a pattern
  when it is given `CommunicationPattern.OPTIMAL`.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install ".[test]"
```

## Example

```python
from topograph.builders import create_torus, parse_graph_expression
from topograph.partitioning import compute_bisectional_bandwidth
from topograph.collective import all_reduce
from topograph.reduction import SumReduction, CommunicationPattern

torus = create_torus([3, 4])
print(torus.vertex_count(), torus.edge_count())  # 12 48

ring = parse_graph_expression("bR[4]")
print(compute_bisectional_bandwidth(ring))  # 4

result = all_reduce(ring, {0: 1, 1: 2, 2: 3, 3: 4}, SumReduction(),
                    CommunicationPattern.RING)
print(result.final_value, result.total_rounds, result.total_messages)  # 10 2 6
```

### Expression language

| Expression | Result |
|---|---|
| `uR[N]` | unidirectional ring of `N` vertices (`N > 1`) |
| `bR[N]` | bidirectional ring of `N` vertices |
| `A x B` | tensor product. The operator needs spaces on both sides and is left-associative. |
| `(A)` | grouping |

Whitespace inside a ring term is ignored. A malformed expression or an
invalid ring size raises `ValueError`. A size too large for a 32-bit
integer raises `OverflowError`.

## What it does not do

This is a library only. It has no command-line tool. It does not read
graphs from files or save them to files. There is no approximate
bisection for graphs of more than 20 vertices, and asking for one raises
`RuntimeError`. `all_reduce` has no implementation for the butterfly,
2D mesh or custom-graph patterns.

## Running the tests

```
pytest
```