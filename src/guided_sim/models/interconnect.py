"""
GPU interconnect topologies for collective communication.

Latency is counted in communication steps for an all-reduce:
    ring        N - 1            O(N)
    tree        ceil(2 log2 N)   O(log N)   (reduce up, broadcast down)
    fat tree    ceil(2 log2 N)   O(log N)
    full mesh   1                O(1)

Links:
    ring        N (adjacent pairs with wrap-around)
    tree        N - 1 (binary heap parent -> children)
    full mesh   N (N - 1) / 2
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from .base import SimulationModel
from .parameters import ParameterSpec

RING = "ring"
TREE = "tree"
FAT_TREE = "fat_tree"
FULL_MESH = "full_mesh"

TOPOLOGY_SPECS = {
    RING: {"latency": "O(N)", "bandwidth": "Optimal", "scalability": "Good for small N", "efficiency": 100.0},
    TREE: {"latency": "O(log N)", "bandwidth": "Sub-optimal", "scalability": "Good for large N", "efficiency": 50.0},
    FAT_TREE: {"latency": "O(log N)", "bandwidth": "High", "scalability": "Excellent", "efficiency": 90.0},
    FULL_MESH: {"latency": "O(1)", "bandwidth": "Maximum", "scalability": "Poor (N^2 links)", "efficiency": 100.0},
}


@dataclass(frozen=True)
class InterconnectMetrics:
    """
    Topology characteristics for the current node count.

    Attributes:
        topology: Topology key.
        node_count: Number of nodes.
        latency_steps: All-reduce communication steps.
        bandwidth_efficiency_pct: Fraction of link bandwidth usable (%).
        connections: Undirected links as (from, to) node index pairs.
        link_count: len(connections).
        latency_class: Asymptotic latency label.
        bandwidth_class: Qualitative bandwidth label.
        scalability: Qualitative scalability label.
        message_size_mb: Message size shown alongside the topology (MB).
    """
    topology: str
    node_count: int
    latency_steps: int
    bandwidth_efficiency_pct: float
    connections: Tuple[Tuple[int, int], ...]
    link_count: int
    latency_class: str
    bandwidth_class: str
    scalability: str
    message_size_mb: float


def latency_steps(topology: str, node_count: int) -> int:
    n = int(node_count)
    if n <= 1:
        return 0
    if topology == RING:
        return n - 1
    if topology in (TREE, FAT_TREE):
        return int(math.ceil(2 * math.log2(n)))
    return 1


def connections(topology: str, node_count: int) -> List[Tuple[int, int]]:
    n = max(0, int(node_count))
    links: List[Tuple[int, int]] = []
    if topology == RING:
        seen = set()
        for i in range(n):
            j = (i + 1) % n
            key = (min(i, j), max(i, j))
            if i == j or key in seen:
                continue
            seen.add(key)
            links.append((i, j))
    elif topology in (TREE, FAT_TREE):
        for i in range(n // 2):
            if 2 * i + 1 < n:
                links.append((i, 2 * i + 1))
            if 2 * i + 2 < n:
                links.append((i, 2 * i + 2))
    else:
        for i in range(n):
            for j in range(i + 1, n):
                links.append((i, j))
    return links


class InterconnectModel(SimulationModel):
    name = "interconnect"
    title = "Interconnect Topology"
    description = "Latency and bandwidth trade-offs of ring, tree, fat-tree and mesh fabrics."

    def parameter_specs(self) -> Dict[str, ParameterSpec]:
        return {
            "topology": ParameterSpec("topology", "choice", RING, choices=tuple(TOPOLOGY_SPECS),
                                      description="Network topology"),
            "node_count": ParameterSpec("node_count", "int", 8, 4, 16, 1, unit="nodes",
                                        description="GPU nodes"),
            "message_size_mb": ParameterSpec("message_size_mb", "float", 100.0, 10.0, 1000.0, 10.0, unit="MB",
                                             description="Message size"),
        }

    def compute(self, params: Mapping[str, Any]) -> InterconnectMetrics:
        topology = params["topology"]
        if topology not in TOPOLOGY_SPECS:
            topology = RING
        n = int(params["node_count"])
        spec = TOPOLOGY_SPECS[topology]
        links = tuple(connections(topology, n))
        return InterconnectMetrics(
            topology=topology,
            node_count=n,
            latency_steps=latency_steps(topology, n),
            bandwidth_efficiency_pct=spec["efficiency"],
            connections=links,
            link_count=len(links),
            latency_class=spec["latency"],
            bandwidth_class=spec["bandwidth"],
            scalability=spec["scalability"],
            message_size_mb=float(params["message_size_mb"]),
        )
