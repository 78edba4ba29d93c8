"""Directed graph topologies: builders, spanning trees, Hamiltonian cycles, bisection bandwidth and simulated all-reduce."""

__version__ = "0.1.0"