[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "topograph"
version = "0.1.0"
description = "Directed graphs for network topologies: rings, tori, spanning trees, Hamiltonian cycles, bisection bandwidth and simulated all-reduce."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "graph",
    "topology",
    "torus",
    "tensor-product",
    "spanning-tree",
    "hamiltonian-cycle",
    "bisection-bandwidth",
    "all-reduce",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["topograph"]

[tool.pytest.ini_options]
addopts = "-ra"
