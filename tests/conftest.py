"""Pytest configuration and fixtures for the DG acoustic solver tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from meshing.mesh_data import Mesh  # noqa: E402


class ScalarRateMesh(Mesh):
    """Test double: every node obeys du/dt = rate * u, identity mass matrices.

    No surface terms and no coupling between nodes, so one kernel call with
    ``beta = 0`` turns a block into ``dt * rate * u``. Node coordinates can
    be given explicitly for source tests.
    """

    def __init__(self, el_num=1, el_num_nodes=1, rate=0.0, coords=None):
        self.el_num = el_num
        self.el_num_nodes = el_num_nodes
        self.rate = rate
        if coords is None:
            coords = np.zeros((el_num * el_num_nodes, 3))
            coords[:, 0] = np.arange(el_num * el_num_nodes)
        self.coords = np.asarray(coords, dtype=np.float64)
        self.mass = np.eye(el_num_nodes)
        self.mass_prepared = 0
        self.flux_updates = 0
        self.precomputed_equations = []

    def element_count(self):
        return self.el_num

    def nodes_per_element(self):
        return self.el_num_nodes

    def element_tag(self, el):
        return 100 + el

    def node_coordinates(self, node):
        return self.coords[node]

    def precompute_mass_matrices(self):
        self.mass_prepared += 1

    def element_mass_matrix(self, el):
        return self.mass

    def update_flux(self, u, flux, v0, c0, rho0):
        self.flux_updates += 1
        flux[:] = 0.0

    def precompute_flux(self, u_eq, flux_eq, eq):
        self.precomputed_equations.append(eq)

    def element_flux(self, el, out):
        out[:] = 0.0

    def element_stiffness_vector(self, el, flux_eq, u_eq, out):
        n = self.el_num_nodes
        out[:] = self.rate * u_eq[el * n : (el + 1) * n]


@pytest.fixture
def scalar_mesh():
    """Factory for ScalarRateMesh test doubles."""
    return ScalarRateMesh


@pytest.fixture
def interval_mesh():
    """8-element, order-2 DG mesh of [0, 1]."""
    from meshing import create_interval_mesh

    return create_interval_mesh(8, order=2)


@pytest.fixture
def base_params(tmp_path):
    """Keyword arguments for a short, quiet run."""
    return {
        "c0": 1.0,
        "rho0": 1.0,
        "v0": (0.0, 0.0, 0.0),
        "time_start": 0.0,
        "time_end": 1.0,
        "time_step": 0.125,
        "time_rate": 0.5,
        "num_threads": 1,
        "save_file": str(tmp_path / "results.zarr"),
        "integrator": "rk4",
        "sources": [],
    }


@pytest.fixture
def random_state():
    """Reproducible random nodal state generator."""
    rng = np.random.default_rng(1234)

    def make(num_nodes):
        return rng.standard_normal((4, num_nodes))

    return make
