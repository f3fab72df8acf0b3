"""Tests for the array-backed mesh collaborator and the interval mesh."""

import numpy as np
import pytest

from meshing import ArrayMesh, create_interval_mesh


class TestIntervalMesh:
    def test_sizes_and_tags(self):
        mesh = create_interval_mesh(5, order=3, length=2.0)
        assert mesh.element_count() == 5
        assert mesh.nodes_per_element() == 4
        assert mesh.total_node_count() == 20
        assert [mesh.element_tag(i) for i in range(5)] == [1, 2, 3, 4, 5]

    def test_node_coordinates(self):
        mesh = create_interval_mesh(2, order=1, length=1.0, origin=-1.0)
        xs = [mesh.node_coordinates(i)[0] for i in range(4)]
        assert np.allclose(xs, [-1.0, -0.5, -0.5, 0.0])
        assert np.all(mesh.node_coords[:, 1:] == 0.0)

    def test_mass_sums_to_element_length(self):
        mesh = create_interval_mesh(4, order=2, length=2.0)
        for el in range(4):
            assert np.isclose(mesh.element_mass_matrix(el).sum(), 0.5)

    def test_linear_element_operators(self):
        mesh = create_interval_mesh(1, order=1, length=3.0)
        assert np.allclose(mesh.element_mass_matrix(0), 0.5 * np.array([[2.0, 1.0], [1.0, 2.0]]))
        assert np.allclose(mesh.stiffness_operators[0, 0], [[-0.5, -0.5], [0.5, 0.5]])
        assert np.all(mesh.stiffness_operators[0, 1:] == 0.0)

    def test_interfaces(self):
        mesh = create_interval_mesh(3, order=1)
        pairs = mesh.interface_nodes.tolist()
        # Right ends, then left ends
        assert pairs == [[1, 2], [3, 4], [5, -1], [0, -1], [2, 1], [4, 3]]
        assert mesh.interface_normals[:3, 0].tolist() == [1.0, 1.0, 1.0]
        assert mesh.interface_normals[3:, 0].tolist() == [-1.0, -1.0, -1.0]

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"n_elements": 0}, "n_elements"),
            ({"n_elements": 2, "order": 0}, "order"),
            ({"n_elements": 2, "length": 0.0}, "length"),
        ],
    )
    def test_invalid_arguments(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            create_interval_mesh(**kwargs)


class TestArrayMeshFlux:
    def test_physical_flux(self):
        mesh = create_interval_mesh(1, order=1)
        u = np.array([[2.0, 4.0], [1.0, 0.0], [0.0, 1.0], [0.5, 0.5]])
        flux = np.zeros((4, 2, 3))

        mesh.update_flux(u, flux, (1.0, 0.0, 0.0), c0=2.0, rho0=0.5)

        # F_p = v0 p + rho0 c0^2 v
        assert np.allclose(flux[0, 0], [2.0 + 2.0, 0.0, 1.0])
        # F_vx = v0 vx + (p / rho0) e_x
        assert np.allclose(flux[1, 1], [0.0 + 8.0, 0.0, 0.0])
        # F_vy = v0 vy + (p / rho0) e_y
        assert np.allclose(flux[2, 0], [0.0, 4.0, 0.0])
        assert mesh._wave_speed == pytest.approx(3.0)

    def test_surface_term_of_jump(self):
        """Rusanov flux across the single interior interface of two linear elements."""
        mesh = create_interval_mesh(2, order=1)
        u_eq = np.array([0.0, 1.0, 3.0, 0.0])
        flux_eq = np.zeros((4, 3))
        mesh.update_flux(np.zeros((4, 4)), np.zeros((4, 4, 3)), (0.0, 0.0, 0.0), 1.0, 1.0)

        mesh.precompute_flux(u_eq, flux_eq, 0)
        out = np.zeros(2)
        mesh.element_flux(0, out)

        # F* . n = -0.5 * lambda * (u_b - u_a) with lambda = 1 at node 1
        assert np.allclose(out, [0.0, -1.0])
        mesh.element_flux(1, out)
        assert np.allclose(out, [1.0, 0.0])

    def test_mass_inverse_apply(self):
        mesh = create_interval_mesh(3, order=2)
        mesh.precompute_mass_matrices()
        vec = np.array([1.0, -2.0, 0.5])
        result = mesh.mass_matrix_inverse_apply(1, vec)
        assert np.allclose(mesh.element_mass_matrix(1) @ result, vec)
        assert vec.tolist() == [1.0, -2.0, 0.5]


class TestArrayMeshValidation:
    @pytest.fixture
    def arrays(self):
        return {
            "element_tags": [1, 2],
            "node_coords": np.zeros((4, 3)),
            "mass_matrices": np.stack([np.eye(2), np.eye(2)]),
            "stiffness_operators": np.zeros((2, 3, 2, 2)),
            "interface_nodes": [[1, 2], [2, 1]],
            "interface_normals": [[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]],
        }

    def test_valid_arrays(self, arrays):
        mesh = ArrayMesh(**arrays)
        assert mesh.total_node_count() == 4
        assert mesh.interface_weights.tolist() == [1.0, 1.0]

    def test_wrong_stiffness_shape(self, arrays):
        arrays["stiffness_operators"] = np.zeros((2, 2, 2))
        with pytest.raises(ValueError, match="stiffness_operators"):
            ArrayMesh(**arrays)

    def test_wrong_coordinate_count(self, arrays):
        arrays["node_coords"] = np.zeros((3, 3))
        with pytest.raises(ValueError, match="node_coords"):
            ArrayMesh(**arrays)

    def test_interface_out_of_range(self, arrays):
        arrays["interface_nodes"] = [[1, 9], [2, 1]]
        with pytest.raises(ValueError, match="outside"):
            ArrayMesh(**arrays)

    def test_asymmetric_mass_rejected(self, arrays):
        arrays["mass_matrices"] = np.stack([np.array([[1.0, 0.5], [0.0, 1.0]]), np.eye(2)])
        mesh = ArrayMesh(**arrays)
        with pytest.raises(ValueError, match="symmetric"):
            mesh.precompute_mass_matrices()
