"""Mesh collaborators and mesh generation for the DG acoustic solver."""

from .mesh_data import Mesh, ArrayMesh
from .basis import LegendreLobattoBasis
from .interval import create_interval_mesh

__all__ = [
    "Mesh",
    "ArrayMesh",
    "LegendreLobattoBasis",
    "create_interval_mesh",
]
