"""Per-element update kernel of the DG scheme.

For each of the four equations the kernel evaluates, element by element,

    u_el <- dt * M_el^-1 (S_el - F_el) + beta * u_el

where S is the volume (stiffness) term and F the surface flux term. With
``beta = 1`` this is a forward Euler update; with ``beta = 0`` the block is
overwritten with the stage increment used by Runge-Kutta.
"""

import logging

from solvers.datastructures import NUM_EQUATIONS
from solvers.dg.linalg import lin_eq, minus

log = logging.getLogger(__name__)


def _update_elements(mesh, u_eq, flux_eq, dt, beta, n, start, stop, el_flux, el_stiffvector):
    """Update elements ``start..stop-1`` of one equation.

    ``el_flux`` and ``el_stiffvector`` are private to the caller.
    """
    for el in range(start, stop):
        mesh.element_flux(el, el_flux)
        mesh.element_stiffness_vector(el, flux_eq, u_eq, el_stiffvector)
        minus(el_stiffvector, el_flux)
        lin_eq(
            mesh.element_mass_matrix(el),
            el_stiffvector,
            u_eq[el * n : (el + 1) * n],
            dt,
            beta,
        )


def num_step(mesh, params, u, flux, beta, context):
    """Apply one scaled DG update to every element of every equation.

    Parameters
    ----------
    mesh : Mesh
        Mesh collaborator providing flux, stiffness and mass terms.
    params : SolverParameters
        Supplies ``time_step``.
    u : np.ndarray
        Nodal solution (4, num_nodes), updated in place.
    flux : np.ndarray
        Physical flux tensor (4, num_nodes, 3), already refreshed from ``u``.
    beta : float
        Weight of the previous solution in the update.
    context : SolverContext
        Run scratch: element counts, chunk schedule and thread pool.

    Notes
    -----
    The element loop is split into contiguous chunks; every chunk runs with
    its own scratch buffers and all chunks are joined before the next
    equation starts. Results do not depend on the thread count.
    """
    dt = float(params.time_step)
    beta = float(beta)
    n = context.el_num_nodes

    for eq in range(NUM_EQUATIONS):
        mesh.precompute_flux(u[eq], flux[eq], eq)

        if context.executor is None:
            _update_elements(
                mesh, u[eq], flux[eq], dt, beta, n,
                0, context.el_num, context.el_flux, context.el_stiffvector,
            )
            continue

        futures = [
            context.executor.submit(
                _update_elements, mesh, u[eq], flux[eq], dt, beta, n,
                start, stop, context.el_flux.copy(), context.el_stiffvector.copy(),
            )
            for start, stop in context.chunks
        ]
        # Join every chunk; the first worker exception is re-raised here
        for future in futures:
            future.result()
