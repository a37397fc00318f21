from __future__ import annotations
import numpy as np
Array = np.ndarray


def is_exposed(hite: Array | float, total_sfcw_depth: Array | float) -> Array:
    """
    Whether the cohort top sticks out of the snow/standing-water layer.

    A cohort exactly level with the surface water is buried (strict ``>``).
    """
    return np.greater(hite, total_sfcw_depth)


def has_enough_hcap(hcap: Array | float, hcap_min: Array | float) -> Array:
    """Strict test of a tissue heat capacity against its PFT threshold."""
    return np.greater(hcap, hcap_min)


def hydraulics_requirement(leaf_enough: Array | bool, plant_hydro_scheme: int) -> Array:
    """
    Wood requirement imposed by dynamic plant hydraulics.

    With hydraulics off (scheme 0) nothing is required. Under any other
    scheme, wood must be solved wherever leaves are.
    """
    leaf_enough = np.asarray(leaf_enough, dtype=bool)
    if plant_hydro_scheme == 0:
        return np.zeros_like(leaf_enough)
    return leaf_enough.copy()


def resolvable_flags(
    hite: Array | float,
    total_sfcw_depth: Array | float,
    leaf_hcap: Array | float,
    wood_hcap: Array | float,
    hcap_min: Array | float,
    plant_hydro_scheme: int,
) -> tuple[Array, Array]:
    """
    Leaf and wood resolvability for one or many cohorts.

    All array inputs are broadcast together. ``wood_hcap`` is zero when branch
    thermodynamics is disabled upstream, so wood is then resolvable only
    through the hydraulics requirement.

    Parameters
    ----------
    hite : ndarray or scalar
        Cohort height [m].
    total_sfcw_depth : ndarray or scalar
        Snow + standing-water depth of the enclosing patch [m].
    leaf_hcap, wood_hcap : ndarray or scalar
        Tissue heat capacities [J/m²/K].
    hcap_min : ndarray or scalar
        Minimum heat capacity of the cohort PFT [J/m²/K].
    plant_hydro_scheme : int
        Plant-hydraulics scheme, 0 when disabled.

    Returns
    -------
    (ndarray, ndarray)
        Boolean ``leaf_resolvable`` and ``wood_resolvable``; 0-d for scalar
        inputs.
    """
    exposed = is_exposed(hite, total_sfcw_depth)
    leaf_enough = has_enough_hcap(leaf_hcap, hcap_min)
    wood_enough = has_enough_hcap(wood_hcap, hcap_min)
    hydro_req = hydraulics_requirement(leaf_enough, plant_hydro_scheme)

    leaf_resolvable = exposed & leaf_enough
    wood_resolvable = exposed & (wood_enough | hydro_req)
    return leaf_resolvable, wood_resolvable
