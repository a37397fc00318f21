"""
Flag which cohorts can be solved in the water, energy and CO2 budgets.

Two flags are kept per cohort, ``leaf_resolvable`` and ``wood_resolvable``.
Radiation, photosynthesis and the energy-balance integrators read them to
decide whether a cohort tissue takes part in the current step, so every
module skips or solves a cohort consistently.

A tissue is skipped when any of these holds:

1. the cohort is buried in snow or submerged in standing water;
2. its heat capacity does not exceed the PFT minimum (the cohort is too
   sparse to be solved stably);
3. (wood only) branch thermodynamics is disabled. This one is implicit:
   upstream heat-capacity assignment sets ``wood_hcap`` to zero, so the
   sufficiency test in (2) always fails. Changing that assignment changes
   this behaviour.

When dynamic plant hydraulics is active, wood is solved whenever leaves are,
regardless of its own heat capacity.

Public API
----------
classify_all
    Walk grid → polygon → site → patch → cohort and classify every cohort.
classify
    Classify one cohort, e.g. after an event changed its biomass mid-step.
classify_patch
    Classify every cohort of one patch in a single vectorized pass.
iter_cohorts
    Generator of :class:`~stablecohorts.core.data_containers.CohortAddress`
    in walk order.
count_resolvable
    Totals of cohorts and resolvable tissues (diagnostics).

Design Principles
-----------------
- **Pure recomputation**: flags are a function of current state only; there
  is no memory across steps. Re-run after any material state change.
- **Local writes**: classifying a cohort writes only that cohort's two flags,
  so cohorts may be classified in any order or concurrently.
- **Fail fast**: corrupt upstream state raises
  :class:`~stablecohorts.core.errors.InvalidStateError` naming the cohort.

See Also
--------
stablecohorts.library.resolvability : the boolean kernel used here.
stablecohorts.core.pft_params.ClassifierConfig : thresholds and scheme.
"""

from __future__ import annotations

from typing import Dict, Iterator

import numpy as np

from stablecohorts.core.data_containers import CohortAddress, Grid, Patch, Site
from stablecohorts.core.errors import InvalidStateError
from stablecohorts.core.pft_params import ClassifierConfig
from stablecohorts.library.resolvability import resolvable_flags


# ---------------------------
# Hierarchy walker
# ---------------------------
def classify_all(grid: Grid, config: ClassifierConfig) -> None:
    """
    Classify every cohort of ``grid`` exactly once.

    Parameters
    ----------
    grid : Grid
        Grid whose cohorts are flagged in place.
    config : ClassifierConfig
        Thresholds and hydraulics scheme.

    Raises
    ------
    InvalidStateError
        If a cohort holds corrupt state; the message carries its full
        polygon/site/patch/cohort path.
    """
    for ipy, cpoly in enumerate(grid.polygons):
        for isi, csite in enumerate(cpoly.sites):
            try:
                for ipa, cpatch in enumerate(csite.patches):
                    for ico in range(cpatch.ncohorts):
                        classify(csite, ipa, ico, config)
            except InvalidStateError as e:
                raise e.at(polygon=ipy, site=isi) from e


def iter_cohorts(grid: Grid) -> Iterator[CohortAddress]:
    """Yield the address of every cohort in walk order."""
    for ipy, cpoly in enumerate(grid.polygons):
        for isi, csite in enumerate(cpoly.sites):
            for ipa, cpatch in enumerate(csite.patches):
                for ico in range(cpatch.ncohorts):
                    yield CohortAddress(ipy, isi, ipa, ico)


def count_resolvable(grid: Grid) -> Dict[str, int]:
    """
    Count cohorts and resolvable tissues in ``grid``.

    Only reads the flags; run :func:`classify_all` first for current values.

    Returns
    -------
    dict
        ``{"cohorts": n, "leaf_resolvable": n_leaf,
        "wood_resolvable": n_wood}``.
    """
    totals = {"cohorts": 0, "leaf_resolvable": 0, "wood_resolvable": 0}
    for cpoly in grid.polygons:
        for csite in cpoly.sites:
            for cpatch in csite.patches:
                totals["cohorts"] += cpatch.ncohorts
                totals["leaf_resolvable"] += int(
                    np.count_nonzero(cpatch.leaf_resolvable)
                )
                totals["wood_resolvable"] += int(
                    np.count_nonzero(cpatch.wood_resolvable)
                )
    return totals


# ---------------------------
# Cohort classifier
# ---------------------------
def classify(site: Site, ipa: int, ico: int, config: ClassifierConfig) -> None:
    """
    Set ``leaf_resolvable`` / ``wood_resolvable`` of one cohort.

    Parameters
    ----------
    site : Site
        Site owning the patch.
    ipa : int
        Patch index within ``site``.
    ico : int
        Cohort index within the patch.
    config : ClassifierConfig
        Thresholds and hydraulics scheme.

    Raises
    ------
    InvalidStateError
        If the PFT id is out of range, a heat capacity is NaN, infinite or
        negative, or the height or surface-water depth is NaN.
    IndexError
        If ``ipa`` or ``ico`` do not address an existing cohort.
    """
    cpatch = site.patches[ipa]
    sfcw_depth = float(site.total_sfcw_depth[ipa])
    hcap_min = _cohort_threshold(cpatch, ipa, ico, sfcw_depth, config)

    leaf_ok, wood_ok = resolvable_flags(
        float(cpatch.hite[ico]),
        sfcw_depth,
        float(cpatch.leaf_hcap[ico]),
        float(cpatch.wood_hcap[ico]),
        hcap_min,
        config.plant_hydro_scheme,
    )
    cpatch.leaf_resolvable[ico] = bool(leaf_ok)
    cpatch.wood_resolvable[ico] = bool(wood_ok)


def classify_patch(site: Site, ipa: int, config: ClassifierConfig) -> None:
    """
    Classify all cohorts of patch ``ipa`` at once.

    Gives the same flags as calling :func:`classify` on each cohort. The
    patch is validated as a whole before any flag is written.

    Raises
    ------
    InvalidStateError
        Naming the first offending cohort of the patch.
    """
    cpatch = site.patches[ipa]
    if cpatch.ncohorts == 0:
        return
    sfcw_depth = float(site.total_sfcw_depth[ipa])
    _check_patch(cpatch, ipa, sfcw_depth, config)

    leaf_ok, wood_ok = resolvable_flags(
        cpatch.hite,
        sfcw_depth,
        cpatch.leaf_hcap,
        cpatch.wood_hcap,
        config.veg_hcap_min[cpatch.pft - 1],
        config.plant_hydro_scheme,
    )
    cpatch.leaf_resolvable[:] = leaf_ok
    cpatch.wood_resolvable[:] = wood_ok


# ---------------------------
# Validation helpers
# ---------------------------
def _cohort_threshold(
    cpatch: Patch, ipa: int, ico: int, sfcw_depth: float, config: ClassifierConfig
) -> float:
    """PFT threshold of one cohort after checking its state."""
    try:
        hcap_min = config.hcap_min_for(int(cpatch.pft[ico]))
        if np.isnan(cpatch.hite[ico]):
            raise InvalidStateError("cohort height is NaN")
        if np.isnan(sfcw_depth):
            raise InvalidStateError("patch surface-water depth is NaN")
        for name in ("leaf_hcap", "wood_hcap"):
            value = float(getattr(cpatch, name)[ico])
            if not np.isfinite(value) or value < 0.0:
                raise InvalidStateError(f"{name}={value} is not finite and >= 0")
    except InvalidStateError as e:
        raise InvalidStateError(e.message, patch=ipa, cohort=ico) from e
    return hcap_min


def _check_patch(
    cpatch: Patch, ipa: int, sfcw_depth: float, config: ClassifierConfig
) -> None:
    bad = (
        (cpatch.pft < 1)
        | (cpatch.pft > config.n_pft)
        | np.isnan(cpatch.hite)
        | ~np.isfinite(cpatch.leaf_hcap)
        | (cpatch.leaf_hcap < 0.0)
        | ~np.isfinite(cpatch.wood_hcap)
        | (cpatch.wood_hcap < 0.0)
    )
    if np.isnan(sfcw_depth):
        bad[:] = True
    if np.any(bad):
        # the scalar checks on the first offender build the message
        _cohort_threshold(
            cpatch, ipa, int(np.flatnonzero(bad)[0]), sfcw_depth, config
        )
