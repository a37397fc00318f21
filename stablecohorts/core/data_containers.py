"""
Hierarchical containers for cohort state (grid → polygon → site → patch).

Each level owns an ordered list of the next one; the cohorts of a patch are
stored as parallel 1-D arrays indexed by cohort position. Code addresses a
cohort by integer indices at every level instead of holding references into
nested arrays.

Classes
-------
Patch
    Per-cohort parallel arrays (height, heat capacities, PFT) and the two
    resolvability flags written by the classifier.
Site
    Ordered patches plus the per-patch total surface-water depth.
Polygon
    Ordered sites.
Grid
    Ordered polygons.
CohortAddress
    0-based hierarchical path of one cohort.

Functions
---------
_to_vector
    Coerce scalars/sequences to a 1-D array of given length and dtype.

Notes
-----
- Constructors only check *shapes* (``ValueError``). Physical validity of
  the values (PFT range, heat-capacity sign) is the classifier's concern, see
  :mod:`stablecohorts.core.stable_cohorts`.
- ``leaf_resolvable`` and ``wood_resolvable`` default to ``False`` so that
  both flags are defined for every cohort even before the first
  classification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

import numpy as np

Array = np.ndarray


def _to_vector(
    x: Array | float | int | None, n: int, dtype, name: str, fill=0
) -> Array:
    """
    Coerce scalars/array-likes to a 1-D array of length ``n``.

    Parameters
    ----------
    x : array-like, scalar or None
        Input to coerce. ``None`` yields an array filled with ``fill``.
    n : int
        Target length.
    dtype : numpy dtype
        Target dtype.
    name : str
        Field name used in error messages.
    fill : scalar, default=0
        Fill value when ``x`` is None.

    Returns
    -------
    ndarray
        Owned (copied) 1-D array of length ``n``.

    Raises
    ------
    ValueError
        If ``x`` is not 0-D or 1-D, or its length differs from ``n``.
    """
    if x is None:
        return np.full((n,), fill, dtype=dtype)
    arr = np.asarray(x)
    if arr.ndim == 0:
        return np.full((n,), arr.item(), dtype=dtype)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D, got ndim={arr.ndim}.")
    if arr.shape[0] != n:
        raise ValueError(
            f"{name} has length {arr.shape[0]}, expected {n}."
        )
    return np.array(arr, dtype=dtype, copy=True)


class CohortAddress(NamedTuple):
    """0-based location of one cohort in the hierarchy."""

    ipy: int
    isi: int
    ipa: int
    ico: int

    def __str__(self) -> str:
        return (
            f"polygon={self.ipy}/site={self.isi}/"
            f"patch={self.ipa}/cohort={self.ico}"
        )


@dataclass
class Patch:
    """
    Cohorts sharing one patch, stored as parallel arrays.

    Parameters
    ----------
    hite : array-like, shape (n,)
        Cohort height [m]. Its length defines the number of cohorts.
    leaf_hcap : array-like or scalar
        Leaf heat capacity [J/m²/K].
    wood_hcap : array-like or scalar
        Wood heat capacity [J/m²/K]. Zero for every cohort when branch
        thermodynamics is disabled upstream.
    pft : array-like or scalar
        Plant functional type, 1-based.
    leaf_resolvable, wood_resolvable : array-like of bool, optional
        Classification flags. Default to ``False``.

    Raises
    ------
    ValueError
        If any array is not 1-D, lengths are inconsistent with ``hite``,
        or ``pft`` holds non-integer values.
    """

    hite: Array
    leaf_hcap: Array
    wood_hcap: Array
    pft: Array
    leaf_resolvable: Optional[Array] = None
    wood_resolvable: Optional[Array] = None

    def __post_init__(self):
        hite = np.asarray(self.hite, dtype=float)
        if hite.ndim != 1:
            raise ValueError(f"hite must be 1-D, got ndim={hite.ndim}.")
        n = hite.shape[0]

        self.hite = np.array(hite, copy=True)
        self.leaf_hcap = _to_vector(self.leaf_hcap, n, float, "leaf_hcap")
        self.wood_hcap = _to_vector(self.wood_hcap, n, float, "wood_hcap")
        pft = np.asarray(self.pft)
        if not np.issubdtype(pft.dtype, np.integer) and pft.size:
            # float ids are tolerated only when they hold whole numbers
            pft = pft.astype(float)
            if not np.all(np.isfinite(pft)) or np.any(pft != np.round(pft)):
                raise ValueError("pft must hold integer ids.")
        self.pft = _to_vector(pft, n, np.int64, "pft")
        self.leaf_resolvable = _to_vector(
            self.leaf_resolvable, n, bool, "leaf_resolvable", fill=False
        )
        self.wood_resolvable = _to_vector(
            self.wood_resolvable, n, bool, "wood_resolvable", fill=False
        )

    @property
    def ncohorts(self) -> int:
        return int(self.hite.shape[0])

    @classmethod
    def empty(cls) -> "Patch":
        """Return a patch without cohorts (e.g. freshly disturbed)."""
        return cls(hite=[], leaf_hcap=[], wood_hcap=[], pft=[])


@dataclass
class Site:
    """
    Ordered patches of one site and their surface-water state.

    Parameters
    ----------
    patches : list of Patch
        Patches owned by this site.
    total_sfcw_depth : array-like, shape (npatches,), optional
        Combined snow + standing-water depth per patch [m]. Defaults to
        zeros (bare ground).
    """

    patches: List[Patch] = field(default_factory=list)
    total_sfcw_depth: Optional[Array] = None

    def __post_init__(self):
        self.patches = list(self.patches)
        self.total_sfcw_depth = _to_vector(
            self.total_sfcw_depth,
            len(self.patches),
            float,
            "total_sfcw_depth",
        )

    @property
    def npatches(self) -> int:
        return len(self.patches)


@dataclass
class Polygon:
    """Ordered sites of one polygon."""

    sites: List[Site] = field(default_factory=list)

    @property
    def nsites(self) -> int:
        return len(self.sites)


@dataclass
class Grid:
    """Ordered polygons of one computational grid."""

    polygons: List[Polygon] = field(default_factory=list)

    @property
    def npolygons(self) -> int:
        return len(self.polygons)
