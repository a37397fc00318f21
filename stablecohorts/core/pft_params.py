"""
Classifier configuration: per-PFT thresholds and the hydraulics scheme.

This module provides a single dataclass :class:`ClassifierConfig` holding the
process-wide, read-only inputs of the cohort classifier. The class is
**frozen** and uses **slots**; its threshold table is stored as a read-only
NumPy array, so one instance can be shared by every worker classifying
cohorts in parallel.

Classes
-------
ClassifierConfig
    Minimum viable heat capacity per plant functional type (PFT) and the
    plant-hydraulics scheme. Provides :meth:`ClassifierConfig.uniform`,
    :meth:`ClassifierConfig.from_mapping` and
    :meth:`ClassifierConfig.with_hydro_scheme`.

Notes
-----
- **PFT ids are 1-based.** Entry ``k`` of ``veg_hcap_min`` is the threshold
  of PFT ``k + 1``.
- **Hydraulics scheme.** ``0`` disables dynamic plant hydraulics. Any other
  value selects one of the dynamic modes (the simulator uses both positive
  and negative codes); all of them force wood to be solved whenever leaves
  are.
- **Validation.** The table must be 1-D, non-empty, finite and
  non-negative; the scheme must be an integer.

Examples
--------
>>> from stablecohorts.core.pft_params import ClassifierConfig
>>> cfg = ClassifierConfig.uniform(n_pft=3, hcap_min=0.5)
>>> cfg.hcap_min_for(2)
0.5
>>> cfg.with_hydro_scheme(1).hydraulics_active
True
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from numbers import Integral
from typing import Mapping

import numpy as np

from stablecohorts.core.errors import InvalidStateError

Array = np.ndarray


@dataclass(frozen=True, slots=True)
class ClassifierConfig:
    """
    Read-only inputs shared by every classification call.

    Parameters
    ----------
    veg_hcap_min : array-like, shape (n_pft,)
        Minimum heat capacity [J/m²/K] a tissue must exceed to be solved,
        per PFT.
    plant_hydro_scheme : int, default=0
        Plant-hydraulics scheme; ``0`` is disabled.

    Raises
    ------
    ValueError
        If the table is not a non-empty 1-D array of finite, non-negative
        values, or if the scheme is not an integer.
    """

    veg_hcap_min: Array
    plant_hydro_scheme: int = 0

    def __post_init__(self):
        table = np.array(self.veg_hcap_min, dtype=float, copy=True)
        if table.ndim != 1 or table.shape[0] == 0:
            raise ValueError("veg_hcap_min must be a non-empty 1-D array.")
        if not np.all(np.isfinite(table)) or np.any(table < 0.0):
            raise ValueError("veg_hcap_min must be finite and non-negative.")
        table.flags.writeable = False
        object.__setattr__(self, "veg_hcap_min", table)

        scheme = self.plant_hydro_scheme
        if isinstance(scheme, bool) or not isinstance(scheme, Integral):
            raise ValueError(
                f"plant_hydro_scheme must be an integer, got {scheme!r}."
            )
        object.__setattr__(self, "plant_hydro_scheme", int(scheme))

    @property
    def n_pft(self) -> int:
        return int(self.veg_hcap_min.shape[0])

    @property
    def hydraulics_active(self) -> bool:
        return self.plant_hydro_scheme != 0

    def hcap_min_for(self, pft) -> float:
        """
        Threshold of one PFT.

        Raises
        ------
        InvalidStateError
            If ``pft`` is not an integer in ``1..n_pft``.
        """
        if isinstance(pft, bool) or not isinstance(pft, Integral):
            raise InvalidStateError(f"PFT id {pft!r} is not an integer")
        if not 1 <= pft <= self.n_pft:
            raise InvalidStateError(
                f"PFT id {pft} outside configured range 1..{self.n_pft}"
            )
        return float(self.veg_hcap_min[pft - 1])

    # -------------------------
    # Convenience constructors
    # -------------------------
    @classmethod
    def uniform(
        cls, n_pft: int, hcap_min: float, plant_hydro_scheme: int = 0
    ) -> "ClassifierConfig":
        """Same threshold for ``n_pft`` PFTs."""
        if n_pft < 1:
            raise ValueError("n_pft must be at least 1.")
        return cls(
            veg_hcap_min=np.full((n_pft,), float(hcap_min)),
            plant_hydro_scheme=plant_hydro_scheme,
        )

    @classmethod
    def from_mapping(
        cls, thresholds: Mapping[int, float], plant_hydro_scheme: int = 0
    ) -> "ClassifierConfig":
        """
        Build the table from ``{pft: hcap_min}``.

        Parameters
        ----------
        thresholds : mapping of int to float
            Must contain exactly the ids ``1..N``.
        plant_hydro_scheme : int, default=0
            Plant-hydraulics scheme.

        Raises
        ------
        KeyError
            If an id in ``1..N`` is missing.
        ValueError
            If the mapping is empty or holds ids outside ``1..N``.
        """
        if not thresholds:
            raise ValueError("thresholds must not be empty.")
        n_pft = max(thresholds)
        if min(thresholds) < 1:
            raise ValueError("PFT ids in thresholds must start at 1.")
        try:
            table = [float(thresholds[ipft]) for ipft in range(1, n_pft + 1)]
        except KeyError as e:
            raise KeyError(
                f"Missing threshold for PFT {e.args[0]}. "
                f"Expected ids 1..{n_pft}."
            ) from e
        return cls(veg_hcap_min=table, plant_hydro_scheme=plant_hydro_scheme)

    def with_hydro_scheme(self, plant_hydro_scheme: int) -> "ClassifierConfig":
        """Return a copy with a different hydraulics scheme."""
        return replace(self, plant_hydro_scheme=plant_hydro_scheme)
