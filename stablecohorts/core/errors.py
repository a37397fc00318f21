"""Exceptions raised when cohort state cannot be classified safely."""

from __future__ import annotations

from typing import Optional


class InvalidStateError(ValueError):
    """
    Upstream cohort state is corrupt and cannot be classified.

    Raised for out-of-range PFT ids, NaN/negative heat capacities and NaN
    heights or surface-water depths. The error is fatal for the simulation
    step; it is never retried and the offending value is never coerced.

    Parameters
    ----------
    message : str
        Description of the offending value.
    polygon, site, patch, cohort : int, optional
        0-based hierarchical location of the cohort. Levels that are unknown
        to the raiser are left as ``None`` and can be filled in later with
        :meth:`at`.
    """

    def __init__(
        self,
        message: str,
        *,
        polygon: Optional[int] = None,
        site: Optional[int] = None,
        patch: Optional[int] = None,
        cohort: Optional[int] = None,
    ):
        self.message = message
        self.polygon = polygon
        self.site = site
        self.patch = patch
        self.cohort = cohort
        super().__init__(f"{message} [{self.path}]")

    @property
    def path(self) -> str:
        """Hierarchical path, e.g. ``polygon=0/site=1/patch=2/cohort=3``."""
        parts = []
        for level in ("polygon", "site", "patch", "cohort"):
            idx = getattr(self, level)
            parts.append(f"{level}={'?' if idx is None else idx}")
        return "/".join(parts)

    def at(self, *, polygon: int, site: int) -> "InvalidStateError":
        """Return a copy of this error located at ``polygon``/``site``."""
        return InvalidStateError(
            self.message,
            polygon=polygon,
            site=site,
            patch=self.patch,
            cohort=self.cohort,
        )

    def __reduce__(self):
        return (
            _rebuild_invalid_state,
            (self.message, self.polygon, self.site, self.patch, self.cohort),
        )


def _rebuild_invalid_state(message, polygon, site, patch, cohort):
    return InvalidStateError(
        message, polygon=polygon, site=site, patch=patch, cohort=cohort
    )
