from pprint import pprint

import numpy as np

from stablecohorts.core.data_containers import Grid, Patch, Polygon, Site
from stablecohorts.core.pft_params import ClassifierConfig
from stablecohorts.core.stable_cohorts import classify_all, count_resolvable

SEED = 42
N_POLYGONS = 4
SITES_PER_POLYGON = 2
PATCHES_PER_SITE = 5
COHORTS_PER_PATCH = 8


# -----------------------------
# Synthetic state
# -----------------------------
def make_patch(rng: np.random.Generator, n: int, branch_thermo: bool) -> Patch:
    hite = rng.lognormal(mean=1.0, sigma=0.8, size=n)  # m
    # heat capacity grows with cohort size; sparse cohorts fall below threshold
    leaf_hcap = rng.uniform(0.0, 2.0, size=n) * hite
    wood_hcap = (
        rng.uniform(0.0, 4.0, size=n) * hite if branch_thermo else np.zeros(n)
    )
    pft = rng.integers(1, 4, size=n)
    return Patch(hite=hite, leaf_hcap=leaf_hcap, wood_hcap=wood_hcap, pft=pft)


def make_grid(rng: np.random.Generator, branch_thermo: bool = True) -> Grid:
    polygons = []
    for _ in range(N_POLYGONS):
        sites = []
        for _ in range(SITES_PER_POLYGON):
            patches = [
                make_patch(rng, COHORTS_PER_PATCH, branch_thermo)
                for _ in range(PATCHES_PER_SITE)
            ]
            # snow pack on some patches
            depth = np.where(
                rng.random(PATCHES_PER_SITE) < 0.3,
                rng.uniform(0.5, 3.0, size=PATCHES_PER_SITE),
                0.0,
            )
            sites.append(Site(patches=patches, total_sfcw_depth=depth))
        polygons.append(Polygon(sites=sites))
    return Grid(polygons=polygons)


# -----------------------------
# Run classification
# -----------------------------
config = ClassifierConfig.from_mapping({1: 1.5, 2: 3.0, 3: 0.8})

for scheme in (0, 1):
    for branch_thermo in (True, False):
        grid = make_grid(np.random.default_rng(SEED), branch_thermo)
        classify_all(grid, config.with_hydro_scheme(scheme))
        print(f"plant_hydro_scheme={scheme}, branch_thermo={branch_thermo}")
        pprint(count_resolvable(grid))
