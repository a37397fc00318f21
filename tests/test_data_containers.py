import numpy as np
import numpy.testing as npt
import pytest

from stablecohorts.core.data_containers import (
    CohortAddress,
    Grid,
    Patch,
    Polygon,
    Site,
)


def test_patch_defaults_flags_to_false():
    patch = Patch(hite=[1.0, 2.0], leaf_hcap=[0.1, 0.2], wood_hcap=[0.0, 0.0], pft=[1, 2])
    assert patch.ncohorts == 2
    assert patch.leaf_resolvable.dtype == bool
    assert not patch.leaf_resolvable.any()
    assert not patch.wood_resolvable.any()


def test_patch_broadcasts_scalars():
    patch = Patch(hite=[1.0, 2.0, 3.0], leaf_hcap=0.4, wood_hcap=0, pft=2)
    npt.assert_array_equal(patch.leaf_hcap, [0.4] * 3)
    npt.assert_array_equal(patch.pft, [2, 2, 2])
    assert patch.pft.dtype == np.int64


def test_patch_owns_its_arrays():
    hite = np.array([1.0, 2.0])
    patch = Patch(hite=hite, leaf_hcap=hite, wood_hcap=hite, pft=[1, 1])
    hite[0] = 50.0
    assert patch.hite[0] == 1.0
    assert patch.leaf_hcap[0] == 1.0


def test_patch_length_mismatch():
    with pytest.raises(ValueError, match="leaf_hcap has length 1, expected 2"):
        Patch(hite=[1.0, 2.0], leaf_hcap=[0.1], wood_hcap=0.0, pft=1)


def test_patch_requires_1d():
    with pytest.raises(ValueError, match="hite must be 1-D"):
        Patch(hite=[[1.0]], leaf_hcap=0.0, wood_hcap=0.0, pft=1)
    with pytest.raises(ValueError, match="pft must be 1-D"):
        Patch(hite=[1.0], leaf_hcap=0.0, wood_hcap=0.0, pft=[[1]])


def test_patch_accepts_whole_float_pft_ids():
    patch = Patch(hite=[1.0, 1.0], leaf_hcap=0.0, wood_hcap=0.0, pft=[1.0, 3.0])
    npt.assert_array_equal(patch.pft, [1, 3])


@pytest.mark.parametrize("pft", [[1.5], [np.nan]])
def test_patch_rejects_non_integer_pft(pft):
    with pytest.raises(ValueError, match="integer ids"):
        Patch(hite=[1.0], leaf_hcap=0.0, wood_hcap=0.0, pft=pft)


def test_empty_patch():
    patch = Patch.empty()
    assert patch.ncohorts == 0
    assert patch.leaf_resolvable.shape == (0,)


def test_site_defaults_to_bare_ground():
    site = Site(patches=[Patch.empty(), Patch.empty()])
    assert site.npatches == 2
    npt.assert_array_equal(site.total_sfcw_depth, [0.0, 0.0])


def test_site_depth_length_mismatch():
    with pytest.raises(ValueError, match="total_sfcw_depth"):
        Site(patches=[Patch.empty()], total_sfcw_depth=[0.0, 1.0])


def test_hierarchy_counts():
    grid = Grid(polygons=[Polygon(sites=[Site(), Site()]), Polygon()])
    assert grid.npolygons == 2
    assert grid.polygons[0].nsites == 2
    assert grid.polygons[1].nsites == 0
    assert Grid().npolygons == 0


def test_cohort_address_str():
    addr = CohortAddress(1, 2, 3, 4)
    assert str(addr) == "polygon=1/site=2/patch=3/cohort=4"
    assert addr.ipa == 3
