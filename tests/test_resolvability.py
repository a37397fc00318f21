import numpy as np
import numpy.testing as npt

from stablecohorts.library.resolvability import (
    has_enough_hcap,
    hydraulics_requirement,
    is_exposed,
    resolvable_flags,
)


def test_exposure_is_strict():
    npt.assert_array_equal(is_exposed([1.0, 2.0, 3.0], 2.0), [False, False, True])


def test_sufficiency_is_strict():
    npt.assert_array_equal(
        has_enough_hcap([0.4, 0.5, 0.6], [0.5, 0.5, 0.5]), [False, False, True]
    )


def test_hydraulics_requirement():
    leaf_enough = np.array([True, False])
    npt.assert_array_equal(hydraulics_requirement(leaf_enough, 0), [False, False])
    npt.assert_array_equal(hydraulics_requirement(leaf_enough, 1), [True, False])
    npt.assert_array_equal(hydraulics_requirement(leaf_enough, -1), [True, False])


def test_hydraulics_requirement_does_not_alias_input():
    leaf_enough = np.array([True, False])
    req = hydraulics_requirement(leaf_enough, 2)
    req[:] = False
    assert leaf_enough[0]


def test_scalar_inputs_give_0d_bools():
    leaf, wood = resolvable_flags(10.0, 2.0, 0.8, 0.1, 0.5, 0)
    assert leaf.shape == () and wood.shape == ()
    assert bool(leaf) is True
    assert bool(wood) is False


def test_vectorized_truth_table():
    # exposed, leaf_enough, wood_enough for every combination, scheme 0 and 1
    hite = np.array([1, 1, 1, 1, 9, 9, 9, 9], dtype=float)
    leaf = np.array([0, 0, 1, 1, 0, 0, 1, 1], dtype=float)
    wood = np.array([0, 1, 0, 1, 0, 1, 0, 1], dtype=float)

    leaf_ok, wood_ok = resolvable_flags(hite, 1.0, leaf, wood, 0.5, 0)
    npt.assert_array_equal(leaf_ok, [0, 0, 0, 0, 0, 0, 1, 1])
    npt.assert_array_equal(wood_ok, [0, 0, 0, 0, 0, 1, 0, 1])

    leaf_ok, wood_ok = resolvable_flags(hite, 1.0, leaf, wood, 0.5, 1)
    npt.assert_array_equal(leaf_ok, [0, 0, 0, 0, 0, 0, 1, 1])
    npt.assert_array_equal(wood_ok, [0, 0, 0, 0, 0, 1, 1, 1])


def test_per_cohort_thresholds_broadcast():
    leaf_ok, _ = resolvable_flags(
        np.array([5.0, 5.0]), 0.0, np.array([1.0, 1.0]), 0.0, np.array([0.5, 2.0]), 0
    )
    npt.assert_array_equal(leaf_ok, [True, False])
