import numpy as np
import pytest

from atmcond_tools.config import PARAMETER_NAMES
from atmcond_tools.sampling import Sampler, DesignMatrix


def test_sample_shape_and_range():
    design = Sampler(PARAMETER_NAMES, seed=42).sample(100)
    assert design.A.shape == (100, 4)
    assert design.B.shape == (100, 4)
    assert design.names == PARAMETER_NAMES
    for M in (design.A, design.B):
        assert M.min() >= 0.0
        assert M.max() <= 1.0


def test_same_seed_gives_identical_design():
    first = Sampler(PARAMETER_NAMES, seed=42).sample(1000)
    second = Sampler(PARAMETER_NAMES, seed=42).sample(1000)
    np.testing.assert_array_equal(first.A, second.A)
    np.testing.assert_array_equal(first.B, second.B)


def test_repeated_sampling_is_reproducible():
    sampler = Sampler(PARAMETER_NAMES, seed=7)
    np.testing.assert_array_equal(sampler.sample(50).A, sampler.sample(50).A)


def test_different_seeds_differ():
    first = Sampler(PARAMETER_NAMES, seed=1).sample(100)
    second = Sampler(PARAMETER_NAMES, seed=2).sample(100)
    assert not np.array_equal(first.A, second.A)


def test_base_matrices_differ():
    design = Sampler(PARAMETER_NAMES, seed=42).sample(100)
    assert not np.array_equal(design.A, design.B)


@pytest.mark.parametrize("n", [0, -5, 2.5])
def test_invalid_sample_count(n):
    with pytest.raises(ValueError):
        Sampler(PARAMETER_NAMES).sample(n)


def test_requires_parameters():
    with pytest.raises(ValueError):
        Sampler([])


def test_unknown_engine():
    with pytest.raises(ValueError):
        Sampler(PARAMETER_NAMES, engine='grid')


@pytest.mark.parametrize("engine", ['latin', 'halton'])
def test_qmc_engines(engine):
    design = Sampler(PARAMETER_NAMES, seed=3, engine=engine).sample(64)
    assert design.A.shape == (64, 4)
    assert design.B.shape == (64, 4)


def test_sobol_engine_needs_power_of_two():
    sampler = Sampler(PARAMETER_NAMES, seed=3, engine='sobol')
    assert sampler.sample(128).n == 128
    with pytest.raises(ValueError):
        sampler.sample(100)


def test_design_is_read_only():
    design = Sampler(PARAMETER_NAMES, seed=42).sample(10)
    with pytest.raises(ValueError):
        design.A[0, 0] = 0.5


def test_design_rejects_values_outside_unit_interval():
    A = np.full((2, 2), 0.5)
    B = np.full((2, 2), 1.5)
    with pytest.raises(ValueError):
        DesignMatrix(A=A, B=B, names=("a", "b"))


def test_design_rejects_name_mismatch():
    A = np.full((2, 2), 0.5)
    with pytest.raises(ValueError):
        DesignMatrix(A=A, B=A, names=("a",))


def test_num_evaluations():
    design = Sampler(PARAMETER_NAMES, seed=42).sample(1000)
    assert design.num_evaluations(calc_second_order=True) == 1000 * 10
    assert design.num_evaluations(calc_second_order=False) == 1000 * 6


def test_cross_sample_layout():
    design = Sampler(PARAMETER_NAMES, seed=42).sample(5)
    A, B = design.A, design.B
    D = 4

    X = design.cross_sample(calc_second_order=True)
    assert X.shape == (5 * (2 * D + 2), D)

    step = 2 * D + 2
    for i in range(5):
        block = X[i * step:(i + 1) * step]
        np.testing.assert_array_equal(block[0], A[i])
        np.testing.assert_array_equal(block[-1], B[i])
        for j in range(D):
            ab = A[i].copy()
            ab[j] = B[i, j]
            np.testing.assert_array_equal(block[1 + j], ab)

            ba = B[i].copy()
            ba[j] = A[i, j]
            np.testing.assert_array_equal(block[1 + D + j], ba)


def test_cross_sample_without_second_order():
    design = Sampler(PARAMETER_NAMES, seed=42).sample(5)
    X = design.cross_sample(calc_second_order=False)
    assert X.shape == (5 * 6, 4)
    np.testing.assert_array_equal(X[5], design.B[0])
    np.testing.assert_array_equal(X[6], design.A[1])


@pytest.mark.parametrize("calc_second_order", [True, False])
def test_cross_sample_matches_salib_layout(calc_second_order):
    from SALib.sample import sobol as ssobol
    from atmcond_tools.sa import SensitivityAnalysisProblem

    problem = SensitivityAnalysisProblem.unit(PARAMETER_NAMES).to_dict()
    X = ssobol.sample(problem, 16, calc_second_order=calc_second_order, seed=3)
    step = 10 if calc_second_order else 6

    design = DesignMatrix(X[::step], X[step - 1::step], PARAMETER_NAMES)
    np.testing.assert_array_equal(design.cross_sample(calc_second_order), X)
