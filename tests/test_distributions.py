import numpy as np
import pytest

from atmcond_tools.config import (
    DISTRIBUTIONS,
    PARAMETER_NAMES,
    SCENARIOS,
    SpaceConfig,
    default_scenarios
)
from atmcond_tools.utils.distributions import (
    get_scipy_normal,
    get_scipy_uniform,
    inverse_transform
)


def test_normal_quantiles():
    dist = get_scipy_normal(loc=3.0, scale=0.5)
    assert dist.ppf(0.5) == pytest.approx(3.0)
    assert dist.ppf(0.975) == pytest.approx(3.0 + 1.959964 * 0.5, rel=1e-6)


def test_uniform_bounds():
    dist = get_scipy_uniform(a=3.5, b=5.5)
    assert dist.ppf(0.0) == pytest.approx(3.5)
    assert dist.ppf(0.5) == pytest.approx(4.5)
    assert dist.ppf(1.0) == pytest.approx(5.5)


@pytest.mark.parametrize("loc,scale", [(0.0, 0.0), (0.0, -1.0), (np.nan, 1.0), (0.0, np.inf)])
def test_malformed_normal(loc, scale):
    with pytest.raises(ValueError):
        get_scipy_normal(loc, scale)


@pytest.mark.parametrize("a,b", [(1.0, 1.0), (2.0, 1.0), (0.0, np.nan)])
def test_malformed_uniform(a, b):
    with pytest.raises(ValueError):
        get_scipy_uniform(a, b)


def test_inverse_transform_columns():
    space = default_scenarios()['scenario_a'].get_search_space()
    samples = np.full((3, 4), 0.5)
    params = inverse_transform(samples, space, names=list(PARAMETER_NAMES))

    assert list(params.columns) == list(PARAMETER_NAMES)
    np.testing.assert_allclose(params['windspeed'], 3.0)
    np.testing.assert_allclose(params['height'], 4.5)
    np.testing.assert_allclose(params['kd'], 0.7)
    np.testing.assert_allclose(params['ko'], 0.1)


@pytest.mark.parametrize("bad", [-0.01, 1.01, np.nan])
def test_inverse_transform_rejects_out_of_range(bad):
    space = default_scenarios()['scenario_a'].get_search_space()
    samples = np.full((3, 4), 0.5)
    samples[1, 2] = bad
    with pytest.raises(ValueError):
        inverse_transform(samples, space, names=list(PARAMETER_NAMES))


def test_inverse_transform_requires_every_parameter():
    space = {'windspeed': get_scipy_normal(3.0, 0.5)}
    with pytest.raises(ValueError):
        inverse_transform(np.full((2, 2), 0.5), space, names=['windspeed', 'height'])


def test_inverse_transform_checks_column_count():
    space = default_scenarios()['scenario_a'].get_search_space()
    with pytest.raises(ValueError):
        inverse_transform(np.full((2, 3), 0.5), space, names=list(PARAMETER_NAMES))


def test_scenario_definitions():
    scenarios = default_scenarios()
    assert set(scenarios) == {'scenario_a', 'scenario_b'}

    b = scenarios['scenario_b']
    assert b['windspeed'].kind == 'normal'
    assert b['windspeed'].parameters == (2.5, 0.3)
    assert b['height'].kind == 'uniform'
    assert b['height'].parameters == (9.5, 10.5)

    for space in scenarios.values():
        assert set(space) == set(PARAMETER_NAMES)


def test_space_config_round_trip():
    space = SpaceConfig.from_dict(DISTRIBUTIONS, SCENARIOS['scenario_a'])
    assert space.to_dict() == SCENARIOS['scenario_a']


def test_space_config_is_case_insensitive():
    space = SpaceConfig.from_dict(DISTRIBUTIONS, {'height': ['Uniform', [1, 2]]})
    assert space['height'].kind == 'uniform'


@pytest.mark.parametrize("entry", [
    ['lognormal', [0.0, 1.0]],
    ['normal', [0.0]],
    ['normal', [0.0, 1.0, 2.0]],
    ['normal', [0.0, -1.0]],
    ['uniform', [5.5, 3.5]],
    ['normal'],
    ['normal', 3.0],
    ['normal', None],
    ['normal', ['fast', 0.5]],
])
def test_space_config_rejects_malformed_entries(entry):
    with pytest.raises(ValueError):
        SpaceConfig.from_dict(DISTRIBUTIONS, {'windspeed': entry})
