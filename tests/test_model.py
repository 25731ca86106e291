import math

import numpy as np
import pandas as pd
import pytest

from atmcond_tools.model import (
    AtmosphericConductanceModel,
    Model,
    atmospheric_conductance
)


def expected_conductance(v, h, zm_add=2.0, kd=0.7, ko=0.1):
    zd = max(kd * h, 0.0)
    zo = ko * h
    zm = h + zm_add
    return 1000 * v / (6.25 * math.log((zm - zd) / zo) ** 2)


def get_parameter_table() -> pd.DataFrame:
    return pd.DataFrame({
        'windspeed': [3.0, 2.5, 1.0],
        'height': [4.5, 10.0, 0.0],
        'kd': [0.7, 0.7, 0.7],
        'ko': [0.1, 0.1, 0.1]
    })


def test_model_inheritance():
    assert issubclass(AtmosphericConductanceModel, Model)


def test_reference_value():
    ca = atmospheric_conductance(v=3.0, h=4.5, kd=0.7, ko=0.1)
    assert ca == pytest.approx(119.109, abs=1e-2)
    assert ca == pytest.approx(expected_conductance(3.0, 4.5))


@pytest.mark.parametrize("v,h,kd,ko", [
    (3.0, 4.5, 0.7, 0.1),
    (2.5, 10.0, 0.7, 0.1),
    (0.4, 1.2, 0.65, 0.12),
    (5.0, 20.0, 0.0, 0.05),
])
def test_matches_closed_form(v, h, kd, ko):
    assert atmospheric_conductance(v, h, kd=kd, ko=ko) == pytest.approx(
        expected_conductance(v, h, kd=kd, ko=ko)
    )


@pytest.mark.parametrize("h,ko", [(4.5, 0.0), (0.0, 0.1), (4.5, -0.1), (-3.0, 0.1)])
def test_non_positive_roughness_gives_zero(h, ko):
    assert atmospheric_conductance(v=3.0, h=h, ko=ko) == 0.0


def test_negative_displacement_is_clamped_to_zero():
    ca = atmospheric_conductance(v=3.0, h=4.5, kd=-0.5, ko=0.1)
    assert ca == pytest.approx(1000 * 3.0 / (6.25 * math.log(6.5 / 0.45) ** 2))
    assert ca == pytest.approx(expected_conductance(3.0, 4.5, kd=0.0))


def test_increasing_in_windspeed():
    v = np.linspace(0.0, 10.0, 50)
    ca = atmospheric_conductance(v=v, h=4.5)
    assert ca[0] == 0.0
    assert np.all(np.diff(ca) > 0)


def test_displacement_above_measurement_height_is_nan():
    # zd = 6.75 > zm = 6.5
    ca = atmospheric_conductance(v=3.0, h=4.5, kd=1.5, ko=0.1)
    assert math.isnan(ca)


def test_displacement_at_measurement_height_is_zero():
    # zd == zm == 6.0, log(0) = -inf
    assert atmospheric_conductance(v=3.0, h=4.0, kd=1.5, ko=0.1) == 0.0


def test_vectorised_inputs_broadcast():
    h = np.array([3.5, 4.5, 5.5])
    ca = atmospheric_conductance(v=3.0, h=h)
    assert ca.shape == (3,)
    for value, hi in zip(ca, h):
        assert value == pytest.approx(expected_conductance(3.0, hi))


def test_scalar_input_returns_float():
    assert isinstance(atmospheric_conductance(3.0, 4.5), float)


def test_run_returns_one_output_per_row():
    params = get_parameter_table()
    out = AtmosphericConductanceModel.run(X=params)
    assert out.shape == (3,)
    assert out[0] == pytest.approx(expected_conductance(3.0, 4.5))
    assert out[2] == 0.0


def test_run_uses_measurement_offset():
    params = get_parameter_table().iloc[:1]
    out = AtmosphericConductanceModel.run(X=params, zm_add=5.0)
    assert out[0] == pytest.approx(expected_conductance(3.0, 4.5, zm_add=5.0))


def test_run_requires_windspeed_and_height():
    with pytest.raises(ValueError):
        AtmosphericConductanceModel.run(X=pd.DataFrame({'windspeed': [3.0]}))


def test_evaluate_appends_output_column():
    params = get_parameter_table()
    model = AtmosphericConductanceModel(run_kwargs={'zm_add': 2.0})
    evaluated = model.evaluate(params)

    assert list(evaluated.columns) == list(params.columns) + ['conductance']
    assert 'conductance' not in params.columns
    np.testing.assert_allclose(
        evaluated['conductance'],
        AtmosphericConductanceModel.run(X=params)
    )


def test_get_objective_returns_callable():
    model = AtmosphericConductanceModel(run_kwargs={'zm_add': 3.0})
    obj = model.get_objective()
    assert callable(obj)
    params = get_parameter_table().iloc[:1]
    assert obj(X=params)[0] == pytest.approx(expected_conductance(3.0, 4.5, zm_add=3.0))


def test_evaluate_overrides_leave_run_kwargs_untouched():
    params = get_parameter_table().iloc[:1]
    model = AtmosphericConductanceModel(run_kwargs={'zm_add': 2.0})
    evaluated = model.evaluate(params, zm_add=5.0)

    assert evaluated['conductance'].iloc[0] == pytest.approx(expected_conductance(3.0, 4.5, zm_add=5.0))
    assert model.run_kwargs == {'zm_add': 2.0}
