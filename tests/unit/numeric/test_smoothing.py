from __future__ import annotations

import math

import pytest

from tsreduce.errors import ConfigurationError
from tsreduce.numeric.smoothing import Acf, AsapSmoother, Metrics, asap_smooth, sma


def test_sma_sliding_by_one():
    assert sma([1.0, 2.0, 3.0, 4.0, 5.0], 2, 1) == [1.5, 2.5, 3.5, 4.5]


def test_sma_tumbling_windows_drop_partial_tail():
    assert sma([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 3, 3) == [2.0, 5.0]
    assert sma([1.0, 2.0, 3.0, 4.0, 5.0], 3, 3) == [2.0]


def test_metrics_kurtosis_and_roughness():
    assert Metrics([1.0, -1.0, 1.0, -1.0]).kurtosis() == pytest.approx(1.0)
    assert Metrics([1.0, -1.0, 1.0, -1.0, 1.0]).roughness() == pytest.approx(2.0)
    assert math.isnan(Metrics([3.0, 3.0]).kurtosis())


def test_acf_lag_zero_is_one_and_periodic_peak_is_found():
    values = [math.sin(2 * math.pi * i / 8) for i in range(80)]
    acf = Acf(values, 20)

    assert acf.correlations[0] == pytest.approx(1.0)
    peaks = acf.find_peaks()
    assert 8 in peaks
    assert acf.max_acf > 0.2


def test_constant_input_is_returned_preaggregated():
    assert asap_smooth([3.0] * 50, 10) == [3.0] * 10


def test_smoother_output_never_longer_than_input():
    values = [math.sin(i / 4.0) + (0.3 if i % 5 == 0 else 0.0) for i in range(120)]
    out = AsapSmoother().smooth(values, 60)
    assert 0 < len(out) <= len(values)


def test_resolution_must_be_positive():
    with pytest.raises(ConfigurationError):
        asap_smooth([1.0, 2.0], 0)
