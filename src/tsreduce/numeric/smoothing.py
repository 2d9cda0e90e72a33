"""Automatic Smoothing for Attention Prioritization (ASAP).

Picks the moving-average window that minimizes roughness (the standard
deviation of first differences) while keeping the kurtosis of the smoothed
series at least as high as the input's, so spikes and level shifts stay
visible. Candidate windows come from autocorrelation peaks and are refined
with a binary search.

Reference: Kexin Rong, Peter Bailis. 2017. ASAP: Prioritizing Attention via
Time Series Smoothing. PVLDB 10(11).
"""

from __future__ import annotations

import math
from typing import Protocol, Sequence

import numpy as np

from tsreduce.errors import ConfigurationError

CORRELATION_THRESHOLD = 0.2


class Smoother(Protocol):
    def smooth(self, values: Sequence[float], resolution: int) -> list[float]:
        ...


class AsapSmoother:
    """Smoothing collaborator backed by :func:`asap_smooth`."""

    def smooth(self, values: Sequence[float], resolution: int) -> list[float]:
        return asap_smooth(values, resolution)


def asap_smooth(data: Sequence[float], resolution: int) -> list[float]:
    """Smooth ``data`` towards roughly ``resolution`` output values."""
    if resolution <= 0:
        raise ConfigurationError("resolution must be positive")
    data = [float(v) for v in data]
    if len(data) > 2 * resolution:
        period = int(len(data) / resolution)
        data = sma(data, period, period)

    acf = Acf(data, _round_half_up(len(data) / 10.0))
    peaks = acf.find_peaks()
    metrics = Metrics(data)
    original_kurt = metrics.kurtosis()
    min_obj = metrics.roughness()
    window_size = 1
    lb = 1
    largest_feasible = -1
    tail = len(data) // 10

    for i in range(len(peaks) - 1, -1, -1):
        w = peaks[i]
        if w < lb or w == 1:
            break
        if _sqrt_gap(acf.correlations[w]) * window_size > _sqrt_gap(acf.correlations[window_size]) * w:
            continue

        smoothed = Metrics(sma(data, w, 1))
        if smoothed.kurtosis() >= original_kurt:
            roughness = smoothed.roughness()
            if roughness < min_obj:
                min_obj = roughness
                window_size = w
            test_lb = _window_lower_bound(w, acf.max_acf, acf.correlations[w])
            if test_lb > lb:
                lb = _round_half_up(test_lb)
            if largest_feasible < 0:
                largest_feasible = i

    if largest_feasible > 0:
        if largest_feasible < len(peaks) - 2:
            tail = peaks[largest_feasible + 1]
        lb = max(lb, peaks[largest_feasible] + 1)

    window_size = _binary_search(lb, tail, data, min_obj, original_kurt, window_size)
    return sma(data, window_size, 1)


def _binary_search(
    head: int,
    tail: int,
    data: list[float],
    min_obj: float,
    original_kurt: float,
    window_size: int,
) -> int:
    while head <= tail:
        w = (head + tail + 1) // 2
        metrics = Metrics(sma(data, w, 1))
        if metrics.kurtosis() >= original_kurt:
            # Feasible: try larger windows.
            roughness = metrics.roughness()
            if roughness < min_obj:
                window_size = w
                min_obj = roughness
            head = w + 1
        else:
            tail = w - 1
    return window_size


def sma(data: Sequence[float], window: int, slide: int) -> list[float]:
    """Simple moving average of ``window`` values advancing by ``slide``.

    A trailing partial window is emitted only when it is exactly full.
    """
    window_start = 0
    total = 0.0
    count = 0
    values: list[float] = []
    for i, value in enumerate(data):
        if i - window_start >= window:
            values.append(total / count)
            old_start = window_start
            while window_start < len(data) and window_start - old_start < slide:
                total -= data[window_start]
                count -= 1
                window_start += 1
        total += value
        count += 1
    if count == window:
        values.append(total / count)
    return values


class Metrics:
    def __init__(self, values: Sequence[float]) -> None:
        self.values = list(values)
        self.mean = _mean(self.values)

    def kurtosis(self) -> float:
        u4 = 0.0
        variance = 0.0
        for value in self.values:
            delta = value - self.mean
            u4 += delta ** 4
            variance += delta ** 2
        if variance == 0.0:
            return math.nan
        return len(self.values) * u4 / variance ** 2

    def roughness(self) -> float:
        return _std(self.diffs())

    def diffs(self) -> list[float]:
        return [b - a for a, b in zip(self.values, self.values[1:])]


class Acf:
    """Autocorrelation for lags ``0 .. max_lag - 1`` computed through an FFT."""

    def __init__(self, values: Sequence[float], max_lag: int) -> None:
        self.values = list(values)
        self.mean = _mean(self.values)
        self.max_acf = 0.0
        self.correlations = self._calculate(max_lag)

    def _calculate(self, max_lag: int) -> list[float]:
        if not self.values:
            return [math.nan] * max_lag
        # Zero padding to the next power of two above the length.
        size = 2 ** (int(math.log2(len(self.values))) + 1)
        centered = np.zeros(size)
        centered[: len(self.values)] = np.asarray(self.values) - self.mean
        spectrum = np.fft.fft(centered)
        power = spectrum.real ** 2 + spectrum.imag ** 2
        autocov = np.fft.ifft(power).real
        with np.errstate(divide="ignore", invalid="ignore"):
            correlations = autocov[:max_lag] / autocov[0]
        return [float(c) for c in correlations]

    def find_peaks(self) -> list[int]:
        peaks: list[int] = []
        corr = self.correlations
        if len(corr) > 1:
            positive = corr[1] > corr[0]
            max_idx = 1
            for i in range(2, len(corr)):
                if not positive and corr[i] > corr[i - 1]:
                    max_idx = i
                    positive = not positive
                elif positive and corr[i] > corr[max_idx]:
                    max_idx = i
                elif positive and corr[i] < corr[i - 1]:
                    if max_idx > 1 and corr[max_idx] > CORRELATION_THRESHOLD:
                        peaks.append(max_idx)
                        if corr[max_idx] > self.max_acf:
                            self.max_acf = corr[max_idx]
                    positive = not positive
        # No usable peak: try every window from the largest down.
        if len(peaks) <= 1:
            peaks.extend(range(2, len(corr)))
        return peaks


def _window_lower_bound(w: int, max_acf: float, correlation: float) -> float:
    denominator = correlation - 1.0
    if denominator == 0.0:
        return math.nan
    ratio = (max_acf - 1.0) / denominator
    return w * math.sqrt(ratio) if ratio >= 0.0 else math.nan


def _sqrt_gap(correlation: float) -> float:
    # FFT rounding can leave a correlation a hair above 1.
    return math.sqrt(max(0.0, 1.0 - correlation)) if not math.isnan(correlation) else math.nan


def _mean(values: Sequence[float]) -> float:
    if not values:
        return math.nan
    return sum(values) / len(values)


def _std(values: Sequence[float]) -> float:
    if not values:
        return math.nan
    mean = _mean(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
