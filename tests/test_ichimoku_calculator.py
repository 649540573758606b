"""
Ichimoku calculator: line values, signal classification, confidence and
warm-up behaviour.
"""

import pytest

from kumo.domain.entities.signal import BUY, NEUTRAL, SELL
from kumo.domain.services.ichimoku_calculator import IchimokuCalculator, MIN_CANDLES

from conftest import candle_at, series


@pytest.fixture
def calculator():
    return IchimokuCalculator()


def test_rising_window_is_buy(calculator, rising_window):
    reading = calculator.compute(rising_window)

    assert reading is not None
    assert reading.tenkan_sen == pytest.approx(48.0)       # (52 + 44) / 2
    assert reading.kijun_sen == pytest.approx(39.5)        # (52 + 27) / 2
    assert reading.senkou_span_a == pytest.approx(43.75)
    assert reading.senkou_span_b == pytest.approx(26.5)    # (52 + 1) / 2
    assert reading.chikou_span == pytest.approx(26.0)
    assert reading.price == 52.0
    assert reading.signal == BUY
    assert reading.confidence == "high"
    assert reading.candle_time == rising_window[-1].period_start


def test_falling_window_is_sell(calculator, falling_window):
    reading = calculator.compute(falling_window)

    assert reading.tenkan_sen == pytest.approx(5.0)
    assert reading.kijun_sen == pytest.approx(13.5)
    assert reading.senkou_span_b == pytest.approx(26.5)
    assert reading.chikou_span == pytest.approx(27.0)
    assert reading.signal == SELL
    assert reading.confidence == "high"


def test_flat_window_is_neutral(calculator):
    reading = calculator.compute(series([10.0] * MIN_CANDLES))

    assert reading.signal == NEUTRAL
    assert reading.confidence == "low"
    assert reading.cloud_top == reading.cloud_bottom == 10.0


def test_uses_high_and_low_not_close(calculator):
    reading = calculator.compute(series([10.0] * MIN_CANDLES, spread=2.0))

    assert reading.tenkan_sen == pytest.approx(10.0)
    assert reading.senkou_span_b == pytest.approx(10.0)

    spiky = series([10.0] * MIN_CANDLES)
    spiky[-1] = candle_at(MIN_CANDLES - 1, 10.0, spread=4.0)
    reading = calculator.compute(spiky)
    # max high 14, min low 6 in every lookback
    assert reading.tenkan_sen == pytest.approx(10.0)
    assert reading.kijun_sen == pytest.approx(10.0)


@pytest.mark.parametrize("count", [0, 1, 26, MIN_CANDLES - 1])
def test_not_enough_candles(calculator, count):
    assert calculator.compute(series(range(1, count + 1))) is None


def test_only_last_52_candles_count(calculator):
    long_window = series(range(1, 61))

    assert calculator.compute(long_window) == calculator.compute(long_window[-MIN_CANDLES:])


def test_compute_is_pure(calculator, rising_window):
    before = list(rising_window)

    first = calculator.compute(rising_window)
    second = IchimokuCalculator().compute(rising_window)

    assert first == second
    assert rising_window == before


@pytest.mark.parametrize(
    "price,a,b,expected",
    [
        (11.0, 10.0, 9.0, BUY),
        (8.0, 10.0, 9.0, SELL),
        (9.5, 10.0, 9.0, NEUTRAL),
        (10.0, 10.0, 9.0, NEUTRAL),   # touching the cloud top is still inside
        (9.0, 10.0, 9.0, NEUTRAL),
    ],
)
def test_classify(price, a, b, expected):
    assert IchimokuCalculator.classify(price, a, b) == expected


@pytest.mark.parametrize(
    "signal,price,tenkan,kijun,chikou,expected",
    [
        (BUY, 12.0, 11.0, 10.0, 9.0, "high"),
        (BUY, 12.0, 11.0, 10.0, 13.0, "medium"),
        (BUY, 12.0, 11.0, 10.0, None, "medium"),
        (BUY, 12.0, 10.0, 11.0, 9.0, "low"),
        (SELL, 8.0, 9.0, 10.0, 9.0, "high"),
        (SELL, 8.0, 9.0, 10.0, 7.0, "medium"),
        (SELL, 8.0, 10.0, 9.0, 9.0, "low"),
        (NEUTRAL, 10.0, 9.0, 8.0, 5.0, "low"),
    ],
)
def test_confidence(signal, price, tenkan, kijun, chikou, expected):
    assert IchimokuCalculator.confidence(signal, price, tenkan, kijun, chikou) == expected
