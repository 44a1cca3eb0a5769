import math

import pytest

from recurrent import operators


@pytest.mark.parametrize("x", [-800.0, -5.0, -0.5, 0.0, 0.5, 5.0, 800.0])
def test_sigmoid_is_bounded(x):
    y = operators.sigmoid(x)
    assert 0.0 <= y <= 1.0
    assert y == pytest.approx(1.0 - operators.sigmoid(-x))


def test_sigmoid_saturates():
    assert operators.sigmoid(1000.0) == 1.0
    assert operators.sigmoid(-1000.0) == 0.0


def test_tanh_saturates():
    assert operators.tanh(1000.0) == 1.0
    assert operators.tanh(-1000.0) == -1.0


def test_relu():
    assert operators.relu(3.0) == 3.0
    assert operators.relu(-3.0) == 0.0
    assert operators.relu(0.0) == 0.0


def test_relu_back_routes_nothing_at_zero():
    assert operators.relu_back(0.0, 7.0) == 0.0
    assert operators.relu_back(1e-12, 7.0) == 7.0
    assert operators.relu_back(-1.0, 7.0) == 0.0


@pytest.mark.parametrize("x", [-2.0, -0.3, 0.0, 0.7, 3.0])
def test_activation_derivatives_match_closed_form(x):
    y = operators.tanh(x)
    assert operators.tanh_back(y, 1.0) == pytest.approx(1 / math.cosh(x) ** 2)
    s = operators.sigmoid(x)
    assert operators.sigmoid_back(s, 2.0) == pytest.approx(2.0 * math.exp(-x) / (1 + math.exp(-x)) ** 2)


def test_list_helpers():
    assert operators.sum([3, 5, 4, 4, 1, 1, 2, 3]) == 23
    assert operators.map(lambda x: 2 * x, [1, 2]) == [2, 4]
    assert operators.reduce(operators.mul, [2.0, 3.0, 4.0], 1.0) == 24.0
