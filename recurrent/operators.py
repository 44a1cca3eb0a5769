"""Collection of the core scalar operators used throughout the code base."""

import math
from typing import Callable, Iterable, List


def mul(x: float, y: float) -> float:
    """Multiplies two numbers and returns their product.

    Args:
    ----
        x (float): The first number.
        y (float): The second number.

    Returns:
    -------
        float: The product of x and y.

    """
    return x * y


def add(x: float, y: float) -> float:
    """Adds two numbers and returns their sum."""
    return x + y


def sigmoid(x: float) -> float:
    """Computes the logistic sigmoid of the input number.

    Both branches only ever exponentiate a non-positive number, so large
    magnitudes saturate to 0 or 1 instead of overflowing.

    Args:
    ----
        x (float): The input number.

    Returns:
    -------
        float: The sigmoid of x.

    """
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-1.0 * x))
    else:
        a = math.exp(x)
        return a / (1.0 + a)


def tanh(x: float) -> float:
    """Computes the hyperbolic tangent of the input number.

    Args:
    ----
        x (float): The input number.

    Returns:
    -------
        float: tanh(x), saturating at -1 and 1.

    """
    return math.tanh(x)


def relu(x: float) -> float:
    """Applies the ReLU (Rectified Linear Unit) function.

    Args:
    ----
        x (float): The input number.

    Returns:
    -------
        float: x if x is greater than 0, otherwise 0.

    """
    if x > 0:
        return x
    return 0.0


def exp(x: float) -> float:
    """Computes the exponential of the input number."""
    return math.exp(x)


def sigmoid_back(y: float, d: float) -> float:
    """Computes the backward gradient of the sigmoid from its output.

    Args:
    ----
        y (float): The sigmoid output computed in the forward pass.
        d (float): The gradient with respect to the output.

    Returns:
    -------
        float: The gradient with respect to the input.

    """
    return y * (1.0 - y) * d


def tanh_back(y: float, d: float) -> float:
    """Computes the backward gradient of tanh from its output.

    Args:
    ----
        y (float): The tanh output computed in the forward pass.
        d (float): The gradient with respect to the output.

    Returns:
    -------
        float: The gradient with respect to the input.

    """
    return (1.0 - y * y) * d


def relu_back(x: float, d: float) -> float:
    """Computes the backward gradient of the ReLU function.

    Args:
    ----
        x (float): The input number.
        d (float): The gradient with respect to the output.

    Returns:
    -------
        float: The gradient with respect to the input if x > 0, otherwise 0.

    """
    if x > 0:
        return d
    else:
        return 0.0


def map(func: Callable, li: Iterable) -> List:
    """Applies a given function to each element in a list and returns a new list with the results.

    Args:
    ----
        func (Callable): A function that takes a single argument and returns a value.
        li (Iterable): An iterable of elements to which the function will be applied.

    Returns:
    -------
        List: A new list containing the results of applying `func` to each element in `li`.

    """
    res = []
    for x in li:
        res.append(func(x))
    return res


def reduce(func: Callable, li: Iterable[float], start: float) -> float:
    """Reduces an iterable to a single value by applying a binary function cumulatively to its elements.

    Args:
    ----
        func (Callable): A function that takes two arguments and returns a single value.
        li (Iterable[float]): An iterable to be reduced.
        start (float): The initial value to be used with the first element in the iterable.

    Returns:
    -------
        float: A single value obtained by cumulatively applying `func` to the elements of `li`.

    """
    pending = start
    for el in li:
        pending = func(pending, el)
    return pending


def sum(li: Iterable[float]) -> float:
    """Calculates the sum of all elements in an iterable of floats."""
    return reduce(add, li, 0)
