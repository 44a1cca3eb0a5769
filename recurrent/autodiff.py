from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Tuple

if TYPE_CHECKING:
    from typing import Callable

    from .mat import Mat


def central_difference(
    f: Callable[[], float], mat: Mat, index: int, epsilon: float = 1e-6
) -> float:
    r"""Computes an approximation to the derivative of `f` with respect to one matrix value.

    See https://en.wikipedia.org/wiki/Finite_difference for more details.

    The value `mat.w[index]` is shifted by $\pm\epsilon$ in place, `f` is
    re-evaluated for both shifts and the value is restored afterwards.

    Args:
    ----
        f : zero-argument function recomputing a scalar from the current values
        mat : matrix holding the value to perturb
        index : flat row-major position of the value
        epsilon : a small constant

    Returns:
    -------
        An approximation of $\partial f / \partial w_{index}$

    """
    original = mat.w[index]
    try:
        mat.w[index] = original + epsilon
        f_plus = f()
        mat.w[index] = original - epsilon
        f_minus = f()
    finally:
        mat.w[index] = original
    return (f_plus - f_minus) / (2 * epsilon)


@dataclass
class Context:
    """Context class is used by `MatFunction` to store information during the forward pass."""

    no_grad: bool = False
    saved_values: Tuple[Any, ...] = ()

    def save_for_backward(self, *values: Any) -> None:
        """Store the given `values` if they need to be used during backpropagation."""
        if self.no_grad:
            return
        self.saved_values = values
