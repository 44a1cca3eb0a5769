from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

from . import mat_ops
from .autodiff import Context

if TYPE_CHECKING:
    from typing import Callable, List, Type

    from .mat import Mat
    from .mat_ops import MatFunction

logger = logging.getLogger(__name__)


class Graph:
    """Dynamic computation graph over `Mat` operations.

    Every operation method computes its result right away. While the graph
    memorizes the operation sequence, each differentiable operation also
    pushes a zero-argument backward step onto `backpropagation_stack`;
    `backward` runs them last-in-first-out so that a result's gradient is
    complete before it is distributed to the operands.

    The graph never owns matrices, it only accumulates into the gradients of
    the matrices it was handed.
    """

    needs_backprop: bool
    backpropagation_stack: List[Callable[[], None]]

    def __init__(self, needs_backprop: bool = False):
        self.needs_backprop = needs_backprop
        self.backpropagation_stack = []

    def memorize_operation_sequence(self, is_memorizing: bool) -> None:
        """Switches recording of backward steps on or off."""
        self.needs_backprop = is_memorizing

    def is_memorizing_sequence(self) -> bool:
        return self.needs_backprop

    def forget_current_sequence(self) -> None:
        """Drops all recorded backward steps, the recording mode is unchanged."""
        self.backpropagation_stack.clear()

    def backward(self) -> None:
        """Replays every recorded backward step in reverse order and empties the stack."""
        if self.backpropagation_stack:
            logger.debug("replaying %d backward steps", len(self.backpropagation_stack))
        while self.backpropagation_stack:
            step = self.backpropagation_stack.pop()
            step()

    def _apply(self, fn: Type[MatFunction], *vals: object) -> Mat:
        ctx = Context(not self.needs_backprop)
        out = fn.forward(ctx, *vals)
        if self.needs_backprop and fn.differentiable:
            self.backpropagation_stack.append(functools.partial(fn.backward, ctx, out))
        return out

    def row_pluck(self, m: Mat, ix: int) -> Mat:
        """Row `ix` of `m` as a column vector."""
        return self._apply(mat_ops.RowPluck, m, ix)

    def tanh(self, m: Mat) -> Mat:
        return self._apply(mat_ops.Tanh, m)

    def sig(self, m: Mat) -> Mat:
        return self._apply(mat_ops.Sig, m)

    def relu(self, m: Mat) -> Mat:
        return self._apply(mat_ops.Relu, m)

    def add(self, a: Mat, b: Mat) -> Mat:
        return self._apply(mat_ops.Add, a, b)

    def eltmul(self, a: Mat, b: Mat) -> Mat:
        return self._apply(mat_ops.Eltmul, a, b)

    def mul(self, a: Mat, b: Mat) -> Mat:
        """Matrix product `a @ b`."""
        return self._apply(mat_ops.Mul, a, b)

    def dot(self, a: Mat, b: Mat) -> Mat:
        return self._apply(mat_ops.Dot, a, b)

    def gauss(self, m: Mat, std: Mat) -> Mat:
        """Noisy copy of `m`. Never recorded, even while memorizing."""
        return self._apply(mat_ops.Gauss, m, std)
