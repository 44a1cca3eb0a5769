"""Differentiable matrix operations.

Every operation is a stateless `MatFunction`: `forward` validates the operand
shapes, allocates a fresh result `Mat` and saves what the derivative needs in
the `Context`; `backward` distributes the gradient accumulated on the result
into the gradients of the operands. Operands' values are never modified.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import fast_ops, utils
from .mat import IndexOutOfRange, Mat, ShapeMismatch

if TYPE_CHECKING:
    from .autodiff import Context


def _assert_same_shape(name: str, a: Mat, b: Mat) -> None:
    if a.rows != b.rows or a.cols != b.cols:
        raise ShapeMismatch(
            f"{name}: operands must have the same shape, got {a.shape} and {b.shape}"
        )


class MatFunction:
    """Groups the `forward` and `backward` code of one matrix operation.

    This is a static class and is never instantiated.
    """

    differentiable = True

    @staticmethod
    def forward(ctx: Context, *inps: object) -> Mat:
        raise NotImplementedError

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        """Accumulates `out.dw` into the gradients of the saved operands."""
        raise NotImplementedError


class RowPluck(MatFunction):
    @staticmethod
    def forward(ctx: Context, m: Mat, ix: int) -> Mat:
        """Copies row `ix` of `m` into a column vector."""
        if not 0 <= ix < m.rows:
            raise IndexOutOfRange(f"Row {ix} out of range for {m.rows} rows")
        ctx.save_for_backward(m, ix)
        out = Mat(m.cols, 1)
        out.w[:] = m.w[ix * m.cols : (ix + 1) * m.cols]
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        (m, ix) = ctx.saved_values
        fast_ops.accumulate(m.dw[ix * m.cols : (ix + 1) * m.cols], out.dw)


class Tanh(MatFunction):
    @staticmethod
    def forward(ctx: Context, m: Mat) -> Mat:
        ctx.save_for_backward(m)
        out = Mat(m.rows, m.cols)
        fast_ops.tanh_map(out.w, m.w)
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        """d tanh(x) = 1 - tanh(x)^2, computed from the forward output."""
        (m,) = ctx.saved_values
        fast_ops.tanh_back_zip(m.dw, out.w, out.dw)


class Sig(MatFunction):
    @staticmethod
    def forward(ctx: Context, m: Mat) -> Mat:
        ctx.save_for_backward(m)
        out = Mat(m.rows, m.cols)
        fast_ops.sigmoid_map(out.w, m.w)
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        """d sig(x) = sig(x) * (1 - sig(x)), computed from the forward output."""
        (m,) = ctx.saved_values
        fast_ops.sigmoid_back_zip(m.dw, out.w, out.dw)


class Relu(MatFunction):
    @staticmethod
    def forward(ctx: Context, m: Mat) -> Mat:
        ctx.save_for_backward(m)
        out = Mat(m.rows, m.cols)
        fast_ops.relu_map(out.w, m.w)
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        # gradient only flows where the input was strictly positive
        (m,) = ctx.saved_values
        fast_ops.relu_back_zip(m.dw, m.w, out.dw)


class Add(MatFunction):
    @staticmethod
    def forward(ctx: Context, a: Mat, b: Mat) -> Mat:
        _assert_same_shape("add", a, b)
        ctx.save_for_backward(a, b)
        out = Mat(a.rows, a.cols)
        fast_ops.add_zip(out.w, a.w, b.w)
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        (a, b) = ctx.saved_values
        fast_ops.accumulate(a.dw, out.dw)
        fast_ops.accumulate(b.dw, out.dw)


class Eltmul(MatFunction):
    @staticmethod
    def forward(ctx: Context, a: Mat, b: Mat) -> Mat:
        _assert_same_shape("eltmul", a, b)
        ctx.save_for_backward(a, b)
        out = Mat(a.rows, a.cols)
        fast_ops.mul_zip(out.w, a.w, b.w)
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        (a, b) = ctx.saved_values
        # just as with scalar multiplication each side gets the other's values
        fast_ops.mul_back_zip(a.dw, b.w, out.dw)
        fast_ops.mul_back_zip(b.dw, a.w, out.dw)


class Mul(MatFunction):
    @staticmethod
    def forward(ctx: Context, a: Mat, b: Mat) -> Mat:
        """Matrix product of a (n x k) and b (k x m)."""
        if a.cols != b.rows:
            raise ShapeMismatch(
                f"mul: cannot multiply {a.shape} by {b.shape}, inner dimensions differ"
            )
        ctx.save_for_backward(a, b)
        out = Mat(a.rows, b.cols)
        fast_ops.matrix_multiply(out.w, a.w, b.w, a.rows, a.cols, b.cols)
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        """da += dout @ b.T and db += a.T @ dout."""
        (a, b) = ctx.saved_values
        fast_ops.matrix_multiply_back(
            a.w, a.dw, b.w, b.dw, out.dw, a.rows, a.cols, b.cols
        )


class Dot(MatFunction):
    @staticmethod
    def forward(ctx: Context, a: Mat, b: Mat) -> Mat:
        """Sum of the elementwise product, as a 1 x 1 matrix."""
        _assert_same_shape("dot", a, b)
        ctx.save_for_backward(a, b)
        out = Mat(1, 1)
        out.w[0] = fast_ops.dot(a.w, b.w)
        return out

    @staticmethod
    def backward(ctx: Context, out: Mat) -> None:
        (a, b) = ctx.saved_values
        fast_ops.scaled_accumulate(a.dw, b.w, out.dw[0])
        fast_ops.scaled_accumulate(b.dw, a.w, out.dw[0])


class Gauss(MatFunction):
    """Gaussian noise centered on the values of `m` with per-element deviations `std`.

    The noise has no slope with respect to its inputs, so no backward step is
    ever recorded for it.
    """

    differentiable = False

    @staticmethod
    def forward(ctx: Context, m: Mat, std: Mat) -> Mat:
        _assert_same_shape("gauss", m, std)
        out = Mat(m.rows, m.cols)
        for i in range(m.size):
            out.w[i] = utils.randn(m.w[i], std.w[i])
        return out
