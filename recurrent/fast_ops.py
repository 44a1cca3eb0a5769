from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from numba import njit as _njit

from . import operators

if TYPE_CHECKING:
    from typing import Callable

    from .mat import Storage

# TIP: Use `NUMBA_DISABLE_JIT=1 pytest tests/` to run these kernels without JIT.

# Every kernel works on the flat row-major storages of `Mat`. Forward kernels
# write into a freshly allocated `out`; backward kernels only ever add into
# gradient storages.
Fn = TypeVar("Fn")


def njit(fn: Fn, **kwargs: Any) -> Fn:
    """JIT compiles `fn` with numba, always inlining it into compiled callers.

    Args:
    ----
        fn (Fn): The function to compile.
        **kwargs (Any): Additional options for numba.njit.

    Returns:
    -------
        Fn: The compiled dispatcher.

    """
    return _njit(inline="always", **kwargs)(fn)  # type: ignore


def tensor_map(fn: Callable[[float], float]) -> Callable[[Storage, Storage], None]:
    """Low-level elementwise map.

    Args:
    ----
        fn: compiled function from float-to-float to apply.

    Returns:
    -------
        Kernel `(out, in_storage)` filling `out[i] = fn(in_storage[i])`.

    """

    def _map(out: Storage, in_storage: Storage) -> None:
        for i in range(len(out)):
            out[i] = fn(in_storage[i])

    return njit(_map)  # type: ignore


def tensor_zip(
    fn: Callable[[float, float], float],
) -> Callable[[Storage, Storage, Storage], None]:
    """Low-level elementwise zip of two equally sized storages.

    Returns:
    -------
        Kernel `(out, a_storage, b_storage)` filling `out[i] = fn(a[i], b[i])`.

    """

    def _zip(out: Storage, a_storage: Storage, b_storage: Storage) -> None:
        for i in range(len(out)):
            out[i] = fn(a_storage[i], b_storage[i])

    return njit(_zip)  # type: ignore


def tensor_zip_accumulate(
    fn: Callable[[float, float], float],
) -> Callable[[Storage, Storage, Storage], None]:
    """Backward counterpart of `tensor_zip`.

    Returns:
    -------
        Kernel `(grad, a_storage, d_storage)` adding `fn(a[i], d[i])` into
        `grad[i]`, where `d` is the gradient of the operation's output.

    """

    def _zip_accumulate(grad: Storage, a_storage: Storage, d_storage: Storage) -> None:
        for i in range(len(grad)):
            grad[i] += fn(a_storage[i], d_storage[i])

    return njit(_zip_accumulate)  # type: ignore


def _accumulate(grad: Storage, d_storage: Storage) -> None:
    for i in range(len(grad)):
        grad[i] += d_storage[i]


def _scaled_accumulate(grad: Storage, a_storage: Storage, scale: float) -> None:
    for i in range(len(grad)):
        grad[i] += a_storage[i] * scale


def _dot(a_storage: Storage, b_storage: Storage) -> float:
    total = 0.0
    for i in range(len(a_storage)):
        total += a_storage[i] * b_storage[i]
    return total


def _matrix_multiply(
    out: Storage,
    a_storage: Storage,
    b_storage: Storage,
    n: int,
    k: int,
    m: int,
) -> None:
    """NUMBA matrix multiply of a (n x k) by b (k x m) into out (n x m).

    Args:
    ----
        out (Storage): storage for the result
        a_storage (Storage): row-major storage of a
        b_storage (Storage): row-major storage of b
        n (int): rows of a
        k (int): cols of a, rows of b
        m (int): cols of b

    Returns:
    -------
        None : Fills in `out`

    """
    for i in range(n):
        for j in range(m):
            # dot product between the ith row of a and the jth column of b
            tmp = 0.0
            for p in range(k):
                tmp += a_storage[i * k + p] * b_storage[p * m + j]
            out[i * m + j] = tmp


def _matrix_multiply_back(
    a_storage: Storage,
    a_grad: Storage,
    b_storage: Storage,
    b_grad: Storage,
    out_grad: Storage,
    n: int,
    k: int,
    m: int,
) -> None:
    """Accumulates `out_grad @ b.T` into `a_grad` and `a.T @ out_grad` into `b_grad`."""
    for i in range(n):
        for j in range(m):
            d = out_grad[i * m + j]
            for p in range(k):
                a_grad[i * k + p] += b_storage[p * m + j] * d
                b_grad[p * m + j] += a_storage[i * k + p] * d


tanh_map = tensor_map(njit(operators.tanh))
sigmoid_map = tensor_map(njit(operators.sigmoid))
relu_map = tensor_map(njit(operators.relu))

add_zip = tensor_zip(njit(operators.add))
mul_zip = tensor_zip(njit(operators.mul))

tanh_back_zip = tensor_zip_accumulate(njit(operators.tanh_back))
sigmoid_back_zip = tensor_zip_accumulate(njit(operators.sigmoid_back))
relu_back_zip = tensor_zip_accumulate(njit(operators.relu_back))
mul_back_zip = tensor_zip_accumulate(njit(operators.mul))

accumulate = njit(_accumulate)
scaled_accumulate = njit(_scaled_accumulate)
dot = njit(_dot)
matrix_multiply = njit(_matrix_multiply)
matrix_multiply_back = njit(_matrix_multiply_back)
