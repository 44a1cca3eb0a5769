from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from typing_extensions import TypeAlias

from . import utils

if TYPE_CHECKING:
    from typing import Any, Dict, Iterable, Optional, Sequence, Tuple


Storage: TypeAlias = npt.NDArray[np.float64]


class ShapeMismatch(ValueError):
    """Exception raised when operand dimensions violate an operation's shape rule."""

    pass


class IndexOutOfRange(IndexError):
    """Exception raised for element or row access outside of a matrix."""

    pass


class Mat:
    """A 2-D matrix of float values with a gradient buffer of identical shape.

    Values live in `w` and gradients in `dw`, both flat row-major float64
    storages of length `rows * cols`. Operations read `w` and accumulate into
    `dw`; only `update` rewrites `w`.
    """

    rows: int
    cols: int
    w: Storage
    dw: Storage

    def __init__(
        self, rows: int, cols: int, values: Optional[Iterable[float]] = None
    ):
        """Creates a zero-filled matrix, or one holding the given row-major values."""
        assert rows >= 0 and cols >= 0, f"Negative dimensions {rows}x{cols}"
        self.rows = int(rows)
        self.cols = int(cols)
        if values is None:
            self.w = np.zeros(self.rows * self.cols, dtype=np.float64)
        else:
            self.w = np.array(values, dtype=np.float64).reshape(-1)
            if self.w.size != self.rows * self.cols:
                raise ShapeMismatch(
                    f"Expected {self.rows * self.cols} values for a {self.rows}x{self.cols} matrix, got {self.w.size}"
                )
        self.dw = np.zeros(self.rows * self.cols, dtype=np.float64)

    @classmethod
    def from_vector(cls, values: Sequence[float]) -> Mat:
        """Builds a column vector (n x 1) from a sequence of numbers."""
        return cls(len(values), 1, values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Mat:
        """Restores a matrix from the output of `to_dict`. Gradients start at zero."""
        return cls(data["rows"], data["cols"], data["w"])

    def to_dict(self) -> Dict[str, Any]:
        """Returns the dimensions and values as plain python types."""
        return {"rows": self.rows, "cols": self.cols, "w": self.w.tolist()}

    @property
    def size(self) -> int:
        """Number of elements."""
        return self.rows * self.cols

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols)"""
        return (self.rows, self.cols)

    def _position(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexOutOfRange(
                f"Index ({row}, {col}) out of range for a {self.rows}x{self.cols} matrix"
            )
        return row * self.cols + col

    def get(self, row: int, col: int) -> float:
        """Gets the value at (row, col)."""
        return float(self.w[self._position(row, col)])

    def set(self, row: int, col: int, value: float) -> None:
        """Sets the value at (row, col)."""
        self.w[self._position(row, col)] = value

    def add_gradient(self, row: int, col: int, value: float) -> None:
        """Accumulates `value` into the gradient at (row, col)."""
        self.dw[self._position(row, col)] += value

    def clone(self) -> Mat:
        """Returns an independent copy of values and gradients."""
        out = Mat(self.rows, self.cols, self.w)
        out.dw[:] = self.dw
        return out

    def update(self, alpha: float) -> None:
        """Performs one gradient descent step and clears the gradients.

        Args:
        ----
            alpha (float): learning rate, every value moves by `-alpha * dw`.

        """
        self.w -= alpha * self.dw
        self.dw[:] = 0.0

    def fill_randn(self, mean: float, std: float) -> Mat:
        """Fills the values with samples of a normal distribution."""
        utils.fill_randn(self.w, mean, std)
        return self

    def fill_rand(self, low: float, high: float) -> Mat:
        """Fills the values with samples of a uniform distribution."""
        utils.fill_rand(self.w, low, high)
        return self

    def fill_const(self, c: float) -> Mat:
        """Fills the values with a constant."""
        utils.fill_const(self.w, c)
        return self

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Returns a (rows, cols) copy of the values."""
        return self.w.reshape(self.rows, self.cols).copy()

    def __repr__(self) -> str:
        return f"Mat({self.rows}, {self.cols}, {self.w.tolist()})"
