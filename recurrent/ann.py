from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from types import SimpleNamespace
from typing import TYPE_CHECKING

import numpy as np

from .graph import Graph
from .mat import Mat, ShapeMismatch
from .net_opts import as_net_opts

if TYPE_CHECKING:
    from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

    import numpy.typing as npt

    from .net_opts import Architecture, NetOpts, Training

logger = logging.getLogger(__name__)


def weight_mat(rows: int, cols: int) -> Mat:
    """A weight matrix mapping a layer of width `cols` to one of width `rows`."""
    return Mat(rows, cols).fill_randn(0, 1 / math.sqrt(max(cols, 1)))


def bias_mat(rows: int) -> Mat:
    return Mat(rows, 1)


class ANN(ABC):
    """Shared training routine of all network architectures.

    Subclasses build `self.model`, a namespace of parameter matrices with a
    `decoder` group (`Wh`, `b`), and compute the last hidden activation in
    `specific_forwardpass`. The decoder is linear.

    Attributes
    ----------
        architecture (Architecture): layer widths.
        training (Training): hyper parameters.
        graph (Graph): records the forward pass while trainable.
        model (SimpleNamespace): parameter matrices grouped by layer.

    """

    architecture: Architecture
    training: Training
    graph: Graph
    model: SimpleNamespace
    output: Optional[Mat]

    def __init__(self, opt: Union[NetOpts, Mapping[str, Any]]):
        net_opts = as_net_opts(opt)
        self.architecture = net_opts.architecture
        self.training = net_opts.training
        self.graph = Graph()
        self.output = None
        self.model = self.init_model()
        logger.debug(
            "%s initialized with %d parameter matrices",
            type(self).__name__,
            len(self.parameters()),
        )

    @abstractmethod
    def init_model(self) -> SimpleNamespace:
        """Creates the parameter matrices."""
        ...

    @abstractmethod
    def hidden_parameters(self) -> List[Mat]:
        """All parameter matrices of the hidden layers."""
        ...

    @abstractmethod
    def specific_forwardpass(self, state: Mat) -> Mat:
        """Computes the activation of the last hidden layer from the input."""
        ...

    def init_decoder(self) -> SimpleNamespace:
        hidden_units = self.architecture.hidden_units
        last = hidden_units[-1] if hidden_units else self.architecture.input_size
        return SimpleNamespace(
            Wh=weight_mat(self.architecture.output_size, last),
            b=bias_mat(self.architecture.output_size),
        )

    def parameters(self) -> List[Mat]:
        """Every matrix `update` applies gradient descent to."""
        return self.hidden_parameters() + [self.model.decoder.Wh, self.model.decoder.b]

    def set_trainability(self, is_trainable: bool) -> None:
        """While trainable the forward pass is recorded for `backward`."""
        self.graph.memorize_operation_sequence(is_trainable)

    def is_trainable(self) -> bool:
        return self.graph.is_memorizing_sequence()

    def forward(self, input: Iterable[float]) -> npt.NDArray[np.float64]:
        """Computes the output vector for one input vector.

        Args:
        ----
            input: values of length `input_size`.

        Returns:
        -------
            The output vector of length `output_size`.

        """
        state = Mat.from_vector(list(input))
        if state.size != self.architecture.input_size:
            raise ShapeMismatch(
                f"Expected an input of size {self.architecture.input_size}, got {state.size}"
            )
        activation = self.specific_forwardpass(state)
        self.output = self.compute_output(activation)
        return self.output.w.copy()

    def compute_output(self, activation: Mat) -> Mat:
        weighted = self.graph.mul(self.model.decoder.Wh, activation)
        return self.graph.add(weighted, self.model.decoder.b)

    def backward(
        self, expected_output: Sequence[float], alpha: Optional[float] = None
    ) -> float:
        """Trains on the error of the last forward pass.

        Seeds the output gradient with the error against `expected_output`,
        replays the recorded graph and applies one gradient descent step.
        Nothing is trained while the network is not trainable.

        Args:
        ----
            expected_output: target vector of length `output_size`.
            alpha: learning rate, defaults to `training.alpha`.

        Returns:
        -------
            float: the squared loss 0.5 * sum((output - expected)^2).

        """
        if self.output is None:
            raise RuntimeError("backward called before any forward pass")
        if len(expected_output) != self.output.size:
            raise ShapeMismatch(
                f"Expected output of size {self.output.size}, got {len(expected_output)}"
            )
        loss = self.propagate_loss_into_decoder_layer(expected_output)
        if self.is_trainable():
            self.graph.backward()
            self.update(alpha if alpha is not None else self.training.alpha)
        return float(loss)

    def propagate_loss_into_decoder_layer(self, expected_output: Sequence[float]) -> float:
        assert self.output is not None
        loss = 0.0
        for i in range(self.output.size):
            error = self.output.w[i] - expected_output[i]
            loss += 0.5 * error * error
            # converged outputs stop pulling on the parameters
            if abs(error) > self.training.loss:
                clamp = self.training.loss_clamp
                self.output.dw[i] = min(max(error, -clamp), clamp)
        return float(loss)

    def update(self, alpha: float) -> None:
        """Gradient descent on every parameter matrix, clearing their gradients."""
        logger.debug("%s update with alpha=%g", type(self).__name__, alpha)
        for m in self.parameters():
            m.update(alpha)
