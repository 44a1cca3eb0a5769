"""Stateless feed-forward architectures."""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING

from .ann import ANN, bias_mat, weight_mat
from .mat import Mat

if TYPE_CHECKING:
    from typing import Any, List, Mapping, Union

    from .net_opts import NetOpts


class FNNModel(ANN):
    """Feed-forward network: `h = tanh(Wh @ x + bh)` per hidden layer.

    Every forward pass starts a new operation sequence, so only the most
    recent pass is trained by `backward`.
    """

    def init_model(self) -> SimpleNamespace:
        hidden = SimpleNamespace(Wh=[], bh=[])
        previous_size = self.architecture.input_size
        for size in self.architecture.hidden_units:
            hidden.Wh.append(weight_mat(size, previous_size))
            hidden.bh.append(bias_mat(size))
            previous_size = size
        return SimpleNamespace(hidden=hidden, decoder=self.init_decoder())

    def hidden_parameters(self) -> List[Mat]:
        params = []
        for Wh, bh in zip(self.model.hidden.Wh, self.model.hidden.bh):
            params.extend([Wh, bh])
        return params

    def specific_forwardpass(self, state: Mat) -> Mat:
        self.graph.forget_current_sequence()
        activations = self.compute_hidden_activations(state)
        return activations[-1] if activations else state

    def compute_hidden_activations(self, state: Mat) -> List[Mat]:
        activations: List[Mat] = []
        for d in range(len(self.architecture.hidden_units)):
            input_vector = state if d == 0 else activations[d - 1]
            weighted_input = self.graph.mul(self.model.hidden.Wh[d], input_vector)
            biased_weighted_input = self.graph.add(weighted_input, self.model.hidden.bh[d])
            activations.append(self.graph.tanh(biased_weighted_input))
        return activations


class DNN(FNNModel):
    """Deep feed-forward neural network."""

    pass


class BNN(FNNModel):
    """Deep feed-forward network with a stochastic input.

    Each forward pass perturbs the input with gaussian noise of standard
    deviation `training.noise`. The perturbation is not differentiated, the
    deterministic parameters are trained on the noisy input.
    """

    def __init__(self, opt: Union[NetOpts, Mapping[str, Any]]):
        super().__init__(opt)
        self.std = Mat(self.architecture.input_size, 1).fill_const(self.training.noise)

    def specific_forwardpass(self, state: Mat) -> Mat:
        self.graph.forget_current_sequence()
        noisy_state = self.graph.gauss(state, self.std)
        activations = self.compute_hidden_activations(noisy_state)
        return activations[-1] if activations else noisy_state
