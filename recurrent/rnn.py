"""Stateful recurrent architectures.

The hidden state of the previous forward pass feeds the next one. While
trainable, the graph keeps recording across forward passes and `backward`
propagates the error through every step since the last `backward`
(truncated back-propagation through time).
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING

from .ann import ANN, bias_mat, weight_mat
from .mat import Mat

if TYPE_CHECKING:
    from typing import Any, List, Mapping, Union

    from .graph import Graph
    from .net_opts import NetOpts


def recurrent_layer_group(input_size: int, hidden_units: List[int]) -> SimpleNamespace:
    """Input weights `Wx`, recurrent weights `Wh` and biases `bh` of every hidden layer."""
    group = SimpleNamespace(Wx=[], Wh=[], bh=[])
    previous_size = input_size
    for size in hidden_units:
        group.Wx.append(weight_mat(size, previous_size))
        group.Wh.append(weight_mat(size, size))
        group.bh.append(bias_mat(size))
        previous_size = size
    return group


def group_parameters(group: SimpleNamespace) -> List[Mat]:
    params = []
    for Wx, Wh, bh in zip(group.Wx, group.Wh, group.bh):
        params.extend([Wx, Wh, bh])
    return params


def affine(graph: Graph, group: SimpleNamespace, d: int, x: Mat, h: Mat) -> Mat:
    """`Wx[d] @ x + Wh[d] @ h + bh[d]` of layer `d` of a group."""
    weighted_input = graph.mul(group.Wx[d], x)
    weighted_previous = graph.mul(group.Wh[d], h)
    return graph.add(graph.add(weighted_input, weighted_previous), group.bh[d])


class RNNModel(ANN):
    """Base of the recurrent networks, keeping one state matrix per hidden layer.

    While trainable, every `forward` appends its steps to the graph and the
    recorded sequence (with the hidden state chain it references) is only
    released by `backward` or `reset_state`. Forward passes that are not
    followed by `backward`, such as predictions between training steps,
    should run with `set_trainability(False)`.
    """

    previous_hidden: List[Mat]

    def __init__(self, opt: Union[NetOpts, Mapping[str, Any]]):
        super().__init__(opt)
        self.reset_state()

    def reset_state(self) -> None:
        """Forgets the hidden state (and any recorded steps)."""
        self.previous_hidden = [Mat(size, 1) for size in self.architecture.hidden_units]
        self.graph.forget_current_sequence()


class RNN(RNNModel):
    """Deep recurrent network: `h_t = relu(Wx @ x + Wh @ h_{t-1} + bh)` per layer."""

    def init_model(self) -> SimpleNamespace:
        hidden = recurrent_layer_group(
            self.architecture.input_size, self.architecture.hidden_units
        )
        return SimpleNamespace(hidden=hidden, decoder=self.init_decoder())

    def hidden_parameters(self) -> List[Mat]:
        return group_parameters(self.model.hidden)

    def specific_forwardpass(self, state: Mat) -> Mat:
        hidden: List[Mat] = []
        for d in range(len(self.architecture.hidden_units)):
            input_vector = state if d == 0 else hidden[d - 1]
            h = self.graph.relu(
                affine(self.graph, self.model.hidden, d, input_vector, self.previous_hidden[d])
            )
            hidden.append(h)
        self.previous_hidden = hidden
        return hidden[-1] if hidden else state


class LSTM(RNNModel):
    """Long short-term memory network.

    Every hidden layer owns the gate groups `input`, `forget`, `output` and
    `cell`, each shaped like the hidden layer of `RNN`::

        i = sig(affine_input)      f = sig(affine_forget)
        o = sig(affine_output)     c~ = tanh(affine_cell)
        c_t = f * c_{t-1} + i * c~
        h_t = o * tanh(c_t)
    """

    previous_cells: List[Mat]

    def init_model(self) -> SimpleNamespace:
        input_size = self.architecture.input_size
        hidden_units = self.architecture.hidden_units
        hidden = SimpleNamespace(
            input=recurrent_layer_group(input_size, hidden_units),
            forget=recurrent_layer_group(input_size, hidden_units),
            output=recurrent_layer_group(input_size, hidden_units),
            cell=recurrent_layer_group(input_size, hidden_units),
        )
        return SimpleNamespace(hidden=hidden, decoder=self.init_decoder())

    def hidden_parameters(self) -> List[Mat]:
        hidden = self.model.hidden
        return (
            group_parameters(hidden.input)
            + group_parameters(hidden.forget)
            + group_parameters(hidden.output)
            + group_parameters(hidden.cell)
        )

    def reset_state(self) -> None:
        super().reset_state()
        self.previous_cells = [Mat(size, 1) for size in self.architecture.hidden_units]

    def specific_forwardpass(self, state: Mat) -> Mat:
        graph = self.graph
        groups = self.model.hidden
        hidden: List[Mat] = []
        cells: List[Mat] = []
        for d in range(len(self.architecture.hidden_units)):
            x = state if d == 0 else hidden[d - 1]
            h_prev = self.previous_hidden[d]

            input_gate = graph.sig(affine(graph, groups.input, d, x, h_prev))
            forget_gate = graph.sig(affine(graph, groups.forget, d, x, h_prev))
            output_gate = graph.sig(affine(graph, groups.output, d, x, h_prev))
            cell_write = graph.tanh(affine(graph, groups.cell, d, x, h_prev))

            retain_cell = graph.eltmul(forget_gate, self.previous_cells[d])
            write_cell = graph.eltmul(input_gate, cell_write)
            cell = graph.add(retain_cell, write_cell)

            hidden.append(graph.eltmul(output_gate, graph.tanh(cell)))
            cells.append(cell)
        self.previous_hidden = hidden
        self.previous_cells = cells
        return hidden[-1] if hidden else state
