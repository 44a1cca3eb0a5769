from unittest import mock

import numpy as np
import pytest

from recurrent import Context, Graph, Mat, mat_ops


@pytest.fixture
def mat():
    return Mat(2, 4).fill_randn(0, 1)


@pytest.fixture
def mat2():
    return Mat(2, 4).fill_randn(0, 1)


def square(m):
    return Mat(m.cols, m.rows).fill_randn(0, 1)


def run_all_operations(graph, mat, mat2):
    """Calls every differentiable operation once, returns how many were called."""
    graph.row_pluck(mat, 1)
    graph.tanh(mat)
    graph.sig(mat)
    graph.relu(mat)
    graph.add(mat, mat2)
    graph.eltmul(mat, mat2)
    graph.mul(mat, square(mat))
    graph.dot(mat, mat2)
    return 8


class TestOperationCalls:
    @pytest.mark.parametrize(
        "method, fn",
        [
            ("tanh", mat_ops.Tanh),
            ("sig", mat_ops.Sig),
            ("relu", mat_ops.Relu),
        ],
    )
    def test_monadic_operations_call_their_function(self, mat, method, fn):
        graph = Graph()
        with mock.patch.object(fn, "forward", wraps=fn.forward) as spy:
            getattr(graph, method)(mat)
        spy.assert_called_once()
        assert spy.call_args.args[1] is mat

    @pytest.mark.parametrize(
        "method, fn",
        [
            ("add", mat_ops.Add),
            ("eltmul", mat_ops.Eltmul),
            ("dot", mat_ops.Dot),
            ("gauss", mat_ops.Gauss),
        ],
    )
    def test_dual_operations_call_their_function(self, mat, mat2, method, fn):
        graph = Graph()
        with mock.patch.object(fn, "forward", wraps=fn.forward) as spy:
            getattr(graph, method)(mat, mat2)
        spy.assert_called_once()
        assert spy.call_args.args[1:] == (mat, mat2)

    def test_row_pluck_calls_its_function(self, mat):
        graph = Graph()
        with mock.patch.object(
            mat_ops.RowPluck, "forward", wraps=mat_ops.RowPluck.forward
        ) as spy:
            graph.row_pluck(mat, 0)
        assert spy.call_args.args[1:] == (mat, 0)

    def test_mul_calls_its_function(self, mat):
        graph = Graph()
        other = square(mat)
        with mock.patch.object(mat_ops.Mul, "forward", wraps=mat_ops.Mul.forward) as spy:
            graph.mul(mat, other)
        assert spy.call_args.args[1:] == (mat, other)


class TestBackpropagationStack:
    def test_nothing_is_recorded_by_default(self, mat, mat2):
        graph = Graph()
        run_all_operations(graph, mat, mat2)
        graph.gauss(mat, mat2)
        assert len(graph.backpropagation_stack) == 0

    def test_every_differentiable_operation_is_recorded(self, mat, mat2):
        graph = Graph()
        graph.memorize_operation_sequence(True)
        n = run_all_operations(graph, mat, mat2)
        assert len(graph.backpropagation_stack) == n

    def test_gauss_is_never_recorded(self, mat, mat2):
        graph = Graph()
        graph.memorize_operation_sequence(True)
        for _ in range(3):
            graph.gauss(mat, mat2)
        assert len(graph.backpropagation_stack) == 0

    def test_recording_can_be_switched_off_again(self, mat, mat2):
        graph = Graph()
        graph.memorize_operation_sequence(True)
        graph.tanh(mat)
        graph.memorize_operation_sequence(False)
        run_all_operations(graph, mat, mat2)
        assert len(graph.backpropagation_stack) == 1

    def test_backward_drains_the_stack(self, mat, mat2):
        graph = Graph(needs_backprop=True)
        run_all_operations(graph, mat, mat2)
        graph.backward()
        assert len(graph.backpropagation_stack) == 0

    def test_backward_runs_last_in_first_out(self):
        graph = Graph(needs_backprop=True)
        calls = []
        for i in range(3):
            graph.backpropagation_stack.append(lambda i=i: calls.append(i))
        graph.backward()
        assert calls == [2, 1, 0]

    def test_backward_follows_the_chain_rule(self):
        a = Mat(2, 3, [0.5, -1.2, 0.3, 2.0, -0.7, 1.1])
        b = Mat(3, 2, [-0.4, 0.9, 1.5, -2.2, 0.8, 0.6])
        graph = Graph(needs_backprop=True)
        c = graph.tanh(graph.mul(a, b))
        c.dw[:] = 1.0
        graph.backward()

        A, B = a.to_numpy(), b.to_numpy()
        C = np.tanh(A @ B)
        d_product = 1.0 - C * C
        np.testing.assert_allclose(a.dw.reshape(2, 3), d_product @ B.T)
        np.testing.assert_allclose(b.dw.reshape(3, 2), A.T @ d_product)

    def test_gradients_of_shared_results_are_complete(self):
        # h feeds two consumers; both must have run before h's own backward step
        x = Mat(2, 1, [0.3, -0.8])
        graph = Graph(needs_backprop=True)
        h = graph.tanh(x)
        out = graph.add(graph.eltmul(h, h), h)
        out.dw[:] = 1.0
        graph.backward()
        t = np.tanh(x.w)
        np.testing.assert_allclose(x.dw, (2 * t + 1) * (1 - t * t))


class TestSequenceMemorization:
    def test_off_by_default(self):
        assert Graph().is_memorizing_sequence() is False

    @pytest.mark.parametrize("flag", [True, False])
    def test_flag_round_trip(self, flag):
        graph = Graph()
        graph.memorize_operation_sequence(flag)
        assert graph.is_memorizing_sequence() is flag

    def test_forget_current_sequence(self, mat):
        graph = Graph(needs_backprop=True)
        graph.add(mat, mat)
        graph.add(mat, mat)
        graph.add(mat, mat)
        graph.forget_current_sequence()
        assert len(graph.backpropagation_stack) == 0
        graph.forget_current_sequence()
        assert len(graph.backpropagation_stack) == 0
        assert graph.is_memorizing_sequence() is True

    def test_independent_graphs_do_not_interfere(self, mat):
        recording, silent = Graph(needs_backprop=True), Graph()
        recording.tanh(mat)
        silent.tanh(mat)
        assert len(recording.backpropagation_stack) == 1
        assert len(silent.backpropagation_stack) == 0


def test_update_after_backward():
    p = Mat(2, 2, [1.0, -1.0, 0.5, 2.0])
    x = Mat(2, 1, [1.0, 3.0])
    graph = Graph(needs_backprop=True)
    y = graph.mul(p, x)
    y.dw[:] = [0.5, -1.0]
    graph.backward()
    g = p.dw.copy()
    before = p.w.copy()
    p.update(0.1)
    np.testing.assert_allclose(p.w, before - 0.1 * g)
    assert not p.dw.any()


def test_context_saves_values_for_backward():
    ctx = Context()
    a, b = Mat(1, 1), Mat(1, 1)
    ctx.save_for_backward(a, b)
    assert ctx.saved_values == (a, b)


def test_context_without_grad_saves_nothing():
    ctx = Context(no_grad=True)
    ctx.save_for_backward(Mat(1, 1))
    assert ctx.saved_values == ()


def test_operations_save_operands_only_while_recording(mat, mat2):
    with mock.patch.object(mat_ops.Add, "forward", wraps=mat_ops.Add.forward) as spy:
        Graph().add(mat, mat2)
        Graph(needs_backprop=True).add(mat, mat2)
    silent, recording = [c.args[0] for c in spy.call_args_list]
    assert silent.saved_values == ()
    assert recording.saved_values == (mat, mat2)
