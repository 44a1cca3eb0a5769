import numpy as np
import pytest

from recurrent import IndexOutOfRange, Mat, ShapeMismatch


def test_new_matrix_is_zero_filled():
    m = Mat(2, 3)
    assert m.shape == (2, 3)
    assert m.size == 6
    assert len(m.w) == len(m.dw) == 6
    assert not m.w.any()
    assert not m.dw.any()


def test_values_are_row_major():
    m = Mat(2, 3, [1, 2, 3, 4, 5, 6])
    assert m.get(0, 2) == 3.0
    assert m.get(1, 0) == 4.0
    np.testing.assert_array_equal(m.to_numpy(), [[1, 2, 3], [4, 5, 6]])


def test_wrong_number_of_values():
    with pytest.raises(ShapeMismatch):
        Mat(2, 2, [1, 2, 3])


@pytest.mark.parametrize("row, col", [(-1, 0), (2, 0), (0, 3), (0, -1)])
def test_access_out_of_range(row, col):
    m = Mat(2, 3)
    with pytest.raises(IndexOutOfRange):
        m.get(row, col)
    with pytest.raises(IndexOutOfRange):
        m.set(row, col, 1.0)
    with pytest.raises(IndexOutOfRange):
        m.add_gradient(row, col, 1.0)


def test_set_and_accumulate_gradient():
    m = Mat(2, 2)
    m.set(1, 1, 4.5)
    m.add_gradient(1, 0, 1.0)
    m.add_gradient(1, 0, 2.0)
    assert m.get(1, 1) == 4.5
    assert m.dw[2] == 3.0


def test_degenerate_matrices():
    for rows, cols in [(0, 0), (0, 4), (3, 0)]:
        m = Mat(rows, cols)
        assert m.size == 0
        m.update(0.1)
        assert m.clone().shape == (rows, cols)


def test_clone_is_independent():
    m = Mat(1, 2, [1.0, 2.0])
    m.dw[:] = [0.5, 0.25]
    c = m.clone()
    np.testing.assert_array_equal(c.w, m.w)
    np.testing.assert_array_equal(c.dw, m.dw)
    c.w[0] = 10.0
    c.dw[0] = 10.0
    assert m.w[0] == 1.0
    assert m.dw[0] == 0.5


def test_update_descends_and_clears_gradients():
    m = Mat(1, 3, [1.0, 2.0, 3.0])
    m.dw[:] = [1.0, -2.0, 0.5]
    m.update(0.1)
    np.testing.assert_allclose(m.w, [0.9, 2.2, 2.95])
    assert not m.dw.any()


def test_fillers():
    assert (Mat(2, 2).fill_const(3.0).w == 3.0).all()
    uniform = Mat(10, 10).fill_rand(-1.0, 1.0)
    assert ((uniform.w >= -1.0) & (uniform.w < 1.0)).all()
    normal = Mat(50, 50).fill_randn(5.0, 0.1)
    assert normal.w.mean() == pytest.approx(5.0, abs=0.05)


def test_from_vector_and_dict():
    v = Mat.from_vector([1.0, 2.0, 3.0])
    assert v.shape == (3, 1)
    restored = Mat.from_dict(v.to_dict())
    assert restored.shape == (3, 1)
    np.testing.assert_array_equal(restored.w, v.w)
