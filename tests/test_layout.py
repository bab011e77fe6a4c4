import numpy as np
import pytest

from fdm_dividends import GridLayout, TensorGridLayout, log_price_axis, uniform_axis


def test_strides_are_first_axis_fastest():
    layout = TensorGridLayout([np.arange(4.0), np.arange(3.0), np.arange(2.0)])
    assert layout.dimension_sizes() == (4, 3, 2)
    assert layout.strides() == (1, 4, 12)
    assert layout.size == 24
    assert layout.ndim == 3


def test_index_and_coords_are_inverse():
    layout = TensorGridLayout([np.arange(4.0), np.arange(3.0), np.arange(2.0)])
    assert layout.index((0, 0, 0)) == 0
    assert layout.index((3, 2, 1)) == 3 + 2 * 4 + 1 * 12
    assert layout.coords(layout.index((1, 2, 1))) == (1, 2, 1)
    assert [layout.index(layout.coords(i)) for i in range(layout.size)] == list(range(layout.size))


def test_index_out_of_range_raises():
    layout = TensorGridLayout([np.arange(4.0), np.arange(3.0)])
    with pytest.raises(ValueError):
        layout.index((4, 0))
    with pytest.raises(ValueError):
        layout.index((0,))
    with pytest.raises(ValueError):
        layout.coords(12)


def test_coordinates_are_read_only_copies():
    axis = np.array([1.0, 2.0, 3.0])
    layout = TensorGridLayout([axis])
    axis[0] = 100.0
    x = layout.coordinates(0)
    assert x[0] == 1.0
    with pytest.raises(ValueError):
        x[0] = 5.0


@pytest.mark.parametrize(
    "axes",
    [[], [np.array([])], [np.array([1.0, 1.0])], [np.array([2.0, 1.0])], [np.array([0.0, np.inf])],
     [np.ones((2, 2))]],
)
def test_invalid_axes_raise(axes):
    with pytest.raises(ValueError):
        TensorGridLayout(axes)


def test_base_layout_is_abstract():
    layout = GridLayout()
    with pytest.raises(NotImplementedError):
        layout.dimension_sizes()
    with pytest.raises(NotImplementedError):
        layout.strides()
    with pytest.raises(NotImplementedError):
        layout.coordinates(0)


def test_log_price_axis_is_uniform_in_log_space():
    x = log_price_axis(50.0, 200.0, 11)
    assert x.size == 11
    np.testing.assert_allclose(np.exp(x[[0, -1]]), [50.0, 200.0], rtol=1e-12)
    np.testing.assert_allclose(np.diff(x), np.log(4.0) / 10.0, rtol=1e-12)
    with pytest.raises(ValueError):
        log_price_axis(0.0, 100.0, 11)


def test_uniform_axis_validation():
    np.testing.assert_allclose(uniform_axis(0.0, 1.0, 5), [0.0, 0.25, 0.5, 0.75, 1.0])
    assert uniform_axis(2.0, 2.0, 1).tolist() == [2.0]
    with pytest.raises(ValueError):
        uniform_axis(0.0, 1.0, 0)
    with pytest.raises(ValueError):
        uniform_axis(1.0, 0.0, 3)
