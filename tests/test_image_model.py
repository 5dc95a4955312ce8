import numpy as np
import pytest

from pixel_info.errors import InvalidParameterError
from pixel_info.models.geometry import Rect
from pixel_info.models.image import Image
from pixel_info.models.kernel import Kernel, StructuringElement, validate_kernel_size


def test_dimensions_and_channels():
    img = Image(np.zeros((4, 6, 3), dtype=np.uint8))
    assert (img.width, img.height, img.channels) == (6, 4, 3)
    gray = Image(np.zeros((4, 6), dtype=np.uint8))
    assert gray.channels == 1 and gray.is_single_channel


@pytest.mark.parametrize("shape", [(0, 5), (5, 0, 3), (5,)])
def test_rejects_empty_or_malformed_buffers(shape):
    with pytest.raises(InvalidParameterError):
        Image(np.zeros(shape, dtype=np.uint8))


@pytest.mark.parametrize("size", [0, -3, 2, 4, 3.5])
def test_kernel_size_must_be_positive_odd(size):
    with pytest.raises(InvalidParameterError):
        validate_kernel_size(size)


def test_kernel_default_anchor_is_centre():
    k = Kernel([[-1, 2, -1]])
    assert k.shape == (1, 3)
    assert k.anchor == (0, 1)


def test_kernel_rejects_even_dimensions():
    with pytest.raises(InvalidParameterError):
        Kernel(np.ones((2, 3)))


def test_ellipse_elements():
    assert StructuringElement.ellipse(3).mask.astype(int).tolist() == [
        [0, 1, 0],
        [1, 1, 1],
        [0, 1, 0],
    ]
    assert StructuringElement.ellipse(5).mask.astype(int).tolist() == [
        [0, 0, 1, 0, 0],
        [1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1],
        [0, 0, 1, 0, 0],
    ]
    assert StructuringElement.ellipse(1).mask.tolist() == [[True]]


def test_rect_corners():
    r = Rect(3, 4, 10, 20)
    assert r.min_point == (3, 4)
    assert r.max_point == (13, 24)
    with pytest.raises(ValueError):
        Rect(0, 0, -1, 5)
