import numpy as np
import pytest

from pixel_info.errors import InvalidParameterError
from pixel_info.models.image import Image
from pixel_info.services.threshold_service import edges, range_mask, to_zero_threshold


def test_range_mask_is_inclusive():
    hsv = np.array([[[10, 100, 100], [20, 255, 255], [9, 150, 150], [15, 99, 200], [15, 200, 200]]],
                   dtype=np.uint8)
    mask = range_mask(Image(hsv), (10, 100, 100), (20, 255, 255)).pixels
    assert mask.tolist() == [[255, 255, 0, 0, 255]]


def test_range_mask_matches_componentwise_test():
    rng = np.random.default_rng(3)
    hsv = rng.integers(0, 256, size=(20, 20, 3), dtype=np.uint8)
    hsv[:, :, 0] %= 180
    low, high = np.array([30, 50, 60]), np.array([90, 200, 220])
    mask = range_mask(Image(hsv), low, high).pixels
    inside = np.all((hsv >= low) & (hsv <= high), axis=2)
    assert set(np.unique(mask)) <= {0, 255}
    assert np.array_equal(mask == 255, inside)


@pytest.mark.parametrize("low, high", [((1, 2), (3, 4, 5)), ((1, 2, 3), (4, 5, 6, 7))])
def test_range_mask_arity(low, high):
    img = Image(np.zeros((2, 2, 3), dtype=np.uint8))
    with pytest.raises(InvalidParameterError):
        range_mask(img, low, high)


def test_to_zero_keeps_values_at_threshold():
    img = Image(np.array([[44, 45, 46, 0]], dtype=np.uint8))
    assert to_zero_threshold(img, 45.0).pixels.tolist() == [[0, 45, 46, 0]]


def test_to_zero_single_channel_only(flat_image):
    with pytest.raises(InvalidParameterError):
        to_zero_threshold(flat_image, 10)


def test_edges_of_vertical_step():
    plane = np.zeros((40, 40), dtype=np.uint8)
    plane[:, 20:] = 255
    edge_map = edges(Image(plane), 75, 200).pixels
    assert (edge_map[:, 19] == 255).all()
    assert np.count_nonzero(edge_map) == 40


def test_edges_swaps_thresholds_and_ignores_flat(flat_image):
    assert not edges(flat_image, 200, 75).pixels.any()
