import numpy as np
import pytest

from pixel_info.models.image import Image


def bgr_canvas(height, width, color=(0, 0, 0)):
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, :] = color
    return pixels


def filled_disc(height, width, centre, radius, color, background=(0, 0, 0)):
    pixels = bgr_canvas(height, width, background)
    yy, xx = np.mgrid[0:height, 0:width]
    inside = (xx - centre[0]) ** 2 + (yy - centre[1]) ** 2 <= radius ** 2
    pixels[inside] = color
    return Image(pixels)


def filled_square(height, width, x0, y0, size, color=(255, 255, 255)):
    pixels = bgr_canvas(height, width)
    pixels[y0:y0 + size, x0:x0 + size] = color
    return Image(pixels)


def square_boundary(x0, y0, size):
    """Every boundary pixel of a size x size square, walked in order."""
    x1, y1 = x0 + size - 1, y0 + size - 1
    top = [(x, y0) for x in range(x0, x1)]
    right = [(x1, y) for y in range(y0, y1)]
    bottom = [(x, y1) for x in range(x1, x0, -1)]
    left = [(x0, y) for y in range(y1, y0, -1)]
    return np.array(top + right + bottom + left, dtype=np.int32)


@pytest.fixture
def flat_image():
    return Image(bgr_canvas(48, 64, (40, 120, 200)))


@pytest.fixture
def checkerboard():
    tiles = (np.indices((64, 64)) // 8).sum(axis=0) % 2
    plane = (tiles * 255).astype(np.uint8)
    return Image(np.stack([plane] * 3, axis=2))


@pytest.fixture
def binary_square():
    mask = np.zeros((30, 30), dtype=np.uint8)
    mask[10:20, 10:20] = 255
    return Image(mask)
