"""
Contour extraction and geometric fitting.

Contours are (N, 2) int32 arrays of (x, y) points in image coordinates.
Border following is Suzuki & Abe's algorithm (8-connected foreground);
only outermost borders are returned, with straight runs compressed to
their end points.
"""

from typing import List, Sequence
import numpy as np

from ..errors import EmptyInputError, InvalidParameterError
from ..models.geometry import Circle, Rect, as_contour
from ..models.image import Image

# (d_row, d_col), counter-clockwise on screen starting east
_DIRECTIONS = ((0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1), (1, 0), (1, 1))
_DIRECTION_INDEX = {d: k for k, d in enumerate(_DIRECTIONS)}
_EAST = 0

_FRAME = 1  # label of the image frame, treated as a hole border


def _follow_border(f: np.ndarray, i: int, j: int, i2: int, j2: int, nbd: int) -> list:
    """
    Trace one border starting at (i, j), coming from background pixel (i2, j2).
    Border pixels are relabelled with +/-nbd in `f` as they are visited.
    Returns the visited (x, y) points, unpadded.
    """
    # Clockwise search for the first non-zero neighbour
    start = _DIRECTION_INDEX[(i2 - i, j2 - j)]
    for k in range(8):
        di, dj = _DIRECTIONS[(start - k) % 8]
        if f[i + di, j + dj] != 0:
            i1, j1 = i + di, j + dj
            break
    else:
        f[i, j] = -nbd
        return [(j - 1, i - 1)]

    i2, j2 = i1, j1
    i3, j3 = i, j
    points = []
    while True:
        # Counter-clockwise search, starting just after the previous pixel
        prev = _DIRECTION_INDEX[(i2 - i3, j2 - j3)]
        east_was_background = False
        for k in range(1, 9):
            d = (prev + k) % 8
            di, dj = _DIRECTIONS[d]
            if f[i3 + di, j3 + dj] != 0:
                i4, j4 = i3 + di, j3 + dj
                break
            if d == _EAST:
                east_was_background = True

        if east_was_background:
            f[i3, j3] = -nbd
        elif f[i3, j3] == 1:
            f[i3, j3] = nbd
        points.append((j3 - 1, i3 - 1))

        if (i4, j4) == (i, j) and (i3, j3) == (i1, j1):
            return points
        i2, j2 = i3, j3
        i3, j3 = i4, j4


def _compress(points: list) -> list:
    """Drop points that sit in the middle of a horizontal, vertical or diagonal run."""
    n = len(points)
    if n < 3:
        return points
    kept = []
    for k in range(n):
        px, py = points[k - 1]
        cx, cy = points[k]
        nx, ny = points[(k + 1) % n]
        if (cx - px, cy - py) != (nx - cx, ny - cy):
            kept.append(points[k])
    return kept or points[:1]


def find_contours(binary: Image) -> List[np.ndarray]:
    """
    External borders of the non-zero regions of a single channel image.

    Regions sitting inside a hole of another region are not reported.
    Contours come back in raster order of their first pixel.
    """
    plane = binary.plane()
    h, w = plane.shape
    f = np.zeros((h + 2, w + 2), dtype=np.int32)
    f[1:-1, 1:-1] = plane != 0

    is_hole = {_FRAME: True}
    parent = {_FRAME: 0}
    traced = {}
    nbd = _FRAME

    for i in range(1, h + 1):
        lnbd = _FRAME
        for j in np.flatnonzero(f[i]):
            j = int(j)
            value = int(f[i, j])
            if value == 1 and f[i, j - 1] == 0:
                hole, i2, j2 = False, i, j - 1
            elif value >= 1 and f[i, j + 1] == 0:
                hole, i2, j2 = True, i, j + 1
                if value > 1:
                    lnbd = value
            else:
                if value != 1:
                    lnbd = abs(value)
                continue

            nbd += 1
            is_hole[nbd] = hole
            parent[nbd] = parent[lnbd] if hole == is_hole[lnbd] else lnbd
            points = _follow_border(f, i, j, i2, j2, nbd)
            if not hole:
                traced[nbd] = points

            if f[i, j] != 1:
                lnbd = abs(int(f[i, j]))

    return [
        np.array(_compress(points), dtype=np.int32).reshape(-1, 2)
        for label, points in traced.items()
        if parent[label] == _FRAME
    ]


def polygon_area(contour) -> float:
    """Signed shoelace area. Callers compare absolute values."""
    pts = as_contour(contour).astype(np.float64)
    if len(pts) < 3:
        return 0.0
    x, y = pts[:, 0], pts[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def arc_length(contour, closed: bool = True) -> float:
    pts = as_contour(contour).astype(np.float64)
    if len(pts) < 2:
        return 0.0
    seg = np.diff(pts, axis=0)
    length = float(np.sum(np.hypot(seg[:, 0], seg[:, 1])))
    if closed:
        gap = pts[0] - pts[-1]
        length += float(np.hypot(gap[0], gap[1]))
    return length


def largest_contour(contours: Sequence[np.ndarray]) -> np.ndarray:
    """
    Contour with the largest absolute area.
    The running best only survives when strictly larger, so on equal
    areas the later contour wins.
    """
    if len(contours) == 0:
        raise EmptyInputError("largest_contour needs at least one contour")
    best = contours[0]
    best_area = abs(polygon_area(best))
    for contour in contours[1:]:
        area = abs(polygon_area(contour))
        if not best_area > area:
            best, best_area = contour, area
    return best


def sort_by_area(contours: Sequence[np.ndarray]) -> List[np.ndarray]:
    """Largest absolute area first; equal areas keep their input order."""
    return sorted(contours, key=lambda c: abs(polygon_area(c)), reverse=True)


def bounding_rect(contour) -> Rect:
    """Smallest upright rectangle covering every contour pixel (inclusive extents)."""
    pts = as_contour(contour)
    if len(pts) == 0:
        raise EmptyInputError("bounding_rect needs at least one point")
    x0, y0 = pts.min(axis=0)
    x1, y1 = pts.max(axis=0)
    return Rect(int(x0), int(y0), int(x1 - x0 + 1), int(y1 - y0 + 1))


# ─── Minimum enclosing circle (Welzl, iterative form) ─────────────────────

def _circle_from_two(a, b) -> Circle:
    cx, cy = (a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0
    return Circle((cx, cy), float(np.hypot(a[0] - cx, a[1] - cy)))


def _circle_from_three(a, b, c) -> Circle:
    bx, by = b[0] - a[0], b[1] - a[1]
    cx, cy = c[0] - a[0], c[1] - a[1]
    d = 2.0 * (bx * cy - by * cx)
    if abs(d) < 1e-12:
        # Collinear: the widest pair spans the others
        pairs = [(a, b), (a, c), (b, c)]
        return max((_circle_from_two(p, q) for p, q in pairs), key=lambda circ: circ.radius)
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (cy * b2 - by * c2) / d
    uy = (bx * c2 - cx * b2) / d
    return Circle((a[0] + ux, a[1] + uy), float(np.hypot(ux, uy)))


def min_enclosing_circle(contour) -> Circle:
    """
    Smallest circle containing every contour point.

    Raises:
        EmptyInputError: contour has no points.
    """
    pts = as_contour(contour)
    if len(pts) == 0:
        raise EmptyInputError("min_enclosing_circle needs at least one point")
    pts = np.unique(pts, axis=0).astype(np.float64)
    # Fixed-seed shuffle keeps the expected linear running time and the result reproducible
    pts = pts[np.random.default_rng(0).permutation(len(pts))]
    pts = [tuple(p) for p in pts]

    circle = Circle(pts[0], 0.0)
    for i in range(1, len(pts)):
        if circle.contains(pts[i]):
            continue
        circle = Circle(pts[i], 0.0)
        for j in range(i):
            if circle.contains(pts[j]):
                continue
            circle = _circle_from_two(pts[i], pts[j])
            for k in range(j):
                if not circle.contains(pts[k]):
                    circle = _circle_from_three(pts[i], pts[j], pts[k])
    return Circle((float(circle.x), float(circle.y)), float(circle.radius))


# ─── Polygon approximation (Douglas-Peucker) ─────────────────────────────

def _line_distances(pts: np.ndarray, start: np.ndarray, end: np.ndarray) -> np.ndarray:
    """Perpendicular distance of each point to the line through start and end."""
    dx, dy = end - start
    norm = np.hypot(dx, dy)
    if norm < 1e-12:
        return np.hypot(pts[:, 0] - start[0], pts[:, 1] - start[1])
    return np.abs((pts[:, 0] - start[0]) * dy - (pts[:, 1] - start[1]) * dx) / norm


def _douglas_peucker(chain: np.ndarray, epsilon: float) -> np.ndarray:
    """Open polyline simplification; both end points are always kept."""
    keep = np.zeros(len(chain), dtype=bool)
    keep[0] = keep[-1] = True
    stack = [(0, len(chain) - 1)]
    while stack:
        first, last = stack.pop()
        if last <= first + 1:
            continue
        dist = _line_distances(chain[first + 1:last], chain[first], chain[last])
        idx = int(np.argmax(dist))
        if dist[idx] > epsilon:
            split = first + 1 + idx
            keep[split] = True
            stack.append((first, split))
            stack.append((split, last))
    return chain[keep]


def _drop_collinear(polygon: np.ndarray, epsilon: float) -> np.ndarray:
    """
    Remove vertices lying between their neighbours and within epsilon / sqrt(2)
    of the line through them. The tip of an out-and-back spike is not between
    its neighbours, so it stays.
    """
    pts = [p for p in polygon.astype(np.float64)]
    limit = 0.5 * epsilon * epsilon
    k = 0
    while k < len(pts) and len(pts) > 3:
        prev, cur, nxt = pts[k - 1], pts[k], pts[(k + 1) % len(pts)]
        dx, dy = nxt - prev
        cross = (cur[0] - prev[0]) * dy - (cur[1] - prev[1]) * dx
        norm = dx * dx + dy * dy
        between = np.dot(cur - prev, nxt - cur) >= 0
        if between and norm and cross * cross <= limit * norm:
            del pts[k]
        else:
            k += 1
    return np.array(pts).reshape(-1, 2)


def approx_polygon(contour, epsilon_fraction: float = 0.01) -> np.ndarray:
    """
    Simplify a closed contour with epsilon = epsilon_fraction * perimeter.

    The curve is split at two far-apart anchors (the point farthest from
    the first point, and the point farthest from that one); each half is
    simplified on its own and the halves are joined.
    """
    if epsilon_fraction < 0:
        raise InvalidParameterError(f"epsilon_fraction must be non-negative, got {epsilon_fraction}")
    pts = as_contour(contour)
    if len(pts) == 0:
        raise EmptyInputError("approx_polygon needs at least one point")
    if len(pts) < 3:
        return pts.copy()

    epsilon = epsilon_fraction * arc_length(pts, closed=True)
    fpts = pts.astype(np.float64)

    first = int(np.argmax(np.hypot(*(fpts - fpts[0]).T)))
    second = int(np.argmax(np.hypot(*(fpts - fpts[first]).T)))
    if first == second:
        return pts[:1].copy()

    ring = np.roll(fpts, -first, axis=0)
    split = (second - first) % len(pts)
    forward = _douglas_peucker(ring[:split + 1], epsilon)
    backward = _douglas_peucker(np.vstack([ring[split:], ring[:1]]), epsilon)
    polygon = np.vstack([forward[:-1], backward[:-1]])

    polygon = _drop_collinear(polygon, epsilon)
    return np.rint(polygon).astype(np.int32)
