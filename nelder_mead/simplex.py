# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 dairin0d https://github.com/dairin0d

import enum

import numpy as np

from .utils import *

class Direction(enum.Enum):
    MINIMIZE = 'MINIMIZE'
    MAXIMIZE = 'MAXIMIZE'

class SimplexPoint(Immutable):
    """
    A vertex of a simplex: an input vector and the objective value at it.
    Neither can be reassigned, and the inputs are a read-only array.
    """

    __slots__ = ("inputs", "output")

    def __init__(self, inputs, output):
        object.__setattr__(self, "inputs", frozen(inputs))
        object.__setattr__(self, "output", output)

    # Allows "x, f = point", same as the (x, f) pairs of a plain simplex list
    def __iter__(self):
        yield self.inputs
        yield self.output

    def __repr__(self):
        return f"SimplexPoint({list(self.inputs)}, {self.output!r})"

class Simplex:
    """
    An N-dimensional shape with (normally) N+1 vertices,
    e.g. a triangle in 2D or a tetrahedron in 3D
    """

    def __init__(self, points):
        points = tuple(points)
        if len(points) < 2:
            raise ConfigurationError(f"A simplex must contain at least 2 points, got {len(points)}")
        self._set_points(points)

    def _set_points(self, points):
        dimension = len(points[0].inputs)
        for point in points:
            if len(point.inputs) != dimension:
                raise ConfigurationError(f"All simplex points must have {dimension} inputs, got {len(point.inputs)}")
        self.points = points
        self.dimension = dimension

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def centroid(self):
        "Per-dimension mean of the inputs of all points"
        return np.mean([point.inputs for point in self.points], axis=0)

    def bounding_diameter(self):
        """
        Diameter of the smallest sphere centered at the centroid
        that contains all the points
        """
        centroid = self.centroid()
        return 2.0 * max(norm(point.inputs - centroid) for point in self.points)

class OrderedSimplex(Simplex):
    """
    A simplex whose points are sorted from the worst to the best one.
    For minimization the worst point has the largest output, for
    maximization the smallest. Instances are never modified: adding
    or removing a point produces a new simplex.
    """

    def __init__(self, points, direction=Direction.MINIMIZE):
        self.direction = Direction(direction)
        super().__init__(self._sorted(points))

    @classmethod
    def _derive(cls, points, direction):
        # Faces of a simplex may have a single vertex (e.g. in 1D),
        # so derived simplexes skip the minimal size check
        simplex = cls.__new__(cls)
        simplex.direction = direction
        simplex._set_points(simplex._sorted(points))
        return simplex

    @property
    def minimizing(self):
        return self.direction is Direction.MINIMIZE

    def _sorted(self, points):
        # sorted() is stable, also when reversed
        key = (lambda point: point.output)
        return tuple(sorted(points, key=key, reverse=self.minimizing))

    def is_better_than(self, a, b):
        if self.minimizing: return a.output < b.output
        return a.output > b.output

    def worst(self):
        return self.points[0]

    def best(self):
        return self.points[-1]

    def with_point(self, point):
        return self._derive(self.points + (point,), self.direction)

    def without_point(self, point):
        points = list(self.points)
        points.remove(point)
        return self._derive(points, self.direction)

    def without_worst(self):
        return self._derive(self.points[1:], self.direction)

    def without_best(self):
        return self._derive(self.points[:-1], self.direction)

    def __repr__(self):
        return f"OrderedSimplex({list(self.points)}, {self.direction})"
