# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 dairin0d https://github.com/dairin0d

import enum

from .utils import *
from .simplex import SimplexPoint, OrderedSimplex

class IterationAction(enum.Enum):
    REFLECT = 1
    EXPAND = 2
    CONTRACT = 3
    SHRINK = 4
    GREEDY_EXPAND = 5

class Variant(enum.Enum):
    NORMAL = 0
    # Accept the expanded point whenever it beats the best point,
    # even if the reflected point is better still
    GREEDY_EXPANSION = 1

class TransformationConfig(Immutable):
    """
    Coefficients of the candidate points of one iteration.

    reflect: the worst point is mirrored over the centroid of the others,
        and the mirrored offset is scaled by this (usually 1)
    expand: if the reflected point is better than the best one, it is
        pushed further from the centroid by this factor (usually 2)
    contract: if the reflected point is worse than the second worst one,
        it is pulled towards the centroid by this factor (usually 0.5)
    shrink: if even the contracted point does not beat the worst one,
        all points except the best are pulled towards it (usually 0.5)
    """

    __slots__ = ("reflect", "expand", "contract", "shrink")

    def __init__(self, reflect=1.0, expand=2.0, contract=0.5, shrink=0.5):
        for name, value in zip(self.__slots__, (reflect, expand, contract, shrink)):
            check_positive(name, value)
        object.__setattr__(self, "reflect", float(reflect))
        object.__setattr__(self, "expand", float(expand))
        object.__setattr__(self, "contract", float(contract))
        object.__setattr__(self, "shrink", float(shrink))

    def __eq__(self, other):
        if not isinstance(other, TransformationConfig): return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return (f"TransformationConfig(reflect={self.reflect}, expand={self.expand}, "
            f"contract={self.contract}, shrink={self.shrink})")

    def as_tuple(self):
        return (self.reflect, self.expand, self.contract, self.shrink)

    @classmethod
    def default(cls):
        return cls()

    # Based on (DOI: 10.1007/s10589-010-9329-3)
    # "Implementing the Nelder-Mead simplex algorithm with adaptive parameters" (2012)
    @classmethod
    def adaptive(cls, n):
        n = max(n, 2)
        return cls(1.0, 1.0 + 2.0/n, 0.75 - 0.5/n, 1.0 - 1.0/n)

class SimplexTransformer:
    """
    Performs one Nelder-Mead iteration on an OrderedSimplex. Every candidate
    point is clamped to [lower, upper] before the function is evaluated.
    """

    def __init__(self, function, lower, upper, config=None, variant=Variant.NORMAL):
        self.function = function
        self.lower = lower
        self.upper = upper
        self.config = config or TransformationConfig.default()
        self.variant = Variant(variant)

    def evaluate(self, inputs):
        point_inputs = frozen(clamp(inputs, self.lower, self.upper))
        return SimplexPoint(point_inputs, self.function(point_inputs))

    def reflect(self, point, centroid):
        return self.evaluate(centroid + self.config.reflect * (centroid - point.inputs))

    def expand(self, point, centroid):
        return self.evaluate(centroid + self.config.expand * (point.inputs - centroid))

    def contract(self, point, centroid):
        return self.evaluate(centroid + self.config.contract * (point.inputs - centroid))

    def shrink_point(self, point, best):
        return self.evaluate(best.inputs + self.config.shrink * (point.inputs - best.inputs))

    def shrink(self, simplex):
        best = simplex.best()
        points = [self.shrink_point(point, best) for point in simplex.without_best()]
        points.append(best)
        return OrderedSimplex(points, simplex.direction)

    def transform(self, simplex):
        "Returns the transformed simplex and the IterationAction that produced it"

        worst = simplex.worst()
        rest = simplex.without_worst()
        centroid = rest.centroid()

        reflected = self.reflect(worst, centroid)

        if simplex.is_better_than(reflected, rest.best()):
            expanded = self.expand(reflected, centroid)

            if simplex.is_better_than(expanded, reflected):
                return rest.with_point(expanded), IterationAction.EXPAND

            if self.variant is Variant.GREEDY_EXPANSION:
                if simplex.is_better_than(expanded, rest.best()):
                    return rest.with_point(expanded), IterationAction.GREEDY_EXPAND

            return rest.with_point(reflected), IterationAction.REFLECT

        # reflected point did not even beat the second worst one
        if simplex.is_better_than(rest.worst(), reflected):
            contracted = self.contract(reflected, centroid)

            if simplex.is_better_than(contracted, worst):
                return rest.with_point(contracted), IterationAction.CONTRACT

            return self.shrink(simplex), IterationAction.SHRINK

        return rest.with_point(reflected), IterationAction.REFLECT
