# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 dairin0d https://github.com/dairin0d

# The solver only needs numpy; every iteration evaluates the function
# at most N+2 times (N+1 on shrink steps), one evaluation at a time.

# Points, simplexes and configs are never modified after creation,
# so a simplex passed to a listener stays valid after the solve moves on.

from .utils import ConfigurationError
from .simplex import Direction, SimplexPoint, Simplex, OrderedSimplex
from .transformation import IterationAction, Variant, TransformationConfig, SimplexTransformer
from .termination import TerminationReason, TerminationConfig, CancellationToken, bounding_diameter, within_tolerance
from .optimization import IterationInfo, Result, NelderMead, nelder_mead

__all__ = [
    "ConfigurationError",
    "Direction", "SimplexPoint", "Simplex", "OrderedSimplex",
    "IterationAction", "Variant", "TransformationConfig", "SimplexTransformer",
    "TerminationReason", "TerminationConfig", "CancellationToken", "bounding_diameter", "within_tolerance",
    "IterationInfo", "Result", "NelderMead", "nelder_mead",
]
