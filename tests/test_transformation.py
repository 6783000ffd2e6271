import math
import random

import numpy as np
import pytest

from nelder_mead import (ConfigurationError, Direction, SimplexPoint, OrderedSimplex,
    IterationAction, Variant, TransformationConfig, SimplexTransformer)

def unbounded(function, n, variant=Variant.NORMAL, config=None):
    return SimplexTransformer(function, np.full(n, -np.inf), np.full(n, np.inf), config, variant)

def simplex_of(function, vertices, direction=Direction.MINIMIZE):
    points = [SimplexPoint(x, function(np.asarray(x, dtype=float))) for x in vertices]
    return OrderedSimplex(points, direction)

def inputs_of(simplex):
    return sorted(tuple(point.inputs) for point in simplex)

def test_default_coefficients():
    config = TransformationConfig.default()
    assert config.as_tuple() == (1.0, 2.0, 0.5, 0.5)
    assert config == TransformationConfig(1, 2, 0.5, 0.5)

def test_adaptive_coefficients():
    assert TransformationConfig.adaptive(2) == TransformationConfig.default()
    assert TransformationConfig.adaptive(1) == TransformationConfig.default()
    config = TransformationConfig.adaptive(10)
    assert config.expand == pytest.approx(1.2)
    assert config.contract == pytest.approx(0.7)
    assert config.shrink == pytest.approx(0.9)

@pytest.mark.parametrize("values", [
    (0, 2, 0.5, 0.5),
    (1, -2, 0.5, 0.5),
    (1, 2, math.nan, 0.5),
    (1, 2, 0.5, math.inf),
])
def test_invalid_coefficients(values):
    with pytest.raises(ConfigurationError):
        TransformationConfig(*values)

def test_config_is_immutable():
    config = TransformationConfig()
    with pytest.raises(AttributeError):
        config.reflect = 3.0

def test_reflection_is_an_involution():
    rng = random.Random(11)
    transformer = unbounded(lambda x: float(np.sum(x)), 3)
    for _ in range(10):
        point = SimplexPoint([rng.uniform(-10, 10) for _ in range(3)], 0.0)
        centroid = np.array([rng.uniform(-10, 10) for _ in range(3)])
        reflected = transformer.reflect(point, centroid)
        back = transformer.reflect(reflected, centroid)
        assert back.inputs == pytest.approx(point.inputs)

def test_candidates_are_clamped():
    seen = []
    def function(x):
        seen.append(np.array(x))
        return float(np.sum(x))

    transformer = SimplexTransformer(function, np.array([-1.0, -1.0]), np.array([1.0, 1.0]))
    point = SimplexPoint([0.5, -0.5], 0.0)
    centroid = np.array([-0.5, 0.5])

    reflected = transformer.reflect(point, centroid)
    assert list(reflected.inputs) == [-1.0, 1.0]
    expanded = transformer.expand(SimplexPoint([5.0, -5.0], 0.0), centroid)
    assert list(expanded.inputs) == [1.0, -1.0]

    assert all(np.all((x >= -1.0) & (x <= 1.0)) for x in seen)

def test_expand():
    f = (lambda x: float(x[0]))
    simplex = simplex_of(f, [[1.0], [2.0]])
    result, action = unbounded(f, 1).transform(simplex)
    assert action is IterationAction.EXPAND
    assert inputs_of(result) == [(-1.0,), (1.0,)]
    assert result.best().output == -1.0

@pytest.mark.parametrize("variant, action, best", [
    (Variant.NORMAL, IterationAction.REFLECT, 0.0),
    (Variant.GREEDY_EXPANSION, IterationAction.GREEDY_EXPAND, -1.0),
])
def test_greedy_expansion(variant, action, best):
    # reflected point (0) beats the expanded one (-1), which still beats the best (1)
    f = (lambda x: abs(float(x[0]) + 0.2))
    simplex = simplex_of(f, [[1.0], [2.0]])
    result, taken = unbounded(f, 1, variant).transform(simplex)
    assert taken is action
    assert (best,) in inputs_of(result)

def test_reflect_between_best_and_second_worst():
    f = (lambda x: abs(float(x[0])))
    simplex = simplex_of(f, [[0.0, 0.0], [0.6, 1.0], [1.0, 0.0]])
    result, action = unbounded(f, 2).transform(simplex)
    assert action is IterationAction.REFLECT
    assert result.worst().inputs == pytest.approx([0.6, 1.0])
    reflected = [point for point in result if point.inputs[1] == 1.0 and point.inputs[0] < 0]
    assert reflected[0].inputs == pytest.approx([-0.4, 1.0])

def test_contract():
    f = (lambda x: (float(x[0]) - 1.8)**2)
    simplex = simplex_of(f, [[1.0], [2.0]])
    result, action = unbounded(f, 1).transform(simplex)
    assert action is IterationAction.CONTRACT
    assert inputs_of(result) == [(2.0,), (2.5,)]

def test_shrink_keeps_best_and_moves_others_towards_it():
    f = (lambda x: abs(float(x[0]) - 2.0) if x[0] <= 2.2 else 10.0)
    simplex = simplex_of(f, [[1.0], [2.0]])
    best = simplex.best()
    result, action = unbounded(f, 1).transform(simplex)
    assert action is IterationAction.SHRINK
    assert best in result.points
    assert inputs_of(result) == [(1.5,), (2.0,)]

def test_shrink_in_several_dimensions():
    f = (lambda x: float(np.sum(np.square(x))))
    simplex = simplex_of(f, [[0.0, 0.0], [4.0, 0.0], [0.0, 4.0], [3.0, 3.0]])
    best = simplex.best()
    before = {id(point): point for point in simplex}

    result = unbounded(f, 2).shrink(simplex)

    assert result.best() is best
    assert len(result) == len(simplex)
    distances_before = sorted(np.linalg.norm(p.inputs - best.inputs) for p in before.values() if p is not best)
    distances_after = sorted(np.linalg.norm(p.inputs - best.inputs) for p in result if p is not best)
    assert distances_after == pytest.approx([d * 0.5 for d in distances_before])

def test_maximize_transform():
    f = (lambda x: -float(x[0]))
    simplex = simplex_of(f, [[1.0], [2.0]], Direction.MAXIMIZE)
    assert simplex.best().inputs[0] == 1.0
    result, action = unbounded(f, 1).transform(simplex)
    assert action is IterationAction.EXPAND
    assert result.best().inputs[0] == -1.0

def test_transform_does_not_modify_input_simplex():
    f = (lambda x: float(np.sum(np.square(x))))
    simplex = simplex_of(f, [[5.0, 5.0], [6.0, 5.0], [5.0, 6.0]])
    points = simplex.points
    for _ in range(5):
        result, _action = unbounded(f, 2).transform(simplex)
        assert result is not simplex
    assert simplex.points == points

def test_objective_errors_propagate():
    calls = []
    def f(x):
        calls.append(x)
        if len(calls) > 2: raise RuntimeError("evaluation failed")
        return float(x[0])

    simplex = simplex_of(f, [[1.0], [2.0]])
    with pytest.raises(RuntimeError, match="evaluation failed"):
        unbounded(f, 1).transform(simplex)
