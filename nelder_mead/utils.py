# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2024 dairin0d https://github.com/dairin0d

import math

import numpy as np

isfinite = math.isfinite
inf = math.inf
norm = np.linalg.norm

class ConfigurationError(ValueError):
    "Raised when a solver or simplex is constructed from inconsistent arguments"

def as_vector(values, name):
    vector = np.array(values, dtype=float)
    if vector.ndim != 1:
        raise ConfigurationError(f"{name} must be a one-dimensional sequence, got shape {vector.shape}")
    return vector

def frozen(vector):
    # Points are shared between simplexes and observers, so nobody may write to them
    vector = np.array(vector, dtype=float)
    vector.flags.writeable = False
    return vector

def clamp(vector, lower, upper):
    return np.clip(vector, lower, upper)

def check_lengths(**vectors):
    lengths = {name: len(vector) for name, vector in vectors.items() if vector is not None}
    if len(set(lengths.values())) > 1:
        details = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise ConfigurationError(f"Vector lengths do not match: {details}")

def check_positive(name, value):
    if not (isfinite(value) and value > 0):
        raise ConfigurationError(f"{name} must be a positive finite number, got {value}")

def check_non_negative(name, value):
    if value is None: return
    if math.isnan(value) or value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")

class Immutable:
    "Attributes are set once in __init__ (through object.__setattr__) and never reassigned"

    __slots__ = ()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")
