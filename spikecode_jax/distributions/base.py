# spikecode_jax/distributions/base.py
from __future__ import annotations

from typing import Callable, Dict, Protocol, runtime_checkable

import jax

from ..core.typing import Array, ArrayLike


@runtime_checkable
class BinaryVectorDistribution(Protocol):
    """
    Protocol for distributions over length-N binary codewords.

    Design principles
    -----------------
    - A distribution is immutable after construction. Derived quantities
      (pdf values, partition function, entropy, ...) are computed on first
      request and cached for the life of the instance.
    - `pdf` MUST raise `DomainError` when the codeword length is not `n_bits`.
    - `random` MUST NOT touch any cache.

    Thread safety
    -------------
    Cache fills are check-then-write and are not serialised. Do not share an
    instance between threads; give each worker its own.
    """

    @property
    def n_bits(self) -> int:
        ...

    def count_bits(self) -> int:
        ...

    def pdf(self, x: ArrayLike) -> float:
        ...

    def expectation_matrix(self) -> Array:
        """Second-moment matrix E[x xᵗ]; its diagonal holds E[x_i]."""
        ...

    def entropy(self) -> float:
        ...

    def entropy_bits(self) -> float:
        ...

    def random(self, key: jax.Array, n_samples: int = 1) -> Array:
        """(n_bits, n_samples) bool array of independent draws."""
        ...


class PdfCache:
    """
    Lazily populated map codeword index -> probability.

    Presence is dict membership, so a stored 0.0 is a hit like any other
    value. The first value written for an index wins; later writes for the
    same index are ignored.
    """

    def __init__(self):
        self._values: Dict[int, float] = {}

    def __contains__(self, idx: int) -> bool:
        return idx in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get_or_compute(self, idx: int, compute: Callable[[], float]) -> float:
        if idx not in self._values:
            self._values[idx] = float(compute())
        return self._values[idx]

    def setdefault(self, idx: int, value: float) -> float:
        return self._values.setdefault(idx, float(value))


_DISTRIBUTION_REGISTRY = {}


def register(name, factory):
    """
    Register a distribution class or factory under a string key.
    """
    if name in _DISTRIBUTION_REGISTRY:
        raise KeyError(f"Distribution '{name}' already registered.")
    _DISTRIBUTION_REGISTRY[name] = factory


def get(name):
    """
    Retrieve a distribution factory by name.
    """
    try:
        return _DISTRIBUTION_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown distribution '{name}'. "
            f"Available: {list(_DISTRIBUTION_REGISTRY.keys())}"
        )
