# spikecode_jax/distributions/bernoulli.py
from __future__ import annotations

import math
from typing import Optional

import jax
import jax.numpy as jnp
from jax.scipy.special import xlogy

from ..core.codewords import as_data_matrix, codeword_index
from ..core.errors import DomainError
from ..core.typing import Array, ArrayLike
from .base import PdfCache


class BernoulliCodeDistribution:
    """
    Independent-bit codeword distribution:
        Pr(x) = prod_i p_i^{x_i} (1 - p_i)^{1 - x_i}

    p : (N,) per-bit firing probabilities, each in [0, 1].
    """

    def __init__(self, p: ArrayLike):
        p = jnp.asarray(p, dtype=float)
        if p.ndim != 1:
            raise ValueError(f"p must be a 1-D vector, got shape {p.shape}")
        if not bool(jnp.all((p >= 0.0) & (p <= 1.0))):
            raise ValueError("p must lie in [0, 1]")
        self.p = p
        self._pdf_cache = PdfCache()
        self._entropy: Optional[float] = None
        self._entropy_bits: Optional[float] = None

    @classmethod
    def from_data(cls, X: ArrayLike) -> "BernoulliCodeDistribution":
        """Maximum-likelihood fit: p_i = empirical firing rate of bit i."""
        X = as_data_matrix(X)
        return cls(jnp.mean(X, axis=1))

    @property
    def n_bits(self) -> int:
        return int(self.p.shape[0])

    def count_bits(self) -> int:
        return self.n_bits

    def __eq__(self, other) -> bool:
        if not isinstance(other, BernoulliCodeDistribution):
            return NotImplemented
        return self.p.shape == other.p.shape and bool(jnp.array_equal(self.p, other.p))

    __hash__ = None

    def __repr__(self) -> str:
        return f"BernoulliCodeDistribution(n_bits={self.n_bits}, p={self.p.tolist()})"

    def pdf(self, x: ArrayLike) -> float:
        x = jnp.asarray(x, dtype=bool).ravel()
        if x.shape[0] != self.n_bits:
            raise DomainError(
                f"BernoulliCodeDistribution pdf: codeword has {x.shape[0]} bits, "
                f"expected {self.n_bits}"
            )
        return self._pdf_cache.get_or_compute(
            codeword_index(x),
            lambda: jnp.prod(jnp.where(x, self.p, 1.0 - self.p)),
        )

    def expectation_matrix(self) -> Array:
        # bits are independent; x_i^2 = x_i puts p itself on the diagonal
        em = jnp.outer(self.p, self.p)
        return em.at[jnp.diag_indices(self.n_bits)].set(self.p)

    def entropy(self) -> float:
        """Entropy in nats. Bits with p_i in {0, 1} contribute exactly 0."""
        if self._entropy is None:
            p = self.p
            self._entropy = float(-jnp.sum(xlogy(p, p) + xlogy(1.0 - p, 1.0 - p)))
        return self._entropy

    def entropy_bits(self) -> float:
        if self._entropy_bits is None:
            self._entropy_bits = self.entropy() / math.log(2.0)
        return self._entropy_bits

    def random(self, key: jax.Array, n_samples: int = 1) -> Array:
        u = jax.random.uniform(key, (self.n_bits, n_samples), dtype=self.p.dtype)
        return u < self.p[:, None]
