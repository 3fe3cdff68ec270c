# spikecode_jax/distributions/ising.py
"""
Pairwise-interaction (Ising) distribution over binary codewords.

Parameterisation
----------------
A single (N, N) matrix Jtilde carries both parameter groups:
  - diagonal:      bias θ_i
  - off-diagonal:  interactions, used through the symmetric part
                   J = (Jtilde + Jtildeᵗ) / 2 with zero diagonal

Energy and probability:
    E(x)  = θᵗx - ½ xᵗ J x
    Pr(x) = exp(-E(x)) / Z,      Z = Σ_{x ∈ {0,1}^N} exp(-E(x))

This is the convention under which the MPF flow term for flipping bit l is
exp(½ Δx_l (θ_l - (J x)_l)), see `objectives.mpf`.

Everything that needs Z enumerates all 2^N codewords: O(N 2^N) time and
memory. That is a performance cliff beyond roughly 20 bits, not an error.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

import jax
import jax.numpy as jnp
from jax.scipy.special import logsumexp, xlogy

from ..core.codewords import all_codewords, as_data_matrix, codeword_index
from ..core.errors import DomainError
from ..core.typing import Array, ArrayLike
from .base import PdfCache


def split_parameters(Jtilde: Array) -> Tuple[Array, Array]:
    """(θ, J): diagonal bias and symmetrised zero-diagonal interactions."""
    theta = jnp.diag(Jtilde)
    J = 0.5 * (Jtilde + Jtilde.T)
    J = J - jnp.diag(jnp.diag(J))
    return theta, J


def ising_energies(Jtilde: Array, X: Array) -> Array:
    """
    Per-column energies E(x_k) for a (N, M) matrix X. Pure and differentiable.
    """
    theta, J = split_parameters(Jtilde)
    return theta @ X - 0.5 * jnp.sum(X * (J @ X), axis=0)


def ising_log_partition(Jtilde: Array) -> Array:
    """ln Z by exhaustive enumeration. Pure and differentiable."""
    X_all = all_codewords(Jtilde.shape[0]).astype(Jtilde.dtype)
    return logsumexp(-ising_energies(Jtilde, X_all))


class IsingDistribution:
    """
    Ising distribution for a fixed parameter matrix.

    Construction is O(N^2); nothing over the 2^N domain is materialised until
    a quantity that needs it is requested. Each such quantity is computed at
    most once per instance.
    """

    def __init__(self, Jtilde: ArrayLike):
        Jtilde = jnp.asarray(Jtilde, dtype=float)
        if Jtilde.ndim != 2 or Jtilde.shape[0] != Jtilde.shape[1]:
            raise ValueError(f"Jtilde must be a square matrix, got shape {Jtilde.shape}")
        self.Jtilde = Jtilde
        self.theta, self.J = split_parameters(Jtilde)

        self._pdf_cache = PdfCache()
        self._log_Z: Optional[float] = None
        self._Z: Optional[float] = None
        self._probabilities: Optional[Array] = None
        self._expectation: Optional[Array] = None
        self._entropy: Optional[float] = None
        self._entropy_bits: Optional[float] = None

    @property
    def n_bits(self) -> int:
        return int(self.Jtilde.shape[0])

    def count_bits(self) -> int:
        return self.n_bits

    def __eq__(self, other) -> bool:
        if not isinstance(other, IsingDistribution):
            return NotImplemented
        return (
            self.Jtilde.shape == other.Jtilde.shape
            and bool(jnp.array_equal(self.Jtilde, other.Jtilde))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"IsingDistribution(n_bits={self.n_bits}, theta={self.theta.tolist()})"

    def _check_codeword(self, x: ArrayLike) -> Array:
        x = jnp.asarray(x).ravel()
        if x.shape[0] != self.n_bits:
            raise DomainError(
                f"IsingDistribution: codeword has {x.shape[0]} bits, expected {self.n_bits}"
            )
        return x.astype(bool)

    # ------------------------------------------------------------------ #
    # Energies
    # ------------------------------------------------------------------ #

    def energy(self, x: ArrayLike) -> float:
        x = self._check_codeword(x)
        return float(self.energies(x[:, None])[0])

    def energies(self, X: ArrayLike) -> Array:
        X = as_data_matrix(X, self.n_bits)
        return ising_energies(self.Jtilde, X)

    # ------------------------------------------------------------------ #
    # Normalisation
    # ------------------------------------------------------------------ #

    def log_partition_function(self) -> float:
        if self._log_Z is None:
            self._log_Z = float(ising_log_partition(self.Jtilde))
        return self._log_Z

    def partition_function(self) -> float:
        """Z itself; inf once ln Z exceeds the float range. Use `log_partition_function` for precision."""
        if self._Z is None:
            self._Z = float(jnp.exp(self.log_partition_function()))
        return self._Z

    def probabilities(self) -> Array:
        """
        Pr(x) for every codeword, ordered by codeword index.

        Filling this also seeds the pdf cache for the whole domain.
        """
        if self._probabilities is None:
            X_all = all_codewords(self.n_bits).astype(self.Jtilde.dtype)
            log_p = -ising_energies(self.Jtilde, X_all) - self.log_partition_function()
            self._probabilities = jnp.exp(log_p)
            for idx, value in enumerate(self._probabilities.tolist()):
                self._pdf_cache.setdefault(idx, value)
        return self._probabilities

    def pdf(self, x: ArrayLike) -> float:
        x = self._check_codeword(x)
        return self._pdf_cache.get_or_compute(
            codeword_index(x),
            lambda: math.exp(-self.energy(x) - self.log_partition_function()),
        )

    # ------------------------------------------------------------------ #
    # Moments and entropy
    # ------------------------------------------------------------------ #

    def expectation_matrix(self) -> Array:
        """Model second moment E[x xᵗ]; diagonal = marginal firing rates."""
        if self._expectation is None:
            X_all = all_codewords(self.n_bits).astype(self.Jtilde.dtype)
            P = self.probabilities()
            self._expectation = (X_all * P[None, :]) @ X_all.T
        return self._expectation

    def entropy(self) -> float:
        if self._entropy is None:
            P = self.probabilities()
            self._entropy = float(-jnp.sum(xlogy(P, P)))
        return self._entropy

    def entropy_bits(self) -> float:
        if self._entropy_bits is None:
            self._entropy_bits = self.entropy() / math.log(2.0)
        return self._entropy_bits

    def random(self, key: jax.Array, n_samples: int = 1) -> Array:
        """Exact draws via a categorical over the enumerated domain."""
        X_all = all_codewords(self.n_bits)
        log_p = -self.energies(X_all) - self.log_partition_function()
        idx = jax.random.categorical(key, log_p, shape=(n_samples,))
        return X_all[:, idx]
