# spikecode_jax/objectives/likelihood.py
"""
Likelihood objectives.

Two families of entry points:

* Distribution-generic: `likelihood`, `loglikelihood` evaluate any
  BinaryVectorDistribution column by column through its (cached) pdf.

* Ising-specific: `ising_loglikelihood` takes a flat parameter vector and an
  optional caller-owned gradient buffer, the calling convention used by
  numeric optimisers. It never calls pdf per column; it uses
      L(θ) = -ln Z(θ) - mean_k E(x_k; θ)
  and the moment-matching gradient
      ∂L/∂θ_i      =  (μ_P - μ_X)_ii
      ∂L/∂Jtilde_ij = -½ (μ_P - μ_X)_ij     (i ≠ j)
  where μ_P is the model second moment and μ_X = X Xᵗ / M. The ½ appears
  because each unordered pair (i, j) is carried by two entries of Jtilde.
"""
from __future__ import annotations

import warnings
from typing import Optional, Tuple

import jax.numpy as jnp
import numpy as np

from ..core.codewords import as_data_matrix, empirical_expectation_matrix
from ..core.errors import DomainError
from ..core.numerics import compensated_sum
from ..core.typing import Array, ArrayLike
from ..distributions.base import BinaryVectorDistribution
from ..distributions.ising import IsingDistribution


def _column_pdfs(X: ArrayLike, P: BinaryVectorDistribution) -> Array:
    X = as_data_matrix(X, P.n_bits).astype(bool)
    return jnp.asarray([P.pdf(X[:, k]) for k in range(X.shape[1])], dtype=float)


def likelihood(X: ArrayLike, P: BinaryVectorDistribution, normalized: bool = True) -> float:
    """
    Product of Pr(x_k) over the columns of X.

    With `normalized`, each factor is raised to 1/M (geometric mean) so the
    value does not depend on the sample count. Underflows for large M; use
    `loglikelihood` there.
    """
    Px = _column_pdfs(X, P)
    if Px.shape[0] == 0:
        return 1.0  # empty product
    if normalized:
        Px = Px ** (1.0 / Px.shape[0])
    return float(jnp.prod(Px))


def loglikelihood(X: ArrayLike, P: BinaryVectorDistribution, normalized: bool = True) -> float:
    """
    Σ_k ln Pr(x_k), divided by M when `normalized`.

    Returns 0.0 if P assigns probability exactly 0 to any column of X. That
    0.0 is a failure sentinel, not a perfect log-likelihood; callers must
    check for it. An empty data matrix gives the empty sum, also 0.0.
    """
    Px = _column_pdfs(X, P)
    if Px.shape[0] == 0:
        return 0.0
    if bool(jnp.any(Px == 0.0)):
        warnings.warn(
            "loglikelihood: the model assigns probability 0 to at least one sample; "
            "returning the 0.0 sentinel.",
            RuntimeWarning,
            stacklevel=2,
        )
        return 0.0
    total = compensated_sum(jnp.log(Px))
    return float(total / (Px.shape[0] if normalized else 1))


def ising_loglikelihood_and_grad(
    X: ArrayLike,
    Jtilde: ArrayLike,
    mu_X: Optional[ArrayLike] = None,
) -> Tuple[float, Array]:
    """
    Mean log-likelihood of X under the Ising model and its (N, N) gradient.

    Args:
        X: (N, M) data matrix, one codeword per column
        Jtilde: flat (N*N,) or (N, N) parameter matrix
        mu_X: optional precomputed X Xᵗ / M, reused across optimiser steps

    Returns:
        (L, dL/dJtilde)
    """
    X = as_data_matrix(X)
    N, M = X.shape
    P = IsingDistribution(jnp.reshape(jnp.asarray(Jtilde, dtype=float), (N, N)))

    if mu_X is None:
        mu_X = empirical_expectation_matrix(X)
    mu_X = jnp.asarray(mu_X, dtype=float)
    if mu_X.shape != (N, N):
        raise DomainError(f"mu_X must have shape {(N, N)}, got {mu_X.shape}")

    # expectation_matrix fills the probability table, so Z is already cached below
    D = P.expectation_matrix() - mu_X
    grad = jnp.where(jnp.eye(N, dtype=bool), D, -0.5 * D)

    value = -P.log_partition_function() - compensated_sum(P.energies(X)) / M
    return float(value), grad


def ising_loglikelihood(
    X: ArrayLike,
    Jtilde: ArrayLike,
    grad: Optional[np.ndarray] = None,
    *,
    mu_X: Optional[ArrayLike] = None,
) -> float:
    """
    Mean log-likelihood of X under the Ising model built from `Jtilde`.

    If `grad` is a non-empty array it is overwritten in place with the
    gradient, in the same layout as `Jtilde` (flat or (N, N)). The buffer is
    caller-owned; it is only written, never read, and only after the value
    has been computed.
    """
    value, g = ising_loglikelihood_and_grad(X, Jtilde, mu_X=mu_X)
    if grad is not None and np.size(grad) > 0:
        grad[...] = np.asarray(g).reshape(np.shape(grad))
    return value
