# spikecode_jax/objectives/mpf.py
"""
Minimum Probability Flow (MPF) objective for the Ising model.

MPF compares each observed codeword only with its single-bit-flip
neighbours, so Z never appears. With ΔX = 2X - 1 (the sign of the change
when bit l of x_k is flipped away) and the energy convention of
`distributions.ising`:

    Kfull[l, k] = exp( ½ ΔX[l, k] (θ_l - (J X)[l, k]) )
    K           = Σ_{l,k} Kfull[l, k] / M

K ≥ 0 and K → 0 when every data point sits in a local energy minimum.

Gradient:
    dθ_i    =  ½ Σ_k Kfull[i, k] ΔX[i, k] / M
    dJ_pq   = -½ Σ_k (Kfull ΔX)[p, k] X[q, k] / M,  symmetrised over (p, q)

Two calling conventions are exposed, both reading the same `MPFTerms`:
  1. `MPF_objective(X, Jtilde, grad)`: cost, optional in-place gradient
  2. `K_MPF(X, Jtilde)` / `dK_MPF(X, G, Jtilde)`: cost and gradient split,
     for optimisers that query them separately
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import jax.numpy as jnp
import numpy as np

from ..core.codewords import as_data_matrix
from ..core.numerics import compensated_sum
from ..core.typing import Array, ArrayLike
from ..distributions.ising import split_parameters


@dataclass(frozen=True)
class MPFTerms:
    """Intermediates shared by the MPF cost and gradient."""
    X: Array        # (N, M) data, 0/1 floats
    DeltaX: Array   # (N, M) 2X - 1
    Kfull: Array    # (N, M) per-bit, per-sample flow terms

    @property
    def n_samples(self) -> int:
        return int(self.X.shape[1])


def mpf_terms(X: ArrayLike, Jtilde: ArrayLike) -> MPFTerms:
    """Build the evaluation bundle. The only place Kfull and ΔX are computed."""
    X = as_data_matrix(X)
    N = X.shape[0]
    theta, J = split_parameters(jnp.reshape(jnp.asarray(Jtilde, dtype=float), (N, N)))
    DeltaX = 2.0 * X - 1.0
    Kfull = jnp.exp(0.5 * DeltaX * (theta[:, None] - J @ X))
    return MPFTerms(X=X, DeltaX=DeltaX, Kfull=Kfull)


def mpf_cost(terms: MPFTerms) -> float:
    return float(compensated_sum(terms.Kfull) / terms.n_samples)


def mpf_gradient(terms: MPFTerms) -> Array:
    """(N, N) gradient of K: bias on the diagonal, symmetric interactions off it."""
    DK = terms.Kfull * terms.DeltaX
    dJ = -0.5 * DK @ terms.X.T
    dJ = 0.5 * (dJ + dJ.T)
    N = dJ.shape[0]
    dJ = jnp.where(jnp.eye(N, dtype=bool), jnp.diag(0.5 * jnp.sum(DK, axis=1)), dJ)
    return dJ / terms.n_samples


def _fill(buffer: np.ndarray, value: Array) -> None:
    buffer[...] = np.asarray(value).reshape(np.shape(buffer))


def MPF_objective(X: ArrayLike, Jtilde: ArrayLike, grad: Optional[np.ndarray] = None) -> float:
    """
    MPF cost K for data X and parameters Jtilde.

    Fitting with K typically lands close to the maximum-likelihood
    parameters without ever computing Z. If `grad` is non-empty it is
    overwritten in place (same layout as `Jtilde`); it is never read.
    """
    terms = mpf_terms(X, Jtilde)
    K = mpf_cost(terms)
    if grad is not None and np.size(grad) > 0:
        _fill(grad, mpf_gradient(terms))
    return K


def K_MPF(X: ArrayLike, Jtilde: ArrayLike) -> float:
    """Cost-only half of the split convention. See also `dK_MPF`."""
    return mpf_cost(mpf_terms(X, Jtilde))


def dK_MPF(X: ArrayLike, G: np.ndarray, Jtilde: ArrayLike) -> np.ndarray:
    """Gradient-only half of the split convention; fills G in place and returns it."""
    _fill(G, mpf_gradient(mpf_terms(X, Jtilde)))
    return G
