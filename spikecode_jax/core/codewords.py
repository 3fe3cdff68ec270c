# spikecode_jax/core/codewords.py
"""
Codewords and data matrices.

A codeword is a length-N binary vector. Codeword index k encodes bit i
(0-based) with weight 2^i, so index and codeword are in bijection over
[0, 2^N). Data matrices hold one codeword per column: shape (N, M).
"""
from __future__ import annotations

from typing import Optional

import jax.numpy as jnp
import numpy as np

from .errors import DomainError
from .typing import Array, ArrayLike


def codeword_index(x: ArrayLike) -> int:
    """Positional binary encoding of a codeword (bit i contributes 2^i).

    Computed host-side with Python ints so the key never overflows,
    whatever N is.
    """
    bits = np.asarray(x).astype(bool).ravel()
    return sum(1 << i for i in np.flatnonzero(bits).tolist())


def index_to_codeword(idx: int, n_bits: int) -> Array:
    """Inverse of `codeword_index`: (n_bits,) bool array."""
    if not 0 <= idx < (1 << n_bits):
        raise DomainError(f"Index {idx} is outside [0, 2^{n_bits}).")
    return jnp.array([(idx >> i) & 1 for i in range(n_bits)], dtype=bool)


def all_codewords(n_bits: int) -> Array:
    """
    Enumerate the full domain.

    Returns
    -------
    (n_bits, 2^n_bits) bool array whose column k is the codeword with index k.
    """
    idx = jnp.arange(1 << n_bits)
    shifts = jnp.arange(n_bits)
    return ((idx[None, :] >> shifts[:, None]) & 1).astype(bool)


def as_data_matrix(X: ArrayLike, n_bits: Optional[int] = None) -> Array:
    """Coerce to a float (N, M) matrix of 0/1 entries.

    A 1-D input is read as a single codeword (one column). Values are assumed
    to be 0/1 already; no thresholding is applied.
    """
    X = jnp.asarray(X)
    if X.ndim == 1:
        X = X[:, None]
    if X.ndim != 2:
        raise DomainError(f"Data matrix must have ndim 1 or 2, got {X.ndim}.")
    if n_bits is not None and X.shape[0] != n_bits:
        raise DomainError(
            f"Data matrix has {X.shape[0]} rows but the distribution has {n_bits} bits."
        )
    return X.astype(float)


def empirical_expectation_matrix(X: ArrayLike) -> Array:
    """Empirical second moment mu_X = X Xᵗ / M (diagonal = bit firing rates)."""
    X = as_data_matrix(X)
    return X @ X.T / X.shape[1]
