# spikecode_jax/core/numerics.py
"""
Summation with bounded rounding error.
"""
from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import lax

from .typing import Array, ArrayLike


def _neumaier_step(carry, v):
    s, c = carry
    t = s + v
    c = c + jnp.where(jnp.abs(s) >= jnp.abs(v), (s - t) + v, (v - t) + s)
    return (t, c), None


@jax.jit
def _neumaier_sum(values: Array) -> Array:
    zero = jnp.zeros((), dtype=values.dtype)
    (s, c), _ = lax.scan(_neumaier_step, (zero, zero), values)
    return s + c


def compensated_sum(values: ArrayLike) -> Array:
    """
    Kahan–Babuška (Neumaier) compensated sum of all entries.

    The running compensation term c collects the low-order bits lost by
    each addition, so the accumulated error does not grow with the number
    of terms. Scanned sequentially: XLA is free to reassociate a plain
    reduction, which would defeat the compensation.

    Compiled once per input length and dtype; repeated calls from an
    optimiser loop reuse the compiled scan.
    """
    values = jnp.ravel(jnp.asarray(values, dtype=float))
    if values.size == 0:
        return jnp.zeros((), dtype=values.dtype)
    return _neumaier_sum(values)
