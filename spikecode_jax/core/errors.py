# spikecode_jax/core/errors.py
from __future__ import annotations


class DomainError(ValueError):
    """A codeword or data matrix does not live in the distribution's domain.

    Raised when a codeword's length differs from the distribution's bit count,
    or when a data matrix has the wrong number of rows. Inputs are never
    truncated or padded to fit.
    """
