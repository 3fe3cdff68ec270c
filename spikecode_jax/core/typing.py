# spikecode_jax/core/typing.py
from __future__ import annotations

from typing import Sequence, Union

import numpy as np
from jax import Array

# Anything jnp.asarray accepts as a codeword or data matrix.
ArrayLike = Union[Array, np.ndarray, Sequence]

__all__ = ["Array", "ArrayLike"]
