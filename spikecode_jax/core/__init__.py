# spikecode_jax/core/__init__.py
from .errors import DomainError
from .codewords import (
    codeword_index,
    index_to_codeword,
    all_codewords,
    as_data_matrix,
    empirical_expectation_matrix,
)
from .numerics import compensated_sum

__all__ = [
    "DomainError",
    "codeword_index",
    "index_to_codeword",
    "all_codewords",
    "as_data_matrix",
    "empirical_expectation_matrix",
    "compensated_sum",
]
