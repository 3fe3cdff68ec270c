# spikecode_jax/__init__.py
"""
Probabilistic models over binary codewords (e.g. neural spike words).

Layout:
  - core/          codeword encoding, data matrices, numerics, errors
  - distributions/ Bernoulli and pairwise-interaction (Ising) distributions
  - objectives/    likelihood, log-likelihood and MPF objectives + gradients
  - fitting/       reference optax loop driving the objectives

Exact likelihood paths enumerate all 2^N codewords; keep N small there.
"""
from .core import DomainError
from .distributions import BernoulliCodeDistribution, IsingDistribution
from .objectives import (
    likelihood,
    loglikelihood,
    ising_loglikelihood,
    MPF_objective,
    K_MPF,
    dK_MPF,
)

__version__ = "0.1.0"

__all__ = [
    "DomainError",
    "BernoulliCodeDistribution",
    "IsingDistribution",
    "likelihood",
    "loglikelihood",
    "ising_loglikelihood",
    "MPF_objective",
    "K_MPF",
    "dK_MPF",
]
