# spikecode_jax/objectives/__init__.py

from .base import register, get

from .likelihood import (
    likelihood,
    loglikelihood,
    ising_loglikelihood,
    ising_loglikelihood_and_grad,
)
from .mpf import MPFTerms, mpf_terms, mpf_cost, mpf_gradient, MPF_objective, K_MPF, dK_MPF
from .losses import negative_loglikelihood_loss, mpf_loss

register("loglikelihood", negative_loglikelihood_loss)
register("mpf", mpf_loss)

__all__ = [
    "get",
    "likelihood",
    "loglikelihood",
    "ising_loglikelihood",
    "ising_loglikelihood_and_grad",
    "MPFTerms",
    "mpf_terms",
    "mpf_cost",
    "mpf_gradient",
    "MPF_objective",
    "K_MPF",
    "dK_MPF",
    "negative_loglikelihood_loss",
    "mpf_loss",
]
