# spikecode_jax/distributions/__init__.py

from .base import register, get, BinaryVectorDistribution, PdfCache

from .bernoulli import BernoulliCodeDistribution
from .ising import IsingDistribution, split_parameters, ising_energies, ising_log_partition

register("bernoulli", BernoulliCodeDistribution)
register("ising", IsingDistribution)

__all__ = [
    "get",
    "BinaryVectorDistribution",
    "PdfCache",
    "BernoulliCodeDistribution",
    "IsingDistribution",
    "split_parameters",
    "ising_energies",
    "ising_log_partition",
]
