# spikecode_jax/fitting/__init__.py
from .optimiser import FitCFG, FitRun, fit_ising

__all__ = ["FitCFG", "FitRun", "fit_ising"]
