# spikecode_jax/fitting/optimiser.py
"""
Reference fitting loop for Ising parameters.

Drives a registered objective (see `objectives.get`) with an optax
optimiser using the analytic gradients. The loop runs in Python rather than
under `lax.scan`: the exact-likelihood objective keeps per-instance caches
on the host.

Line search, convergence tests and quasi-Newton methods are left to the
caller; plug `MPF_objective` / `ising_loglikelihood` (buffer convention) or
`K_MPF` + `dK_MPF` (split convention) into any external driver instead.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Literal, Optional

import jax.numpy as jnp
import optax

from ..core.codewords import as_data_matrix
from ..core.typing import Array, ArrayLike
from .. import objectives


@dataclass(frozen=True)
class FitCFG:
    """Configuration for fitting Ising parameters."""
    steps: int = 200
    lr: float = 5e-2
    optimizer: Literal["sgd", "adam", "rmsprop"] = "adam"
    clip_grad_norm: Optional[float] = None
    verbose: bool = False


@dataclass
class FitRun:
    """Fit results."""
    Jtilde: Array               # (N, N) final parameters
    cost_trace: Array           # shape [steps], objective value before each update
    grad_norm_trace: Array      # shape [steps]


def _get_optimizer(cfg: FitCFG):
    if cfg.optimizer == "sgd":
        tx = optax.sgd(cfg.lr)
    elif cfg.optimizer == "adam":
        tx = optax.adam(cfg.lr)
    elif cfg.optimizer == "rmsprop":
        tx = optax.rmsprop(cfg.lr)
    else:
        raise ValueError(f"Unknown optimizer: {cfg.optimizer}")
    if cfg.clip_grad_norm is not None:
        tx = optax.chain(optax.clip_by_global_norm(cfg.clip_grad_norm), tx)
    return tx


def fit_ising(
    X: ArrayLike,
    objective: str = "mpf",
    Jtilde_init: Optional[ArrayLike] = None,
    cfg: FitCFG = FitCFG(),
) -> FitRun:
    """
    Fit an Ising parameter matrix to the columns of X.

    Args:
        X: (N, M) binary data matrix
        objective: "mpf" (minimise K) or "loglikelihood" (maximise L);
            any name registered with `objectives.register` works
        Jtilde_init: initial (N, N) or flat parameters, zeros by default
        cfg: optimiser configuration

    Returns:
        FitRun with the final parameters and per-step traces. For
        "loglikelihood" the cost trace holds -L.
    """
    X = as_data_matrix(X)
    N = X.shape[0]
    if Jtilde_init is None:
        Jtilde = jnp.zeros((N, N))
    else:
        Jtilde = jnp.reshape(jnp.asarray(Jtilde_init, dtype=float), (N, N))

    loss = objectives.get(objective)(X)
    optimizer = _get_optimizer(cfg)
    opt_state = optimizer.init(Jtilde)

    def iter_steps():
        if not cfg.verbose:
            return range(cfg.steps)
        from tqdm.auto import tqdm
        return tqdm(range(cfg.steps), total=cfg.steps, desc=f"fit_ising[{objective}]")

    costs = []
    grad_norms = []
    for _ in iter_steps():
        val, grad = loss(Jtilde)
        if not jnp.isfinite(val):
            warnings.warn(
                f"fit_ising: non-finite {objective} cost {val}; stopping early.",
                RuntimeWarning,
                stacklevel=2,
            )
            break
        costs.append(val)
        grad_norms.append(optax.global_norm(grad))

        updates, opt_state = optimizer.update(grad, opt_state, params=Jtilde)
        Jtilde = optax.apply_updates(Jtilde, updates)

    return FitRun(
        Jtilde=Jtilde,
        cost_trace=jnp.asarray(costs),
        grad_norm_trace=jnp.asarray(grad_norms),
    )
