# spikecode_jax/objectives/losses.py
"""
Loss factories: bind a data matrix once, evaluate (value, grad) per step.
"""
from __future__ import annotations

from ..core.codewords import as_data_matrix, empirical_expectation_matrix
from .likelihood import ising_loglikelihood_and_grad
from .mpf import mpf_cost, mpf_gradient, mpf_terms


def negative_loglikelihood_loss(X):
    """-L(Jtilde); μ_X is computed once here instead of on every call."""
    X = as_data_matrix(X)
    mu_X = empirical_expectation_matrix(X)

    def loss(Jtilde):
        value, grad = ising_loglikelihood_and_grad(X, Jtilde, mu_X=mu_X)
        return -value, -grad

    return loss


def mpf_loss(X):
    X = as_data_matrix(X)

    def loss(Jtilde):
        terms = mpf_terms(X, Jtilde)
        return mpf_cost(terms), mpf_gradient(terms)

    return loss
