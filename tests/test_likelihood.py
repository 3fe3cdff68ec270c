import math
import warnings

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from spikecode_jax import BernoulliCodeDistribution, DomainError, IsingDistribution
from spikecode_jax.core import empirical_expectation_matrix
from spikecode_jax.distributions import ising_energies, ising_log_partition
from spikecode_jax.objectives import (
    ising_loglikelihood,
    ising_loglikelihood_and_grad,
    likelihood,
    loglikelihood,
)


def _problem(seed, n=4, m=30):
    k1, k2 = jax.random.split(jax.random.PRNGKey(seed))
    A = 0.4 * jax.random.normal(k1, (n, n))
    Jtilde = 0.5 * (A + A.T)
    X = jax.random.bernoulli(k2, 0.4, (n, m)).astype(float)
    return X, Jtilde


def _central_difference(f, x, eps=1e-5):
    x = np.asarray(x, dtype=float).ravel()
    g = np.zeros_like(x)
    for i in range(x.size):
        e = np.zeros_like(x)
        e[i] = eps
        g[i] = (f(x + e) - f(x - e)) / (2 * eps)
    return g


def test_likelihood_matches_brute_force():
    P = BernoulliCodeDistribution([0.3, 0.7])
    X = jnp.array([[1, 0, 1], [1, 1, 0]])
    raw = 0.21 * 0.49 * 0.09
    assert likelihood(X, P, normalized=False) == pytest.approx(raw)
    assert likelihood(X, P) == pytest.approx(raw ** (1 / 3))


def test_loglikelihood_matches_brute_force():
    X, Jtilde = _problem(0, n=3, m=12)
    for P in (IsingDistribution(Jtilde), BernoulliCodeDistribution([0.2, 0.5, 0.9])):
        expected = sum(math.log(P.pdf(X[:, k])) for k in range(X.shape[1]))
        assert loglikelihood(X, P, normalized=False) == pytest.approx(expected)
        assert loglikelihood(X, P) == pytest.approx(expected / X.shape[1])


def test_loglikelihood_dimension_mismatch():
    P = BernoulliCodeDistribution([0.3, 0.7])
    with pytest.raises(DomainError):
        loglikelihood(jnp.ones((3, 4)), P)


def test_degenerate_column_returns_sentinel():
    # θ_0 = 800 pushes exp(-E) below the smallest double for any x with x_0 = 1
    P = IsingDistribution(jnp.diag(jnp.array([800.0, 0.0])))
    X = jnp.array([[0, 1, 0], [1, 1, 0]])
    assert P.pdf(X[:, 1]) == 0.0
    with pytest.warns(RuntimeWarning):
        value = loglikelihood(X, P)
    assert value == 0.0
    assert not math.isinf(value)


def test_nondegenerate_loglikelihood_does_not_warn():
    P = BernoulliCodeDistribution([0.3, 0.7])
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert loglikelihood(jnp.array([[1], [0]]), P) == pytest.approx(math.log(0.09))


def test_ising_loglikelihood_agrees_with_pdf_path():
    X, Jtilde = _problem(1)
    P = IsingDistribution(Jtilde)
    assert ising_loglikelihood(X, Jtilde.ravel()) == pytest.approx(loglikelihood(X, P))


@pytest.mark.parametrize("seed,n", [(0, 2), (1, 4), (2, 6)])
def test_ising_loglikelihood_gradient_finite_difference(seed, n):
    X, Jtilde = _problem(seed, n=n, m=25)
    grad = np.zeros(n * n)
    ising_loglikelihood(X, Jtilde.ravel(), grad)

    numeric = _central_difference(lambda v: ising_loglikelihood(X, v), Jtilde)
    assert np.allclose(grad, numeric, atol=1e-5)


def test_ising_loglikelihood_gradient_autodiff():
    X, Jtilde = _problem(3, n=4)

    def L(Jt):
        return -ising_log_partition(Jt) - jnp.mean(ising_energies(Jt, X))

    _, grad = ising_loglikelihood_and_grad(X, Jtilde)
    assert jnp.allclose(grad, jax.grad(L)(Jtilde), atol=1e-10)


def test_gradient_sign_structure():
    X, Jtilde = _problem(4, n=3)
    mu_P = IsingDistribution(Jtilde).expectation_matrix()
    D = mu_P - empirical_expectation_matrix(X)
    _, grad = ising_loglikelihood_and_grad(X, Jtilde)
    assert jnp.allclose(jnp.diag(grad), jnp.diag(D))
    off = ~jnp.eye(3, dtype=bool)
    assert jnp.allclose(grad[off], -0.5 * D[off])


def test_supplied_mu_X_and_buffer_layouts():
    X, Jtilde = _problem(5, n=3)
    mu_X = empirical_expectation_matrix(X)

    flat = np.full(9, np.nan)
    square = np.full((3, 3), np.nan)
    v1 = ising_loglikelihood(X, Jtilde.ravel(), flat, mu_X=mu_X)
    v2 = ising_loglikelihood(X, Jtilde, square)
    assert v1 == v2
    assert np.array_equal(flat, square.ravel())

    # empty buffer: value only, nothing written
    empty = np.zeros(0)
    assert ising_loglikelihood(X, Jtilde, empty) == v1


def test_empty_data_matrix():
    P = BernoulliCodeDistribution([0.3, 0.7])
    X = jnp.zeros((2, 0))
    assert likelihood(X, P) == 1.0
    assert likelihood(X, P, normalized=False) == 1.0
    assert loglikelihood(X, P) == 0.0
    assert loglikelihood(X, P, normalized=False) == 0.0


def test_mu_X_shape_is_checked():
    X, Jtilde = _problem(6, n=3)
    with pytest.raises(DomainError):
        ising_loglikelihood_and_grad(X, Jtilde, mu_X=jnp.ones(3))
    with pytest.raises(DomainError):
        ising_loglikelihood(X, Jtilde, np.zeros(9), mu_X=jnp.eye(4))
