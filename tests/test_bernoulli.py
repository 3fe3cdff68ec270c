import math

import jax
import jax.numpy as jnp
import pytest

from spikecode_jax import BernoulliCodeDistribution, DomainError
from spikecode_jax.core import all_codewords


def _direct_pdf(p, x):
    return math.prod(pi if xi else 1.0 - pi for pi, xi in zip(p, x))


def test_two_bit_scenario():
    P = BernoulliCodeDistribution([0.3, 0.7])
    assert P.pdf([False, False]) == pytest.approx(0.21)
    assert P.pdf([True, True]) == pytest.approx(0.21)
    assert P.pdf([True, False]) == pytest.approx(0.09)
    assert P.pdf([False, True]) == pytest.approx(0.49)
    total = sum(P.pdf(x) for x in ([0, 0], [1, 1], [1, 0], [0, 1]))
    assert total == pytest.approx(1.0)


def test_pdf_matches_product_formula_in_any_order():
    p = [0.1, 0.45, 0.8, 0.6]
    P = BernoulliCodeDistribution(p)
    X_all = all_codewords(4)
    expected = [_direct_pdf(p, X_all[:, k].tolist()) for k in range(16)]

    for k in reversed(range(16)):
        assert P.pdf(X_all[:, k]) == pytest.approx(expected[k], rel=1e-12)
    # second pass hits the cache and returns bit-identical values
    first = [P.pdf(X_all[:, k]) for k in range(16)]
    second = [P.pdf(X_all[:, k]) for k in range(16)]
    assert first == second


def test_zero_probability_is_a_cache_hit():
    P = BernoulliCodeDistribution([1.0, 0.5])
    assert P.pdf([False, True]) == 0.0
    assert len(P._pdf_cache) == 1

    calls = []
    cached = P._pdf_cache.get_or_compute(
        1 << 1, lambda: calls.append(1) or 123.0
    )
    assert cached == 0.0
    assert calls == []


def test_pdf_domain_error():
    P = BernoulliCodeDistribution([0.2, 0.4, 0.6])
    with pytest.raises(DomainError):
        P.pdf([True, False])
    with pytest.raises(DomainError):
        P.pdf([True, False, True, False])


def test_invalid_probabilities():
    with pytest.raises(ValueError):
        BernoulliCodeDistribution([0.2, 1.5])
    with pytest.raises(ValueError):
        BernoulliCodeDistribution([[0.2, 0.5]])


@pytest.mark.parametrize("n", [1, 2, 5])
def test_expectation_matrix(n):
    p = jax.random.uniform(jax.random.PRNGKey(n), (n,), minval=0.01, maxval=0.99)
    em = BernoulliCodeDistribution(p).expectation_matrix()
    assert em.shape == (n, n)
    off = ~jnp.eye(n, dtype=bool)
    assert jnp.allclose(em[off], jnp.outer(p, p)[off])
    assert jnp.allclose(jnp.diag(em), p)


def test_entropy_scenarios():
    P = BernoulliCodeDistribution([0.5])
    assert P.entropy() == pytest.approx(math.log(2.0))
    assert P.entropy_bits() == pytest.approx(1.0)


@pytest.mark.parametrize("n", [1, 4, 10])
def test_entropy_extremes(n):
    assert BernoulliCodeDistribution(jnp.full(n, 0.5)).entropy() == pytest.approx(n * math.log(2.0))
    assert BernoulliCodeDistribution(jnp.full(n, 0.5)).entropy_bits() == pytest.approx(n)

    degenerate = BernoulliCodeDistribution(jnp.arange(n) % 2)
    assert degenerate.entropy() == 0.0
    assert not math.isnan(degenerate.entropy_bits())

    p = jax.random.uniform(jax.random.PRNGKey(0), (n,))
    assert BernoulliCodeDistribution(p).entropy() < n * math.log(2.0)


def test_entropy_is_cached():
    P = BernoulliCodeDistribution([0.2, 0.9])
    assert P._entropy is None
    h = P.entropy()
    assert P._entropy == h
    assert P.entropy() == h


def test_normalisation():
    p = jax.random.uniform(jax.random.PRNGKey(3), (8,))
    P = BernoulliCodeDistribution(p)
    X_all = all_codewords(8)
    total = sum(P.pdf(X_all[:, k]) for k in range(X_all.shape[1]))
    assert total == pytest.approx(1.0)


def test_random_draws():
    P = BernoulliCodeDistribution([0.0, 1.0, 0.25])
    X = P.random(jax.random.PRNGKey(1), n_samples=4000)
    assert X.shape == (3, 4000)
    assert X.dtype == jnp.bool_
    assert not bool(jnp.any(X[0]))
    assert bool(jnp.all(X[1]))
    assert float(jnp.mean(X[2])) == pytest.approx(0.25, abs=0.03)
    assert len(P._pdf_cache) == 0


def test_from_data_and_equality():
    X = jnp.array([[1, 0, 1, 0], [1, 1, 1, 1]])
    P = BernoulliCodeDistribution.from_data(X)
    assert P == BernoulliCodeDistribution([0.5, 1.0])
    assert P != BernoulliCodeDistribution([0.5, 0.9])
    assert P.count_bits() == 2
    assert "n_bits=2" in repr(P)
