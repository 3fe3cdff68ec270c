# spikecode_jax/objectives/base.py

_OBJECTIVE_REGISTRY = {}


def register(name, factory):
    """
    Register a loss factory under a string key.

    A factory takes the data matrix X and returns loss(Jtilde) -> (value, grad),
    where value is to be MINIMISED and grad has shape (N, N).
    """
    if name in _OBJECTIVE_REGISTRY:
        raise KeyError(f"Objective '{name}' already registered.")
    _OBJECTIVE_REGISTRY[name] = factory


def get(name):
    """
    Retrieve a loss factory by name.
    """
    try:
        return _OBJECTIVE_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown objective '{name}'. "
            f"Available: {list(_OBJECTIVE_REGISTRY.keys())}"
        )
