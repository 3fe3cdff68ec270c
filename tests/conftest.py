import jax

# Finite-difference gradient checks need double precision.
jax.config.update("jax_enable_x64", True)
