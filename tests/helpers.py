"""Shared builders for the physics tests."""
import numpy as np

from particle import ParticleSystem


def make_params(**overrides):
    params = {
        "seed": 1234,
        "particle_count": 2,
        "diameter": 8.0,
        "min_speed": 1.0,
        "max_speed": 5.0,
        "reference_temperature": 300.0,
        "initial_temperature": 300.0,
        "max_placement_attempts": 1000,
    }
    params.update(overrides)
    return params


def make_system(positions, velocities, diameter=8.0, width=800.0, height=600.0):
    """Builds a ParticleSystem and replaces its state with the given arrays."""
    positions = np.array(positions, dtype=np.float64)
    velocities = np.array(velocities, dtype=np.float64)
    particles = ParticleSystem(
        make_params(particle_count=len(positions), diameter=diameter), width, height
    )
    particles.positions = positions
    particles.velocities = velocities
    return particles
