# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the Simulation class, which is responsible for
advancing the state of the particle system by one time step. It applies
the external fields, integrates motion, reflects particles off the arena
walls and resolves pairwise elastic collisions.
"""
import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Any
from particle import ParticleSystem
from constants import (
    DEFAULT_TEMPERATURE, FIELD_FORCE_SCALE, GRAVITY_FORCE_SCALE,
    RESTITUTION, DEGENERATE_PERTURBATION
)
from numba import jit

# --- Data Contracts ---
#
# class Controls (frozen dataclass):
#   - temperature: float > 0
#   - gravity: float >= 0
#   - field_x, field_y: float
#
# class SimulationContext (frozen dataclass):
#   - width, height: float > 0, the arena dimensions for this tick.
#   - controls: Controls snapshot for this tick.
#   Built by the caller every tick; never retained by the Simulation.
#
# apply_controls(velocities, charged, controls, field_scale, gravity_scale) -> np.ndarray:
#   - Pure function. Returns a new (N, 2) velocity array with the electric
#     field applied to the charged particle and gravity applied to all.
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - params: Dictionary of simulation parameters from config.json.
#         - "field_force_scale": float
#         - "gravity_force_scale": float
#         - "restitution": float
#     - Side Effects: Stores a reference to the particles.
#
#   - step(self, context: SimulationContext) -> int:
#     - Outputs: Number of particle pairs resolved during the tick.
#     - Side Effects: Modifies the positions and velocities of the
#       internal ParticleSystem in place.
#     - Invariants: Particle count remains constant. Every position lies
#       in [0, width - diameter] x [0, height - diameter] on return.
#
#   - resolve_pair(self, i: int, j: int) -> bool:
#     - Outputs: True if the pair overlapped and was resolved.


@dataclass(frozen=True)
class Controls:
    """Snapshot of the user-adjustable inputs for one tick."""
    temperature: float = DEFAULT_TEMPERATURE
    gravity: float = 0.0
    field_x: float = 0.0
    field_y: float = 0.0

    def __post_init__(self):
        if self.temperature <= 0:
            raise ValueError(f"temperature must be positive, got {self.temperature}")
        if self.gravity < 0:
            raise ValueError(f"gravity must be non-negative, got {self.gravity}")


@dataclass(frozen=True)
class SimulationContext:
    """Arena bounds and controls for one tick."""
    width: float
    height: float
    controls: Controls = field(default_factory=Controls)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"arena dimensions must be positive, got {self.width}x{self.height}"
            )


def apply_controls(
    velocities: np.ndarray,
    charged: np.ndarray,
    controls: Controls,
    field_scale: float = FIELD_FORCE_SCALE,
    gravity_scale: float = GRAVITY_FORCE_SCALE,
) -> np.ndarray:
    """
    Returns the velocities after one tick of external forces.

    A positive field_x pushes the charged particle towards +x. Screen
    coordinates grow downwards, so a positive field_y pushes it up.
    Gravity pulls every particle down regardless of charge.
    """
    updated = velocities.copy()
    if controls.field_x != 0:
        updated[charged, 0] += controls.field_x * field_scale
    if controls.field_y != 0:
        updated[charged, 1] -= controls.field_y * field_scale
    if controls.gravity != 0:
        updated[:, 1] += controls.gravity * gravity_scale
    return updated


@jit(nopython=True)
def _seed_numba(seed):
    """Seeds the RNG used inside jitted code (separate from NumPy's)."""
    np.random.seed(seed)

@jit(nopython=True)
def _resolve_pair_numba(positions, velocities, i, j, diameter, restitution, perturbation):
    """
    Numba-jitted overlap correction and impulse exchange for one pair.

    Detection and resolution share the single distance test below, so a
    pair is only ever corrected when it is closer than one diameter.
    Both particles have the same mass, so the correction and the impulse
    are split evenly.
    """
    dx = positions[j, 0] - positions[i, 0]
    dy = positions[j, 1] - positions[i, 1]
    distance = np.sqrt(dx * dx + dy * dy)
    if distance >= diameter:
        return False

    # Coincident centers have no normal. Nudge j by a small random offset.
    while distance == 0.0:
        displacement = diameter * perturbation
        positions[j, 0] += displacement * (np.random.random() * 2.0 - 1.0)
        positions[j, 1] += displacement * (np.random.random() * 2.0 - 1.0)
        dx = positions[j, 0] - positions[i, 0]
        dy = positions[j, 1] - positions[i, 1]
        distance = np.sqrt(dx * dx + dy * dy)

    overlap = diameter - distance
    if overlap <= 0.0:
        return False

    nx = dx / distance
    ny = dy / distance

    # Push the pair apart symmetrically along the normal
    half = overlap / 2.0
    positions[i, 0] -= nx * half
    positions[i, 1] -= ny * half
    positions[j, 0] += nx * half
    positions[j, 1] += ny * half

    # Normal at the corrected separation (exactly one diameter)
    nx = (positions[j, 0] - positions[i, 0]) / diameter
    ny = (positions[j, 1] - positions[i, 1]) / diameter

    dvx = velocities[i, 0] - velocities[j, 0]
    dvy = velocities[i, 1] - velocities[j, 1]
    dot = dvx * nx + dvy * ny

    impulse = -(1.0 + restitution) * dot / 2.0
    velocities[i, 0] += impulse * nx
    velocities[i, 1] += impulse * ny
    velocities[j, 0] -= impulse * nx
    velocities[j, 1] -= impulse * ny
    return True

@jit(nopython=True)
def _advance_numba(positions, velocities, width, height, diameter, restitution, perturbation):
    """
    Numba-jitted motion pass: integration, walls, clamping and collisions.

    Particles are processed in index order. Each pair (i, j) with i < j is
    resolved as soon as particle i has moved, so later checks in the same
    tick already see the corrected state.
    """
    particle_count = positions.shape[0]
    x_max = max(width - diameter, 0.0)
    y_max = max(height - diameter, 0.0)
    resolved = 0

    for i in range(particle_count):
        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]

        # Reflect after integration; a particle may overshoot by one tick.
        if positions[i, 0] <= 0.0 or positions[i, 0] >= x_max:
            velocities[i, 0] = -velocities[i, 0]
        if positions[i, 1] <= 0.0 or positions[i, 1] >= y_max:
            velocities[i, 1] = -velocities[i, 1]

        positions[i, 0] = min(max(positions[i, 0], 0.0), x_max)
        positions[i, 1] = min(max(positions[i, 1], 0.0), y_max)

        for j in range(i + 1, particle_count):
            if _resolve_pair_numba(positions, velocities, i, j, diameter, restitution, perturbation):
                resolved += 1

    # Collisions can push an already processed particle past a wall.
    for i in range(particle_count):
        positions[i, 0] = min(max(positions[i, 0], 0.0), x_max)
        positions[i, 1] = min(max(positions[i, 1], 0.0), y_max)

    return resolved

class Simulation:
    """
    Advances the particle system one fixed tick at a time.
    """
    def __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
        """
        Initializes the simulation environment.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.particles = particles
        self.field_force_scale = float(params.get('field_force_scale', FIELD_FORCE_SCALE))
        self.gravity_force_scale = float(params.get('gravity_force_scale', GRAVITY_FORCE_SCALE))
        self.restitution = float(params.get('restitution', RESTITUTION))
        self.step_count = 0

        if not 0.0 <= self.restitution <= 1.0:
            msg = (
                f"Configuration error: restitution {self.restitution} "
                f"must lie between 0 and 1."
            )
            logging.critical(msg)
            raise ValueError(msg)

        if particles.seed is not None:
            _seed_numba(int(particles.seed))

        logging.info(
            f"Simulation initialized: field scale {self.field_force_scale}, "
            f"gravity scale {self.gravity_force_scale}, "
            f"restitution {self.restitution}."
        )

    def step(self, context: SimulationContext) -> int:
        """
        Executes one time step of the simulation.

        Args:
            context (SimulationContext): Arena bounds and controls for
                this tick.

        Returns:
            int: The number of colliding pairs resolved.
        """
        particles = self.particles
        controls = context.controls

        # 1. Follow a temperature change before moving anything
        if controls.temperature != particles.temperature:
            particles.rescale_temperature(controls.temperature)

        # 2. External fields
        particles.velocities = apply_controls(
            particles.velocities, particles.charged, controls,
            self.field_force_scale, self.gravity_force_scale
        )

        # 3. Integrate, reflect, clamp and collide (using Numba)
        resolved = _advance_numba(
            particles.positions, particles.velocities,
            float(context.width), float(context.height),
            particles.diameter, self.restitution, DEGENERATE_PERTURBATION
        )

        self.step_count += 1
        return resolved

    def resolve_pair(self, i: int, j: int) -> bool:
        """
        Resolves a collision between particles i and j if they overlap.

        Returns:
            bool: True if the pair was closer than one diameter and has
            been separated, False if it was left untouched.
        """
        count = self.particles.particle_count
        if i == j or not (0 <= i < count and 0 <= j < count):
            raise IndexError(f"invalid particle pair ({i}, {j}) for {count} particles")
        return _resolve_pair_numba(
            self.particles.positions, self.particles.velocities,
            i, j, self.particles.diameter, self.restitution, DEGENERATE_PERTURBATION
        )
