# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which is responsible for
placing the particles in the arena without overlap, drawing their initial
velocities from the temperature, and storing particle data (position,
velocity, charge) in contiguous NumPy arrays indexed by particle number.
"""
import logging
import math
import numpy as np
from typing import Dict, Any, Optional
from constants import (
    DEFAULT_TEMPERATURE, DEFAULT_DIAMETER, DEFAULT_MIN_SPEED,
    DEFAULT_MAX_SPEED, DEFAULT_PARTICLE_COUNT, MAX_PLACEMENT_ATTEMPTS
)

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], width: float, height: float,
#              temperature: Optional[float] = None):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": Optional[int]
#         - "particle_count": int
#         - "diameter": float
#         - "min_speed", "max_speed": float
#         - "reference_temperature": float
#         - "initial_temperature": float (used if temperature is None)
#         - "max_placement_attempts": int
#       - width, height: dimensions of the arena.
#       - temperature: temperature of the initial velocities.
#     - Outputs: None
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - self.charged is a NumPy array of shape (N,) of dtype bool with
#         exactly one True entry, at index 0.
#
#   - rescale_temperature(self, temperature: float) -> bool:
#     - Side Effects: Scales every velocity by sqrt(new / previous).
#     - Outputs: False if the request was rejected (non-positive values).
#
#   - reset(self, temperature: Optional[float] = None) -> None:
#     - Side Effects: Redraws every velocity at the given temperature.
#       Positions are untouched.

class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, params: Dict[str, Any], width: float, height: float,
                 temperature: Optional[float] = None):
        """
        Places the particles and draws their initial velocities.

        Placement is best effort: each particle gets up to
        max_placement_attempts random positions to find a spot at least
        two diameters away from every particle placed before it. If the
        budget runs out (dense packings, small arenas) the last sample is
        kept even though it overlaps, and a warning is logged.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (float): The width of the arena.
            height (float): The height of the arena.
            temperature (Optional[float]): Temperature of the initial
                velocities. Defaults to params["initial_temperature"].
        """
        self.particle_count = int(params.get('particle_count', DEFAULT_PARTICLE_COUNT))
        self.diameter = float(params.get('diameter', DEFAULT_DIAMETER))
        self.radius = self.diameter / 2.0
        self.min_speed = float(params.get('min_speed', DEFAULT_MIN_SPEED))
        self.max_speed = float(params.get('max_speed', DEFAULT_MAX_SPEED))
        self.reference_temperature = float(
            params.get('reference_temperature', DEFAULT_TEMPERATURE)
        )
        self.max_placement_attempts = int(
            params.get('max_placement_attempts', MAX_PLACEMENT_ATTEMPTS)
        )
        self.seed = params.get('seed')
        if temperature is None:
            temperature = params.get('initial_temperature', self.reference_temperature)
        self.temperature = float(temperature)

        self._validate()

        # Rule 12: All randomness is controlled by a single master seed.
        # We create a dedicated RNG from the seed for all operations
        # within this module.
        self.rng = np.random.default_rng(self.seed)

        self.positions = self._place_particles(width, height)
        self.velocities = self._sample_velocities(self.temperature)
        # The first particle placed carries the charge.
        self.charged = np.zeros(self.particle_count, dtype=np.bool_)
        self.charged[0] = True

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles (diameter {self.diameter}) at {self.temperature:.1f}K "
            f"in a {width:.0f}x{height:.0f} arena."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Charged shape: {self.charged.shape}"
        )

    def _validate(self) -> None:
        """Rejects configurations that cannot satisfy the particle invariants."""
        problems = []
        if self.particle_count < 1:
            problems.append(f"particle_count must be at least 1, got {self.particle_count}")
        if self.diameter <= 0:
            problems.append(f"diameter must be positive, got {self.diameter}")
        if self.min_speed < 0 or self.min_speed > self.max_speed:
            problems.append(
                f"speed range [{self.min_speed}, {self.max_speed}] is invalid"
            )
        if self.reference_temperature <= 0:
            problems.append(
                f"reference_temperature must be positive, got {self.reference_temperature}"
            )
        if self.temperature <= 0:
            problems.append(f"temperature must be positive, got {self.temperature}")
        if self.max_placement_attempts < 1:
            problems.append(
                f"max_placement_attempts must be at least 1, got {self.max_placement_attempts}"
            )

        if problems:
            msg = "Configuration error: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)

    def _place_particles(self, width: float, height: float) -> np.ndarray:
        """Samples non-overlapping positions, one particle at a time."""
        positions = np.empty((self.particle_count, 2), dtype=np.float64)
        min_distance = 2.0 * self.diameter
        low = [self.diameter, self.diameter]
        # Arenas narrower than two diameters collapse the sampling range
        # to a single line rather than inverting it.
        high = [max(width - self.diameter, self.diameter),
                max(height - self.diameter, self.diameter)]

        for i in range(self.particle_count):
            placed = positions[:i]
            for _ in range(self.max_placement_attempts):
                candidate = self.rng.uniform(low, high)
                if i == 0:
                    break
                distances = np.hypot(placed[:, 0] - candidate[0], placed[:, 1] - candidate[1])
                if distances.min() >= min_distance:
                    break
            else:
                logging.warning(
                    f"Max placement attempts ({self.max_placement_attempts}) reached "
                    f"while placing particle {i}. Keeping an overlapping position."
                )
            positions[i] = candidate

        return positions

    def _sample_velocities(self, temperature: float) -> np.ndarray:
        """Draws a random direction and a temperature-scaled speed per particle."""
        angles = self.rng.uniform(0.0, 2.0 * np.pi, size=self.particle_count)
        speeds = self.rng.uniform(self.min_speed, self.max_speed, size=self.particle_count)
        speeds *= temperature / self.reference_temperature
        return np.column_stack((speeds * np.cos(angles), speeds * np.sin(angles)))

    @property
    def charged_index(self) -> int:
        """Index of the single charged particle."""
        return int(np.flatnonzero(self.charged)[0])

    def rescale_temperature(self, temperature: float) -> bool:
        """
        Scales all velocities to follow a temperature change.

        Mean-square speed is proportional to temperature, so every velocity
        is multiplied by sqrt(new / previous). Direction is preserved.

        Returns:
            bool: True if the velocities were rescaled (or already matched),
            False if the request was rejected.
        """
        previous = self.temperature
        if previous <= 0 or temperature <= 0:
            logging.warning(
                f"Ignoring temperature rescale from {previous} to {temperature}: "
                f"both temperatures must be positive."
            )
            return False
        if temperature == previous:
            return True

        factor = math.sqrt(temperature / previous)
        self.velocities *= factor
        self.temperature = float(temperature)
        logging.debug(
            f"Temperature changed {previous:.1f}K -> {temperature:.1f}K, "
            f"velocities scaled by {factor:.4f}."
        )
        return True

    def reset(self, temperature: Optional[float] = None) -> None:
        """
        Redraws every velocity at the given temperature without moving
        any particle.

        Args:
            temperature (Optional[float]): Target temperature. Defaults to
                the reference temperature.
        """
        if temperature is None:
            temperature = self.reference_temperature
        if temperature <= 0:
            logging.warning(f"Ignoring reset to non-positive temperature {temperature}.")
            return
        self.velocities = self._sample_velocities(temperature)
        self.temperature = float(temperature)
        logging.info(f"Particle velocities reset at {self.temperature:.1f}K.")
