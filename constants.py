# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties, default window sizes, or core physics settings that are not
part of the experimental configuration.
"""
import math

# Visualization settings
FPS = 60
DEFAULT_WINDOW_WIDTH = 800
DEFAULT_WINDOW_HEIGHT = 600
# Height of the control strip above the arena (sliders and buttons).
CONTROL_PANEL_HEIGHT = 100
BACKGROUND_COLOR = (255, 255, 255)
BORDER_COLOR = (0, 0, 0)
BORDER_WIDTH = 2
PANEL_COLOR = (235, 235, 235)
TEXT_COLOR = (20, 20, 20)

# Particle colors, used if the config file does not provide them.
PARTICLE_COLOR = (0, 0, 255)   # Blue for uncharged molecules
CHARGED_COLOR = (255, 0, 0)    # Red for the charged particle

# --- Physics Defaults ---
# Baseline temperature (K). Initial speeds are drawn at this temperature
# and scaled linearly away from it.
DEFAULT_TEMPERATURE = 300.0
DEFAULT_DIAMETER = 8.0
DEFAULT_MIN_SPEED = 1.0
DEFAULT_MAX_SPEED = 5.0
DEFAULT_PARTICLE_COUNT = 100
MAX_PLACEMENT_ATTEMPTS = 1000
# Velocity change per tick per unit of field strength. Tuned for drift
# rates that look reasonable on screen, not physical units.
FIELD_FORCE_SCALE = 0.1
GRAVITY_FORCE_SCALE = 0.01
# Coefficient of restitution for particle-particle collisions.
RESTITUTION = 1.0
# Size of the random nudge applied when two centers coincide,
# relative to the particle diameter.
DEGENERATE_PERTURBATION = 0.01

# --- Slider Ranges (min, max, step, default) ---
TEMPERATURE_SLIDER = (2.0, 1000.0, 10.0, DEFAULT_TEMPERATURE)
GRAVITY_SLIDER = (0.0, 20.0, 0.1, 0.0)
FIELD_SLIDER = (-5.0, 5.0, 0.1, 0.0)

# --- Field Arrow ---
ARROW_COLOR = (255, 0, 0)
ARROW_WIDTH = 2
# Arrow length per unit field, as a fraction of the arena width.
ARROW_LENGTH_RATIO = 0.1
ARROW_HEAD_RATIO = 0.2
ARROW_HEAD_ANGLE = math.pi / 6
