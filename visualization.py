# visualization.py
"""
Handles the visualization of the gas simulation using Pygame.

The window is split into a control strip (temperature, gravity and
electric field sliders plus the Reset and Restart buttons) and the arena
below it. The arena follows the window size, so resizing the window
resizes the box the particles live in.
"""
import logging
import math
import pygame
from particle import ParticleSystem
from simulation import Controls
from constants import (
    FPS, DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT, CONTROL_PANEL_HEIGHT,
    BACKGROUND_COLOR, BORDER_COLOR, BORDER_WIDTH, PANEL_COLOR, TEXT_COLOR,
    PARTICLE_COLOR, CHARGED_COLOR, TEMPERATURE_SLIDER, GRAVITY_SLIDER,
    FIELD_SLIDER, ARROW_COLOR, ARROW_WIDTH, ARROW_LENGTH_RATIO,
    ARROW_HEAD_RATIO, ARROW_HEAD_ANGLE
)
from typing import List, Optional, Tuple

# --- Data Contracts ---
#
# field_arrow_segments(width, height, field_x, field_y) -> List[Segment]:
#   - Outputs: The shaft and the two head strokes of the field arrow, in
#     arena coordinates. Empty when the field is zero.
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Side Effects: Initializes Pygame and creates a resizable window.
#
#   - draw(self, particles: ParticleSystem) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Handles Pygame events (sliders, buttons, quit),
#       renders the arena and the controls.
#
#   - controls(self) -> Controls: snapshot of the slider values.
#   - arena_size -> Tuple[float, float]: current arena dimensions.
#   - pop_action(self) -> Optional[str]: "reset", "restart" or None.

Point = Tuple[float, float]
Segment = Tuple[Point, Point]


def field_arrow_segments(width: float, height: float, field_x: float, field_y: float) -> List[Segment]:
    """
    Computes the arrow that shows the electric field, centered in the arena.

    The y component is flipped because a positive field_y points up on
    screen. The shaft is |E| tenths of the arena width long.
    """
    center_x, center_y = width / 2, height / 2
    ex, ey = field_x, -field_y

    magnitude = math.hypot(ex, ey)
    if magnitude == 0:
        return []
    angle = math.atan2(ey, ex)
    length = magnitude * width * ARROW_LENGTH_RATIO

    end_x = center_x + length * math.cos(angle)
    end_y = center_y + length * math.sin(angle)

    head_length = length * ARROW_HEAD_RATIO
    left_angle = angle + math.pi - ARROW_HEAD_ANGLE
    right_angle = angle + math.pi + ARROW_HEAD_ANGLE
    left = (end_x + head_length * math.cos(left_angle), end_y + head_length * math.sin(left_angle))
    right = (end_x + head_length * math.cos(right_angle), end_y + head_length * math.sin(right_angle))

    end = (end_x, end_y)
    return [((center_x, center_y), end), (end, left), (end, right)]


class Slider:
    """A horizontal slider with a label showing its current value."""
    def __init__(self, label: str, rect: Tuple[int, int, int, int],
                 bounds: Tuple[float, float, float, float], value_format: str = "{:.1f}"):
        self.label = label
        self.rect = pygame.Rect(rect)
        self.min_val, self.max_val, self.step, self.default = bounds
        self.value_format = value_format
        self.value = self.default
        self.dragging = False
        self.knob_radius = 7
        self.track_rect = pygame.Rect(
            self.rect.left + self.knob_radius, self.rect.bottom - 12,
            self.rect.width - 2 * self.knob_radius, 4
        )

    def _snap(self, value: float) -> float:
        steps = round((value - self.min_val) / self.step)
        snapped = round(self.min_val + steps * self.step, 6)
        return max(self.min_val, min(self.max_val, snapped))

    def _value_at(self, x: int) -> float:
        ratio = (x - self.track_rect.left) / max(1, self.track_rect.width)
        ratio = max(0.0, min(1.0, ratio))
        return self._snap(self.min_val + ratio * (self.max_val - self.min_val))

    def knob_x(self) -> int:
        ratio = (self.value - self.min_val) / (self.max_val - self.min_val)
        return int(round(self.track_rect.left + ratio * self.track_rect.width))

    def set_value(self, value: float) -> None:
        self.value = max(self.min_val, min(self.max_val, value))

    def reset(self) -> None:
        self.value = self.default
        self.dragging = False

    def handle_event(self, event) -> bool:
        """Updates the value from mouse input. Returns True if it changed."""
        old_value = self.value
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.dragging = True
                self.value = self._value_at(event.pos[0])
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            self.value = self._value_at(event.pos[0])
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
        return self.value != old_value

    def draw(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        text = f"{self.label}: {self.value_format.format(self.value)}"
        surface.blit(font.render(text, True, TEXT_COLOR), (self.rect.left, self.rect.top))
        pygame.draw.rect(surface, (190, 190, 190), self.track_rect, border_radius=2)
        filled = self.track_rect.copy()
        filled.width = self.knob_x() - self.track_rect.left
        pygame.draw.rect(surface, (72, 104, 255), filled, border_radius=2)
        knob_color = (52, 82, 230) if self.dragging else (72, 104, 255)
        pygame.draw.circle(surface, knob_color, (self.knob_x(), self.track_rect.centery), self.knob_radius)


class Button:
    """A clickable rectangle with a text label."""
    def __init__(self, label: str, rect: Tuple[int, int, int, int]):
        self.label = label
        self.rect = pygame.Rect(rect)

    def handle_event(self, event) -> bool:
        return (
            event.type == pygame.MOUSEBUTTONDOWN and event.button == 1
            and self.rect.collidepoint(event.pos)
        )

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, mouse_pos: Point) -> None:
        is_hovered = self.rect.collidepoint(mouse_pos)
        color = (110, 110, 110) if is_hovered else (80, 80, 80)
        pygame.draw.rect(surface, color, self.rect, border_radius=5)
        text_surf = font.render(self.label, True, (255, 255, 255))
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))


class Visualizer:
    """
    Renders the particles and the field arrow, and owns the user controls.
    """
    def __init__(self, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        width = int(vis_params.get('window_width', DEFAULT_WINDOW_WIDTH))
        height = int(vis_params.get('window_height', DEFAULT_WINDOW_HEIGHT))
        self.screen = pygame.display.set_mode((width, height + CONTROL_PANEL_HEIGHT), pygame.RESIZABLE)
        pygame.display.set_caption("Ideal Gas Simulation with Electric Field")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 20)

        self.particle_color = self._parse_color(vis_params.get('particle_color'), PARTICLE_COLOR)
        self.charged_color = self._parse_color(vis_params.get('charged_color'), CHARGED_COLOR)

        # --- Controls ---
        self.temperature_slider = Slider("Temperature", (10, 8, 200, 38), TEMPERATURE_SLIDER, "{:.1f}K")
        self.gravity_slider = Slider("Gravity", (230, 8, 200, 38), GRAVITY_SLIDER, "{:.1f}g")
        self.field_x_slider = Slider("ElectricX Field", (10, 54, 200, 38), FIELD_SLIDER)
        self.field_y_slider = Slider("ElectricY Field", (230, 54, 200, 38), FIELD_SLIDER)
        self.sliders = [
            self.temperature_slider, self.gravity_slider,
            self.field_x_slider, self.field_y_slider
        ]
        self.reset_button = Button("Reset", (450, 12, 90, 30))
        self.restart_button = Button("Restart", (550, 12, 90, 30))
        self._pending_action: Optional[str] = None

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height + CONTROL_PANEL_HEIGHT}).")

    @staticmethod
    def _parse_color(value, fallback) -> pygame.Color:
        if value is None:
            return pygame.Color(fallback)
        try:
            return pygame.Color(*value)
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse color {value!r} from config: {e}. Using {fallback}.")
            return pygame.Color(fallback)

    @property
    def arena_size(self) -> Tuple[float, float]:
        """Current arena dimensions (the window minus the control strip)."""
        width, height = self.screen.get_size()
        return float(max(width, 1)), float(max(height - CONTROL_PANEL_HEIGHT, 1))

    def controls(self) -> Controls:
        """Returns a snapshot of the current slider values."""
        return Controls(
            temperature=self.temperature_slider.value,
            gravity=self.gravity_slider.value,
            field_x=self.field_x_slider.value,
            field_y=self.field_y_slider.value,
        )

    def reset_controls(self) -> None:
        """Moves every slider back to its default value."""
        for slider in self.sliders:
            slider.reset()

    def pop_action(self) -> Optional[str]:
        """Returns and clears the last button action ("reset" or "restart")."""
        action, self._pending_action = self._pending_action, None
        return action

    def handle_event(self, event) -> bool:
        """
        Processes a single Pygame event.

        Returns:
            bool: False if the event asks the application to quit.
        """
        if event.type == pygame.QUIT:
            logging.info("Quit event received. Shutting down visualizer.")
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            logging.info("ESC key pressed. Shutting down visualizer.")
            return False
        if event.type == pygame.VIDEORESIZE:
            logging.debug(f"Window resized to {event.w}x{event.h}.")

        if self.reset_button.handle_event(event):
            self.reset_controls()
            self._pending_action = "reset"
            logging.info("Reset requested by user.")
        elif self.restart_button.handle_event(event):
            self._pending_action = "restart"
            logging.info("Restart requested by user.")

        for slider in self.sliders:
            if slider.handle_event(event):
                logging.debug(f"{slider.label} set to {slider.value}.")
        return True

    def draw(self, particles: ParticleSystem) -> bool:
        """
        Handles events, then draws the arena, particles and controls.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if not self.handle_event(event):
                return False

        width, height = self.arena_size
        offset_y = CONTROL_PANEL_HEIGHT
        self.screen.fill(BACKGROUND_COLOR)

        # 1. Arena border
        arena_rect = pygame.Rect(0, offset_y, int(width), int(height))
        pygame.draw.rect(self.screen, BORDER_COLOR, arena_rect, BORDER_WIDTH)

        # 2. Particles. Positions are the top-left corner of each circle.
        radius = particles.radius
        draw_radius = max(1, int(round(radius)))
        for pos, is_charged in zip(particles.positions, particles.charged):
            color = self.charged_color if is_charged else self.particle_color
            center = (int(pos[0] + radius), int(pos[1] + radius + offset_y))
            pygame.draw.circle(self.screen, color, center, draw_radius)

        # 3. Field arrow
        controls = self.controls()
        for start, end in field_arrow_segments(width, height, controls.field_x, controls.field_y):
            pygame.draw.line(
                self.screen, ARROW_COLOR,
                (start[0], start[1] + offset_y), (end[0], end[1] + offset_y),
                ARROW_WIDTH
            )

        # 4. Control strip
        pygame.draw.rect(self.screen, PANEL_COLOR, pygame.Rect(0, 0, int(width), CONTROL_PANEL_HEIGHT))
        mouse_pos = pygame.mouse.get_pos()
        for slider in self.sliders:
            slider.draw(self.screen, self.font)
        self.reset_button.draw(self.screen, self.font, mouse_pos)
        self.restart_button.draw(self.screen, self.font, mouse_pos)

        pygame.display.flip()
        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
