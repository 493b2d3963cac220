import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from particle import ParticleSystem
from simulation import Controls
from visualization import Slider, Visualizer, field_arrow_segments
from constants import TEMPERATURE_SLIDER, FIELD_SLIDER
from helpers import make_params


@pytest.fixture
def visualizer():
    vis = Visualizer({"window_width": 800, "window_height": 600})
    yield vis
    vis.close()


def click(pos):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos)


def test_no_arrow_without_field():
    assert field_arrow_segments(800, 600, 0.0, 0.0) == []


def test_arrow_points_along_positive_x():
    shaft, left, right = field_arrow_segments(800, 600, 1.0, 0.0)

    assert shaft[0] == (400, 300)
    assert shaft[1] == pytest.approx((480, 300))
    # Head strokes point back towards the center, symmetric about the shaft.
    assert left[1][0] < 480 and right[1][0] < 480
    assert left[1][1] == pytest.approx(600 - right[1][1])


def test_positive_y_field_points_up_on_screen():
    shaft, _, _ = field_arrow_segments(800, 600, 0.0, 2.0)

    assert shaft[1] == pytest.approx((400, 300 - 160))


def test_slider_snaps_to_step_and_clamps():
    slider = Slider("Field", (0, 0, 214, 38), FIELD_SLIDER)
    track = slider.track_rect

    slider.handle_event(click((track.right, track.centery)))
    assert slider.value == 5.0
    slider.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(track.right + 50, track.centery)))
    assert slider.value == 5.0
    slider.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(track.left, track.centery)))
    assert slider.value == -5.0
    slider.handle_event(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(0, 0)))
    assert not slider.dragging

    slider.handle_event(click((track.centerx + 3, track.centery)))
    assert slider.value * 10 == pytest.approx(round(slider.value * 10))


def test_slider_starts_at_default():
    slider = Slider("Temperature", (0, 0, 200, 38), TEMPERATURE_SLIDER)

    assert slider.value == 300.0


def test_default_controls_and_arena(visualizer):
    assert visualizer.controls() == Controls(temperature=300.0)
    assert visualizer.arena_size == (800.0, 600.0)


def test_reset_button_restores_sliders(visualizer):
    visualizer.gravity_slider.set_value(12.0)
    visualizer.temperature_slider.set_value(800.0)

    assert visualizer.handle_event(click(visualizer.reset_button.rect.center))

    assert visualizer.pop_action() == "reset"
    assert visualizer.pop_action() is None
    assert visualizer.controls() == Controls()


def test_restart_button_requests_restart(visualizer):
    visualizer.handle_event(click(visualizer.restart_button.rect.center))

    assert visualizer.pop_action() == "restart"


def test_quit_and_escape_stop_the_loop(visualizer):
    assert not visualizer.handle_event(pygame.event.Event(pygame.QUIT))
    assert not visualizer.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))


def test_draw_renders_particles(visualizer):
    width, height = visualizer.arena_size
    particles = ParticleSystem(make_params(particle_count=20), width, height)
    visualizer.field_x_slider.set_value(2.0)

    assert visualizer.draw(particles)
