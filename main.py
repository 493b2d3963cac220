# main.py
"""
Main entry point for the Ideal Gas simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the window, the particles and the simulation.
4. Runs the main simulation loop, one tick per frame.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import numpy as np
import cProfile
import pstats
import io


def main():
    """
    The main function to run the simulation.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Ideal Gas Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from particle import ParticleSystem
    from simulation import Simulation, SimulationContext
    from visualization import Visualizer

    # --- Component Initialization ---
    # 1. The visualizer owns the window, which determines the arena size.
    visualizer = Visualizer(vis_params)
    width, height = visualizer.arena_size

    # 2. Particles start at the temperature shown on the slider.
    particles = ParticleSystem(sim_params, width, height, temperature=visualizer.controls().temperature)
    sim = Simulation(particles, sim_params)

    profiler = cProfile.Profile()

    log_throttle = run_params.get('log_throttle_steps', 300)
    # 0 runs until the window is closed.
    max_steps = run_params.get('max_steps', 0)

    running = True
    step_num = 0

    profiler.enable()
    while running:
        # Arena bounds and controls are read fresh every tick.
        width, height = visualizer.arena_size
        context = SimulationContext(width, height, visualizer.controls())
        collisions = sim.step(context)
        step_num += 1

        if not visualizer.draw(particles):
            running = False

        action = visualizer.pop_action()
        if action == "reset":
            particles.reset(visualizer.controls().temperature)
        elif action == "restart":
            particles = ParticleSystem(
                sim_params, width, height, temperature=visualizer.controls().temperature
            )
            sim = Simulation(particles, sim_params)
            logging.info("Simulation restarted with a new particle configuration.")

        # Rule 2.4: Hot loops must throttle logs
        if step_num % log_throttle == 0:
            logging.info(f"Simulation step {step_num}" + (f"/{max_steps}" if max_steps else ""))

            avg_speed = np.mean(np.linalg.norm(particles.velocities, axis=1))
            logging.debug(
                f"Step {step_num} | Average Speed: {avg_speed:.4f} | "
                f"Collisions this step: {collisions}"
            )

        if max_steps and step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    profiler.disable()

    visualizer.close()
    logging.info("Simulation loop finished.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Ideal Gas Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
