"""
Orbital Lab - Injection Simulator
=================================

Interactive pygame host for the orbital injection simulator. The window
drives a :class:`RunController` once per frame and renders the planet, the
satellite with its trail, the run status and the analytic mission
projection. ``--headless`` runs the same controller without a window.
"""
from __future__ import annotations

import argparse
import math
import random
import sys
from typing import Sequence

from aeroverse.core.config import LAB_CFG, PHYSICS_CFG, RENDER_CFG
from aeroverse.core.controller import RunController
from aeroverse.core.logging_utils import RunRecorder
from aeroverse.core.model import RunStatus
from aeroverse.core.runner import run_until_outcome
from aeroverse.data.scenarios import SCENARIO_DISPLAY_ORDER, SCENARIOS

STATUS_TEXT = {
    RunStatus.IDLE: "Ready to Launch",
    RunStatus.ORBITING: "Simulation Running...",
    RunStatus.CRASHED: "Impact Detected",
    RunStatus.ESCAPED: "Escaping Gravity Well",
}


def format_au(value: float) -> str:
    return "∞" if math.isinf(value) else f"{value:.2f}"


def projection_lines(controller: RunController) -> list[str]:
    elements = controller.elements
    lines = [
        f"Projected Aphelion: {format_au(elements.apoapsis_au)} AU",
        f"Potential Reach: {elements.target_text}",
        f"Specific energy: {elements.specific_energy:+.3f}",
        f"Eccentricity: {elements.eccentricity:.3f}",
    ]
    if elements.period is not None:
        lines.append(f"Period: {elements.period:.1f} s")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Orbital injection simulator.")
    parser.add_argument("--speed", type=float, default=None, help="Injection speed")
    parser.add_argument("--angle", type=float, default=None, help="Injection angle in degrees")
    parser.add_argument(
        "--scenario",
        choices=SCENARIO_DISPLAY_ORDER,
        default=None,
        help="Start from a named launch preset",
    )
    parser.add_argument("--log", action="store_true", help="Record runs under data/runs")
    parser.add_argument("--runs-dir", default=LAB_CFG.runs_dir, help="Directory for run logs")
    parser.add_argument("--headless", action="store_true", help="Simulate without a window")
    parser.add_argument("--duration", type=float, default=60.0, help="Headless duration [s]")
    parser.add_argument("--frame-dt", type=float, default=1.0 / 60.0, help="Headless frame interval")
    return parser


def build_controller(args: argparse.Namespace) -> RunController:
    """Controller for the chosen preset, with command line overrides clamped to the lab ranges."""

    params = SCENARIOS[args.scenario].parameters() if args.scenario is not None else None
    controller = RunController(params=params)
    if args.speed is not None:
        controller.set_speed(args.speed)
    if args.angle is not None:
        controller.set_angle(args.angle)
    return controller


def run_headless(args: argparse.Namespace) -> int:
    controller = build_controller(args)
    recorder = RunRecorder(controller, args.runs_dir) if args.log else None
    print(f"Launch: speed={controller.params.speed:.2f} angle={controller.params.angle_deg:+.0f}°")
    for line in projection_lines(controller):
        print(f" {line}")

    def on_frame(ctrl: RunController, dt: float) -> None:
        if recorder is not None:
            recorder.record_frame(dt)

    outcome = run_until_outcome(controller, args.duration, args.frame_dt, on_frame=on_frame)
    if recorder is not None:
        recorder.record_frame(0.0, force=True)
        recorder.close()
        for run_dir in recorder.run_dirs:
            print(f" Run log: {run_dir}")
    print(f" Outcome: {STATUS_TEXT[outcome.status]} ({outcome.status.value})")
    print(f" Simulated time: {outcome.time:.2f} s over {outcome.frames} frames")
    print(f" Radius range: {outcome.min_radius:.3f} .. {outcome.max_radius:.3f}")
    print(f" Revolutions: {outcome.revolutions:.2f}")
    return 0


def run_window(args: argparse.Namespace) -> int:
    import pygame

    from aeroverse.core.timekeeping import FrameTimer
    from aeroverse.render import (
        Button,
        ButtonVisualStyle,
        Camera,
        FontSet,
        Slider,
        build_text_panel,
        draw_planet,
        draw_ring,
        draw_satellite,
        draw_starfield,
        draw_tag,
        draw_trail,
        generate_starfield,
        get_text_surface,
    )

    cfg = RENDER_CFG
    pygame.init()
    pygame.display.set_caption("AeroVerse - Orbital Lab")
    screen = pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
    clock = pygame.time.Clock()
    fonts = FontSet()

    controller = build_controller(args)
    recorder = RunRecorder(controller, args.runs_dir) if args.log else None
    timer = FrameTimer(max_dt=LAB_CFG.max_frame_dt, time_scale=LAB_CFG.time_scale)

    def viewport_size() -> tuple[int, int]:
        width, height = screen.get_size()
        return max(1, width - cfg.panel_width), height

    camera = Camera(
        viewport_size(),
        cfg.pixels_per_unit,
        min_ppu=cfg.min_pixels_per_unit,
        max_ppu=cfg.max_pixels_per_unit,
    )
    starfield = generate_starfield(cfg.num_stars, size=screen.get_size(), rng=random.Random(7))
    scenario_index = 0

    def load_scenario(index: int) -> None:
        nonlocal scenario_index
        scenario_index = index % len(SCENARIO_DISPLAY_ORDER)
        controller.set_parameters(SCENARIOS[SCENARIO_DISPLAY_ORDER[scenario_index]].parameters())

    def layout_widgets() -> tuple[list[Button], list[Slider]]:
        left = screen.get_width() - cfg.panel_width + 24
        inner = cfg.panel_width - 48
        launch_style = ButtonVisualStyle(
            base_color=cfg.button_color,
            hover_color=cfg.button_hover_color,
            text_color=cfg.button_text_color,
            radius=cfg.button_radius,
            disabled_color=cfg.button_disabled_color,
        )
        reset_style = ButtonVisualStyle(
            base_color=cfg.reset_button_color,
            hover_color=cfg.reset_button_hover_color,
            text_color=cfg.button_text_color,
            radius=cfg.button_radius,
        )
        buttons = [
            Button(
                (left, 560, inner - 70, 44),
                "LAUNCH",
                controller.launch,
                style=launch_style,
                enabled=lambda: controller.status is RunStatus.IDLE,
            ),
            Button((left + inner - 60, 560, 60, 44), "RESET", controller.reset, style=reset_style),
        ]
        sliders = [
            Slider(
                (left, 150, inner, 20),
                LAB_CFG.speed_range,
                LAB_CFG.speed_step,
                lambda: controller.params.speed,
                controller.set_speed,
                track_color=(51, 65, 85),
                knob_color=cfg.speed_label_color,
            ),
            Slider(
                (left, 260, inner, 20),
                LAB_CFG.angle_range,
                LAB_CFG.angle_step,
                lambda: controller.params.angle_deg,
                controller.set_angle,
                track_color=(51, 65, 85),
                knob_color=cfg.angle_label_color,
            ),
        ]
        return buttons, sliders

    buttons, sliders = layout_widgets()

    def blit_text(text: str, font, color, pos: tuple[int, int]) -> None:
        screen.blit(get_text_surface(font, text, color), pos)

    def draw_scene() -> None:
        viewport = pygame.Rect(0, 0, *viewport_size())
        screen.set_clip(viewport)
        draw_starfield(screen, starfield, camera.center, camera.ppu, render_cfg=cfg)
        origin = camera.world_to_screen(0.0, 0.0)
        draw_ring(screen, origin, camera.scale_length(PHYSICS_CFG.initial_radius), cfg.start_ring_color)
        draw_planet(screen, origin, camera.scale_length(PHYSICS_CFG.body_radius), render_cfg=cfg)
        draw_tag(
            screen,
            fonts.small,
            "Earth (Start)",
            (origin[0], origin[1] - camera.scale_length(PHYSICS_CFG.body_radius * 1.2)),
            text_color=(103, 232, 249),
            background_color=cfg.label_background_color,
        )

        sat = controller.satellite
        crashed = controller.status is RunStatus.CRASHED
        trail = [camera.world_to_screen(x, y) for x, y in sat.trail]
        sat_screen = camera.world_to_screen(float(sat.position[0]), float(sat.position[1]))
        if trail:
            trail.append(sat_screen)
        trail_color = cfg.trail_crash_color if crashed else cfg.trail_color
        draw_trail(screen, trail_color, trail, cfg.trail_width)
        if crashed:
            draw_tag(
                screen,
                fonts.label,
                "CRASH",
                sat_screen,
                text_color=cfg.trail_crash_color,
                background_color=(0, 0, 0, 200),
                border_color=cfg.trail_crash_color,
            )
        else:
            draw_satellite(screen, sat_screen, cfg.satellite_pixel_radius, color=cfg.satellite_color)

        status = controller.status
        badge = build_text_panel(
            fonts.body,
            [(STATUS_TEXT[status], cfg.hud_text_color)],
            background_color=cfg.status_color(status.name),
        )
        screen.blit(badge, badge.get_rect(topright=(viewport.right - 24, 24)))
        screen.set_clip(None)

    def draw_panel() -> None:
        left = screen.get_width() - cfg.panel_width
        panel = pygame.Surface((cfg.panel_width, screen.get_height()), pygame.SRCALPHA)
        panel.fill(cfg.panel_color)
        pygame.draw.line(panel, cfg.panel_border_color, (0, 0), (0, screen.get_height()), 1)
        screen.blit(panel, (left, 0))
        x = left + 24
        params = controller.params
        blit_text("Orbital Lab", fonts.title, cfg.hud_text_color, (x, 24))
        blit_text("Injection Simulator", fonts.body, cfg.hud_muted_color, (x, 58))

        blit_text("Injection Velocity", fonts.label, cfg.speed_label_color, (x, 118))
        blit_text(f"{params.speed:.2f} km/s", fonts.mono, cfg.hud_text_color, (x + 170, 114))
        blit_text("Drop (1.0)   Hold (2.2)   Escape (3.2)", fonts.small, cfg.hud_muted_color, (x, 178))

        blit_text("Injection Angle", fonts.label, cfg.angle_label_color, (x, 228))
        blit_text(f"{params.angle_deg:+.0f}°", fonts.mono, cfg.hud_text_color, (x + 170, 224))
        blit_text("0° = Parallel to surface", fonts.small, cfg.hud_muted_color, (x, 288))

        blit_text("MISSION PROJECTION", fonts.label, cfg.speed_label_color, (x, 338))
        elements = controller.elements
        reach_color = cfg.reach_bound_color if elements.bound else cfg.reach_escape_color
        blit_text("Projected Aphelion", fonts.small, cfg.hud_muted_color, (x, 368))
        blit_text(f"{format_au(elements.apoapsis_au)} AU", fonts.mono_large, cfg.hud_text_color, (x, 384))
        blit_text("Potential Reach", fonts.small, cfg.hud_muted_color, (x, 424))
        blit_text(elements.target_text, fonts.label, reach_color, (x, 440))
        for idx, line in enumerate(projection_lines(controller)[2:]):
            blit_text(line, fonts.small, cfg.hud_muted_color, (x, 476 + idx * 18))

        for slider in sliders:
            slider.draw(screen)
        mouse = pygame.mouse.get_pos()
        for button in buttons:
            button.draw(screen, fonts.label, mouse)

        scenario = SCENARIOS[SCENARIO_DISPLAY_ORDER[scenario_index]]
        help_lines = [
            "Space launch - R reset - Tab next preset",
            "Arrows adjust speed / angle - wheel zoom",
            f"Preset: {scenario.name}",
        ]
        for idx, line in enumerate(help_lines):
            blit_text(line, fonts.small, cfg.hud_muted_color, (x, screen.get_height() - 70 + idx * 18))

    def handle_key(key: int) -> bool:
        if key == pygame.K_ESCAPE:
            return False
        if key == pygame.K_SPACE:
            controller.launch()
        elif key == pygame.K_r:
            controller.reset()
        elif key == pygame.K_TAB:
            load_scenario(scenario_index + 1)
        elif key in (pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_5):
            load_scenario(key - pygame.K_1)
        elif key == pygame.K_UP:
            controller.nudge_speed(1)
        elif key == pygame.K_DOWN:
            controller.nudge_speed(-1)
        elif key == pygame.K_RIGHT:
            controller.nudge_angle(1)
        elif key == pygame.K_LEFT:
            controller.nudge_angle(-1)
        elif key == pygame.K_c:
            camera.recenter()
        return True

    running = True
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                    camera.update_viewport(viewport_size())
                    starfield = generate_starfield(cfg.num_stars, size=screen.get_size())
                    buttons, sliders = layout_widgets()
                elif event.type == pygame.KEYDOWN:
                    running = handle_key(event.key)
                elif event.type == pygame.MOUSEWHEEL:
                    camera.zoom_by_factor(1.1 if event.y > 0 else 1.0 / 1.1)
                else:
                    consumed = any(slider.handle_event(event) for slider in sliders)
                    if not consumed:
                        consumed = any(button.handle_event(event) for button in buttons)
                    is_press = event.type == pygame.MOUSEBUTTONDOWN and event.button == 1
                    if is_press and not consumed and event.pos[0] < viewport_size()[0]:
                        camera.begin_pan(event.pos)
                    elif event.type == pygame.MOUSEMOTION:
                        camera.pan(event.pos)
                    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                        camera.end_pan()

            dt = timer.tick()
            controller.tick(dt)
            if recorder is not None:
                recorder.record_frame(dt)
            camera.update()

            screen.fill(cfg.background_color)
            draw_scene()
            draw_panel()
            pygame.display.flip()
            clock.tick(cfg.fps_limit)
    finally:
        if recorder is not None:
            recorder.close()
        pygame.quit()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    for name in ("speed", "angle"):
        value = getattr(args, name)
        if value is not None and not math.isfinite(value):
            parser.error(f"--{name} must be a finite number")
    if args.headless:
        return run_headless(args)
    return run_window(args)


if __name__ == "__main__":
    sys.exit(main())
