"""Interactive pygame host for the CHIP-8 interpreter."""

import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import jax
import pygame

from chip8vm.constants import NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT, TIMER_PERIOD_NS, DEFAULT_FREQUENCY
from chip8vm.emulator import step, load_rom
from chip8vm.errors import MachineFault
from chip8vm.logging import get_logger
from chip8vm.rendering import display_to_rgb, create_color_scheme
from chip8vm.state import create_state, buzzer_active

logger = get_logger()

# Hex keypad laid out on the left of a QWERTY keyboard
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

FRAME_RATE = 60


def cycles_per_frame(state) -> int:
    """Number of step calls that cover one 60 Hz host frame."""
    return max(1, round(TIMER_PERIOD_NS / state.clock_period_ns))


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay = pygame.Surface((max_width + 16, len(text_lines) * line_height + 8))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def run_emulator(
    rom_filename: str,
    frequency: float = DEFAULT_FREQUENCY,
    legacy_shift: bool = False,
    scale: int = 10,
    color_scheme: str = "classic",
    seed: int = 0,
):
    """Main emulator loop.

    Controls: ESC quits, F1 pauses, F2 resets, F3 toggles the debug overlay.
    A machine fault pauses execution; reset to continue.
    """
    rng_key = jax.random.PRNGKey(seed)

    def fresh_state():
        state = create_state(rng_key, frequency=frequency, legacy_shift=legacy_shift)
        return load_rom(state, rom_filename)

    state = fresh_state()
    on_color, off_color = create_color_scheme(color_scheme)
    batch = cycles_per_frame(state)
    logger.info(f"Running {rom_filename} at {frequency} Hz ({batch} cycles per frame)")

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 18)

    keys = [False] * NUM_KEYS
    frame = state.display
    running = True
    paused = False
    show_debug = False
    buzzing = False

    try:
        while running:
            clock.tick(FRAME_RATE)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_F1:
                        paused = not paused
                        logger.info("Paused" if paused else "Resumed")
                    elif event.key == pygame.K_F2:
                        state = fresh_state()
                        frame = state.display
                        paused = False
                        logger.info("Reset")
                    elif event.key == pygame.K_F3:
                        show_debug = not show_debug
                    elif event.key in KEY_MAP:
                        keys[KEY_MAP[event.key]] = True
                elif event.type == pygame.KEYUP and event.key in KEY_MAP:
                    keys[KEY_MAP[event.key]] = False

            if not paused:
                snapshot = tuple(keys)
                for _ in range(batch):
                    try:
                        state, new_frame = step(state, snapshot)
                    except MachineFault as fault:
                        logger.error(f"Machine fault: {fault}")
                        paused = True
                        break
                    if new_frame is not None:
                        frame = new_frame

            if buzzer_active(state) != buzzing:
                buzzing = not buzzing
                pygame.display.set_caption("CHIP-8 ♪" if buzzing else "CHIP-8")

            rgb = display_to_rgb(frame, scale, on_color, off_color)
            screen.blit(pygame.surfarray.make_surface(rgb.swapaxes(0, 1)), (0, 0))

            if show_debug:
                debug_lines = [
                    f"PC: 0x{int(state.pc):03X}",
                    f"I: 0x{int(state.I):03X}",
                    f"SP: {state.stack.pointer}",
                    f"DT: {int(state.delay_timer)} ST: {int(state.sound_timer)}",
                    f"FPS: {clock.get_fps():.1f}",
                    f"Status: {'PAUSED' if paused else 'RUNNING'}",
                ]
                draw_overlay_text(screen, debug_lines, (5, 5), font, alpha=100)

            pygame.display.flip()
    finally:
        pygame.quit()
