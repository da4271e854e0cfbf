"""CHIP-8 rendering utilities for visualization.

Displays are ``(64, 32)`` boolean arrays indexed ``[x, y]``. Everything here
converts them to row-major RGB images, either one at a time (host window,
PNG screenshots) or as a sequence written to an MP4.
"""
from typing import Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT

Color = Tuple[int, int, int]

# name -> (on, off)
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}

PERSISTENCE_DECAY = 0.8


def _as_displays(displays, batched: bool) -> np.ndarray:
    """Validate one display (or a stack of them) and return it as numpy bools."""
    pixels = np.asarray(displays, dtype=np.bool_)
    expected = (SCREEN_WIDTH, SCREEN_HEIGHT)
    if pixels.shape[-2:] != expected or pixels.ndim != (3 if batched else 2):
        prefix = "(N, " if batched else "("
        raise ValueError(f"Expected display shape {prefix}{SCREEN_WIDTH}, {SCREEN_HEIGHT}), got {pixels.shape}")
    return pixels


def _colorize(intensity: np.ndarray, on_color: Color, off_color: Color, scale: int) -> np.ndarray:
    """Blend ``off_color`` towards ``on_color`` by a (64, 32) intensity in [0, 1].

    Returns an upscaled ``(32 * scale, 64 * scale, 3)`` uint8 image.
    """
    on = np.asarray(on_color, dtype=np.float32)
    off = np.asarray(off_color, dtype=np.float32)
    # [x, y] -> image rows first
    weights = intensity.T[..., None].astype(np.float32)
    image = np.rint(off + weights * (on - off)).astype(np.uint8)

    if scale > 1:
        image = np.repeat(np.repeat(image, scale, axis=0), scale, axis=1)
    return image


def display_to_rgb(
    display,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Convert a CHIP-8 display to an RGB image with nearest-neighbour upscaling.

    Args:
        display: Boolean array of shape (64, 32), indexed [x, y]
        scale: Upscaling factor (default: 8x)
        on_color: RGB color for lit pixels
        off_color: RGB color for unlit pixels

    Returns:
        uint8 array of shape (32 * scale, 64 * scale, 3)
    """
    return _colorize(_as_displays(display, batched=False), on_color, off_color, scale)


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up an ``(on_color, off_color)`` pair by name."""
    if scheme not in COLOR_SCHEMES:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES.keys())}"
        )
    return COLOR_SCHEMES[scheme]


def save_frame(display, filename: str, scale: int = 8, color_scheme: str = "classic") -> None:
    """Write a single display frame to an image file (format from extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    Image.fromarray(display_to_rgb(display, scale, on_color, off_color)).save(filename)


def phosphor_intensities(displays: np.ndarray, decay: float = PERSISTENCE_DECAY) -> np.ndarray:
    """Simulate phosphor afterglow over a stack of displays.

    Each lit pixel is at full intensity; an unlit one keeps ``decay`` times
    its previous intensity, so erased sprites fade out over a few frames.
    """
    glow = np.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=np.float32)
    intensities = np.empty(displays.shape, dtype=np.float32)
    for i, display in enumerate(displays):
        glow = np.maximum(glow * decay, display.astype(np.float32))
        intensities[i] = glow
    return intensities


def save_video(
        frames: Sequence,
        filename: str,
        fps: float = 60.0,
        scale: int = 8,
        color_scheme: str = "classic",
        persistence: bool = True,
) -> int:
    """Save a sequence of display frames as an MP4 with optional phosphor persistence.

    Args:
        frames: Sequence of (64, 32) boolean displays, oldest first
        filename: Output MP4 path
        fps: Video frame rate
        scale: Upscaling factor
        color_scheme: Color scheme for rendering
        persistence: Fade erased pixels out instead of dropping them at once

    Returns:
        Number of frames written
    """
    if len(frames) == 0:
        return 0
    displays = _as_displays(frames, batched=True)
    on_color, off_color = create_color_scheme(color_scheme)
    intensities = phosphor_intensities(displays) if persistence else displays

    fourcc = cv2.VideoWriter_fourcc(*'mp4v')
    writer = cv2.VideoWriter(filename, fourcc, fps, (SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    if not writer.isOpened():
        raise OSError(f"Cannot open video writer for {filename}")

    try:
        for intensity in intensities:
            frame = _colorize(intensity, on_color, off_color, scale)
            writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))
    finally:
        writer.release()

    return len(displays)
