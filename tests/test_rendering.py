"""Tests for rendering utilities."""

import numpy as np
import pytest
from PIL import Image

from chip8vm.rendering import (
    display_to_rgb, create_color_scheme, save_frame, save_video, phosphor_intensities
)


def test_display_to_rgb_orientation(fresh_state):
    display = fresh_state.display.at[5, 2].set(True)

    rgb = display_to_rgb(display, scale=1, on_color=(255, 0, 0), off_color=(0, 0, 0))

    assert rgb.shape == (32, 64, 3)
    assert tuple(rgb[2, 5]) == (255, 0, 0)
    assert tuple(rgb[5, 2]) == (0, 0, 0)


def test_display_to_rgb_scaling(fresh_state):
    rgb = display_to_rgb(fresh_state.display.at[0, 0].set(True), scale=4)

    assert rgb.shape == (128, 256, 3)
    assert np.all(rgb[:4, :4] == (0, 255, 0))
    assert np.all(rgb[4:8, :4] == 0)


def test_display_to_rgb_rejects_bad_shape():
    with pytest.raises(ValueError):
        display_to_rgb(np.zeros((32, 64), dtype=bool))


def test_unknown_color_scheme():
    with pytest.raises(ValueError):
        create_color_scheme("plasma")


def test_save_frame(fresh_state, tmp_path):
    path = tmp_path / "frame.png"

    save_frame(fresh_state.display.at[1, 1].set(True), str(path), scale=2, color_scheme="white")

    image = Image.open(path)
    assert image.size == (128, 64)
    assert image.getpixel((2, 2)) == (255, 255, 255)
    assert image.getpixel((0, 0)) == (0, 0, 0)


def test_save_video_without_frames(tmp_path):
    assert save_video([], str(tmp_path / "empty.mp4")) == 0


def test_save_video_writes_frames(fresh_state, tmp_path):
    lit = fresh_state.display.at[10:20, 5:15].set(True)
    frames = [fresh_state.display, lit, fresh_state.display]
    path = tmp_path / "out.mp4"

    written = save_video(frames, str(path), scale=2, color_scheme="amber")

    assert written == 3
    assert path.exists()
    assert path.stat().st_size > 0


def test_save_video_rejects_bad_shape(tmp_path):
    with pytest.raises(ValueError):
        save_video([np.zeros((32, 64), dtype=bool)], str(tmp_path / "bad.mp4"))


def test_phosphor_intensities_fade(fresh_state):
    lit = np.asarray(fresh_state.display.at[3, 4].set(True))
    dark = np.asarray(fresh_state.display)

    glow = phosphor_intensities(np.stack([lit, dark, dark]), decay=0.5)

    assert glow[0, 3, 4] == 1.0
    assert glow[1, 3, 4] == pytest.approx(0.5)
    assert glow[2, 3, 4] == pytest.approx(0.25)
    assert glow[:, 0, 0].max() == 0.0


def test_display_to_rgb_uses_scheme_colors(fresh_state):
    on_color, off_color = create_color_scheme("retro")

    rgb = display_to_rgb(fresh_state.display.at[0, 0].set(True), scale=1, on_color=on_color, off_color=off_color)

    assert tuple(rgb[0, 0]) == (255, 255, 0)
    assert tuple(rgb[0, 1]) == (64, 0, 64)
