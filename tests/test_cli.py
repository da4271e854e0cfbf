"""Tests for the command-line entry point."""

import pytest

from chip8vm.cli import main, build_parser


@pytest.fixture
def rom(tmp_path):
    path = tmp_path / "loop.ch8"
    path.write_bytes(bytes([0xA0, 0x50, 0xD0, 0x05, 0x12, 0x04]))
    return path


def test_parser_defaults(rom):
    args = build_parser().parse_args([str(rom)])
    assert args.freq == 700
    assert not args.legacy_shift
    assert not args.headless


def test_missing_rom_is_rejected(tmp_path):
    with pytest.raises(SystemExit):
        build_parser().parse_args([str(tmp_path / "nope.ch8")])


def test_non_positive_frequency_is_rejected(rom):
    with pytest.raises(SystemExit):
        build_parser().parse_args([str(rom), "0"])


def test_disassemble(rom, capsys):
    assert main([str(rom), "--disassemble"]) == 0
    out = capsys.readouterr().out
    assert "0x200  A050  LD I, 0x050" in out
    assert "0x202  D005  DRW V0, V0, 5" in out
    assert "0x204  1204  JP 0x204" in out


def test_headless_screenshot(rom, tmp_path):
    shot = tmp_path / "shot.png"
    assert main([str(rom), "--headless", "--cycles", "5", "--screenshot", str(shot)]) == 0
    assert shot.exists()


def test_headless_fault_exit_code(tmp_path):
    path = tmp_path / "bad.ch8"
    path.write_bytes(bytes([0xFF, 0xFF]))
    assert main([str(path), "--headless", "--cycles", "3"]) == 1


def test_oversized_rom_exit_code(tmp_path):
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(4000))
    assert main([str(path), "--headless", "--cycles", "1"]) == 1


def test_headless_video(rom, tmp_path):
    video = tmp_path / "run.mp4"
    assert main([str(rom), "--headless", "--cycles", "6", "--video", str(video)]) == 0
    assert video.exists()
    assert video.stat().st_size > 0
