import sys
import types
from unittest import mock

import numpy as np
import pytest
from click.testing import CliRunner

from fret_recall.cli.main import _open_microphone, main
from fret_recall.core.config import ConfigManager

SAMPLE_RATE = 44100


def test_scales_command(tmp_path):
    result = CliRunner().invoke(main, ["--config-dir", str(tmp_path), "scales"])
    assert result.exit_code == 0
    assert "All notes" in result.output
    assert "Bb major" in result.output
    assert "A# C D D# F G A" in result.output


def test_open_microphone_leaves_device_search_to_input(tmp_path):
    created = []

    class RecordingInput:
        def __init__(self, **kwargs):
            created.append(kwargs)

    # Stand-in capture module so the test runs without PortAudio
    fake = types.ModuleType("fret_recall.audio.audio_input")
    fake.SoundDeviceInput = RecordingInput
    fake.find_input_device = mock.Mock(side_effect=AssertionError("searched twice"))

    obj = {"config_manager": ConfigManager(str(tmp_path))}
    with mock.patch.dict(sys.modules, {"fret_recall.audio.audio_input": fake}):
        _open_microphone(obj, None, None, None)
        _open_microphone(obj, 3, None, 1024)

    fake.find_input_device.assert_not_called()
    assert created[0]["device_id"] is None
    assert created[0]["sample_rate"] == 44100
    assert created[1]["device_id"] == 3
    assert created[1]["frames_per_buffer"] == 1024


def test_analyze_confirms_target(tmp_path):
    sf = pytest.importorskip("soundfile")
    pytest.importorskip("aubio")

    t = np.arange(SAMPLE_RATE, dtype=np.float32) / SAMPLE_RATE
    wav = tmp_path / "a2.wav"
    sf.write(str(wav), (0.3 * np.sin(2 * np.pi * 110.0 * t)).astype(np.float32), SAMPLE_RATE)

    result = CliRunner().invoke(
        main,
        ["--config-dir", str(tmp_path / "config"), "analyze", str(wav), "--target", "A"],
    )
    assert result.exit_code == 0, result.output
    assert "A2" in result.output
    assert "fret 5" in result.output
    assert "Target A confirmed" in result.output


def test_analyze_rejects_bad_target(tmp_path):
    sf = pytest.importorskip("soundfile")
    pytest.importorskip("aubio")

    wav = tmp_path / "silence.wav"
    sf.write(str(wav), np.zeros(4096, dtype=np.float32), SAMPLE_RATE)

    result = CliRunner().invoke(
        main,
        ["--config-dir", str(tmp_path / "config"), "analyze", str(wav), "--target", "H"],
    )
    assert result.exit_code != 0
    assert "Unknown note name" in result.output
