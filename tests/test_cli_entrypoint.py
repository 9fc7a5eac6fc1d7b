from __future__ import annotations

import json
import runpy

import pytest
from typer.testing import CliRunner

from pcm_extract import cli
from pcm_extract.io.audio_file import read_waveform

runner = CliRunner()


def test_decode_command_writes_json_output(stereo_wav, tmp_path) -> None:
    output = tmp_path / "out" / "waveform.json"

    result = runner.invoke(cli.app, ["decode", str(stereo_wav["path"]), "--sample-rate", "16000", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert "Decoded 1600 samples at 16000 Hz" in result.output
    assert len(json.loads(output.read_text())) == 1_600


def test_decode_command_writes_wav_with_linear_mode(stereo_wav, tmp_path) -> None:
    output = tmp_path / "waveform.wav"

    result = runner.invoke(
        cli.app,
        ["decode", str(stereo_wav["path"]), "-r", "8000", "--resample-mode", "LINEAR", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    audio, sample_rate = read_waveform(output)
    assert sample_rate == 8_000
    assert audio.shape == (800,)


def test_decode_command_reports_missing_file(tmp_path) -> None:
    result = runner.invoke(cli.app, ["decode", str(tmp_path / "missing.m4a")])

    assert result.exit_code == 1
    assert "[file_not_found]" in result.output


def test_decode_command_reads_settings_file(stereo_wav, tmp_path) -> None:
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"target_sample_rate_hz": 8000}))

    result = runner.invoke(cli.app, ["decode", str(stereo_wav["path"]), "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "Decoded 800 samples at 8000 Hz" in result.output


def test_streams_command_lists_streams(stereo_wav) -> None:
    result = runner.invoke(cli.app, ["streams", str(stereo_wav["path"])])

    assert result.exit_code == 0, result.output
    assert "#0 audio pcm_s16le" in result.output
    assert "Selected audio stream #0: pcm_s16le, 32000 Hz, 2 ch" in result.output


def test_module_entrypoint_calls_cli_main(monkeypatch):
    called = {"value": False}

    def fake_main():
        called["value"] = True

    monkeypatch.setattr(cli, "main", fake_main)

    with pytest.raises(SystemExit) as exc_info:
        runpy.run_module("pcm_extract.__main__", run_name="__main__")

    assert called["value"]
    assert exc_info.value.code == 0
