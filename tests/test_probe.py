"""Tests for ffprobe metadata parsing."""

import json
import stat
import subprocess
import sys
from unittest.mock import patch

import pytest

from asciiplay.errors import MetadataError
from asciiplay.streams.probe import (
    VideoInfo,
    parse_frame_rate,
    parse_probe_output,
    probe_video,
)


def probe_json(**stream) -> str:
    return json.dumps({"streams": [stream]})


def completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseFrameRate:
    """Tests for parse_frame_rate."""

    def test_ntsc_rational(self):
        """Test a non-integer rational rate."""
        assert parse_frame_rate("30000/1001") == pytest.approx(29.97, abs=0.001)

    def test_integer_rational(self):
        """Test a whole rate in rational form."""
        assert parse_frame_rate("25/1") == 25.0

    def test_plain_number(self):
        """Test a rate without a denominator."""
        assert parse_frame_rate("24") == 24.0

    @pytest.mark.parametrize("rate", ["0/0", "0/1", "-25/1", "abc", "", "25/x"])
    def test_invalid(self, rate):
        """Test malformed or non-positive rates are rejected."""
        with pytest.raises(MetadataError):
            parse_frame_rate(rate)


class TestParseProbeOutput:
    """Tests for parse_probe_output."""

    def test_valid(self):
        """Test a complete stream entry."""
        info = parse_probe_output(probe_json(width=1920, height=1080, r_frame_rate="30/1"))
        assert info == VideoInfo(1920, 1080, 30.0)
        assert info.aspect_ratio == pytest.approx(16 / 9)
        assert info.frame_interval == pytest.approx(1 / 30)

    def test_no_streams(self):
        """Test a file without a video stream."""
        with pytest.raises(MetadataError, match="No usable video stream"):
            parse_probe_output(json.dumps({"streams": []}))

    def test_missing_field(self):
        """Test a stream entry without a height."""
        with pytest.raises(MetadataError):
            parse_probe_output(probe_json(width=640, r_frame_rate="25/1"))

    def test_not_json(self):
        """Test garbage output."""
        with pytest.raises(MetadataError, match="Failed to parse"):
            parse_probe_output("not json")

    def test_zero_size(self):
        """Test a degenerate stream size."""
        with pytest.raises(MetadataError):
            parse_probe_output(probe_json(width=0, height=480, r_frame_rate="25/1"))


class TestProbeVideo:
    """Tests for probe_video."""

    def test_command(self):
        """Test ffprobe is asked for the first video stream as JSON."""
        output = probe_json(width=640, height=360, r_frame_rate="25/1")
        with patch("asciiplay.streams.probe.subprocess.run", return_value=completed(output)) as run:
            info = probe_video("clip.mp4", ffprobe="/opt/ffprobe")

        assert info == VideoInfo(640, 360, 25.0)
        cmd = run.call_args[0][0]
        assert cmd[0] == "/opt/ffprobe"
        assert cmd[-1] == "clip.mp4"
        assert "v:0" in cmd
        assert "stream=width,height,r_frame_rate" in cmd
        assert cmd[cmd.index("-of") + 1] == "json"

    def test_missing_executable(self):
        """Test a missing ffprobe becomes a MetadataError."""
        with patch(
            "asciiplay.streams.probe.subprocess.run",
            side_effect=FileNotFoundError("No such file or directory: 'ffprobe'"),
        ):
            with pytest.raises(MetadataError, match="Failed to run ffprobe"):
                probe_video("clip.mp4")

    def test_non_zero_exit(self):
        """Test ffprobe failures include its last error line."""
        result = completed(stderr="first\nclip.mp4: Invalid data found\n", returncode=1)
        with patch("asciiplay.streams.probe.subprocess.run", return_value=result):
            with pytest.raises(MetadataError) as exc_info:
                probe_video("clip.mp4")
        assert str(exc_info.value) == "Failed to get video info: clip.mp4: Invalid data found"

    def test_non_zero_exit_without_output(self):
        """Test a silent ffprobe failure."""
        with patch("asciiplay.streams.probe.subprocess.run", return_value=completed(returncode=1)):
            with pytest.raises(MetadataError, match="^Failed to get video info$"):
                probe_video("clip.mp4")

    @pytest.mark.skipif(sys.platform == "win32", reason="Uses a /bin/sh script")
    def test_undecodable_error_output(self, tmp_path):
        """Test non-UTF-8 bytes on ffprobe's stderr still yield a MetadataError."""
        script = tmp_path / "fake-ffprobe"
        script.write_text("#!/bin/sh\nprintf '\\377\\376 bad file: Invalid data\\n' >&2\nexit 1\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR)

        with pytest.raises(MetadataError) as exc_info:
            probe_video(tmp_path / "clip.mp4", ffprobe=str(script))

        message = str(exc_info.value)
        assert message.startswith("Failed to get video info: ")
        assert message.endswith("bad file: Invalid data")
        assert "\ufffd" in message
