import subprocess
from unittest.mock import MagicMock, patch
import pytest
from videohub.services.media_probe import MediaProbeError, probe_image, probe_video_duration


@patch("videohub.services.media_probe.subprocess.run")
def test_probe_video_duration(mock_run):
    mock_result = MagicMock()
    mock_result.stdout = "10.5\n"  # 10.5 seconds duration
    mock_result.returncode = 0
    mock_run.return_value = mock_result

    assert probe_video_duration(b"fake video") == 10.5
    command = mock_run.call_args.args[0]
    assert command[0] == "ffprobe"
    assert "timeout" in mock_run.call_args.kwargs


@pytest.mark.parametrize(
    "error",
    [
        subprocess.CalledProcessError(1, "ffprobe", stderr="Invalid data found"),
        subprocess.TimeoutExpired("ffprobe", 20),
        FileNotFoundError("ffprobe"),
    ],
)
@patch("videohub.services.media_probe.subprocess.run")
def test_probe_video_duration_failures(mock_run, error):
    mock_run.side_effect = error
    with pytest.raises(MediaProbeError):
        probe_video_duration(b"fake video")


@patch("videohub.services.media_probe.subprocess.run")
def test_probe_video_duration_unparseable(mock_run):
    mock_run.return_value = MagicMock(stdout="N/A\n", returncode=0)
    with pytest.raises(MediaProbeError):
        probe_video_duration(b"fake video")


def test_probe_image(png_bytes):
    info = probe_image(png_bytes)
    assert info.format == "PNG"
    assert info.content_type == "image/png"
    assert (info.width, info.height) == (16, 9)


def test_probe_image_rejects_garbage():
    with pytest.raises(MediaProbeError):
        probe_image(b"definitely not an image")
