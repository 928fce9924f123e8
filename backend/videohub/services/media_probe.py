import io
import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from PIL import Image, UnidentifiedImageError
from videohub.core.config import settings

logger = logging.getLogger(__name__)


class MediaProbeError(Exception):
    pass


@dataclass(frozen=True)
class ImageInfo:
    format: str
    content_type: str
    width: int
    height: int


def probe_video_duration(data: bytes) -> float:
    """Get video duration in seconds using ffprobe."""
    fd, video_path = tempfile.mkstemp(suffix=".video")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        result = subprocess.run(
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                video_path,
            ],
            capture_output=True,
            text=True,
            check=True,
            timeout=settings.ffprobe_timeout,
        )
        return float(result.stdout.strip())
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, ValueError, OSError) as e:
        logger.error(f"Failed to get video duration: {e}")
        raise MediaProbeError(str(e)) from e
    finally:
        try:
            os.unlink(video_path)
        except OSError as e:
            logger.warning(f"Failed to clean up temp video file {video_path}: {e}")


def probe_image(data: bytes) -> ImageInfo:
    """Identify an uploaded thumbnail with Pillow."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
            fmt = image.format or ""
            width, height = image.size
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise MediaProbeError(f"not a readable image: {e}") from e
    return ImageInfo(
        format=fmt,
        content_type=Image.MIME.get(fmt, "application/octet-stream"),
        width=width,
        height=height,
    )
