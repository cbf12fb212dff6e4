"""Offline video export of a timeline via moviepy.

Frames are rendered on demand from virtual time: moviepy asks for frame t
(seconds) and a Stage renders the timeline at t * 1000 ms. Nothing waits
on a wall clock, so export is as fast as rendering allows and identical
for identical seeds.

Exporter states:

    idle ── export() ──▶ recording ──▶ done
                           │
                           └─▶ error   (unsupported format, encoder failure)

An unsupported format never reaches the encoder: the exporter moves to
error with a message and export() returns None. clear_error() goes back
to idle. Nothing is retried.

Encoding follows the compositor defaults: libx264, crf 20, yuv420p for
mp4/mov, libvpx-vp9 for webm. yuv420p needs even frame dimensions.
"""

import logging
from pathlib import Path

import imageio_ffmpeg
import numpy as np
from moviepy import VideoClip

from .duration import Duration, to_duration
from .stage import Stage
from .timeline import Timeline


log = logging.getLogger(__name__)


SUPPORTED_FORMATS = {
    "mp4": "libx264",
    "mov": "libx264",
    "webm": "libvpx-vp9",
}

ENCODER_PARAMS = {
    "libx264": ["-crf", "20", "-pix_fmt", "yuv420p"],
    "libvpx-vp9": ["-crf", "32", "-b:v", "0", "-pix_fmt", "yuv420p"],
}

DEFAULT_FPS = 12

IDLE = "idle"
RECORDING = "recording"
DONE = "done"
ERROR = "error"


class VideoExporter:
    """Render a timeline to a video file.

    Args:
        timeline: Timeline to record.
        size: (width, height) of the output in pixels.
        fps: Frames per second.
        seed: Random seed for the stage, so exports are reproducible.
    """

    def __init__(
        self,
        timeline: Timeline,
        size: tuple[int, int],
        fps: int = DEFAULT_FPS,
        seed: int | None = 0,
    ):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.timeline = timeline
        self.size = size
        self.fps = fps
        self.seed = seed
        self.state = IDLE
        self.error: str | None = None
        self.progress = 0.0

        self._stage: Stage | None = None
        self._last_ms = 0.0
        self._duration_ms = 0.0

    # ── Frames ───────────────────────────────────────────────────

    def _new_stage(self) -> Stage:
        stage = Stage(self.timeline, self.size, seed=self.seed)
        stage.start(0)
        return stage

    def frame_at(self, t: float) -> np.ndarray:
        """RGB frame (h, w, 3) at *t* seconds, as moviepy expects."""
        now = t * 1000
        if self._stage is None or now < self._last_ms:
            # Stages only move forward; start over to rewind.
            self._stage = self._new_stage()
        self._last_ms = now
        if self._duration_ms:
            self.progress = min(1.0, now / self._duration_ms)
        frame = self._stage.render_frame(now)
        return np.array(frame.convert("RGB"))

    def make_clip(self, duration: Duration) -> VideoClip:
        self._stage = None
        self._last_ms = 0.0
        self._duration_ms = duration.ms
        return VideoClip(frame_function=self.frame_at, duration=duration.to_seconds())

    # ── Export ───────────────────────────────────────────────────

    def _fail(self, message: str) -> None:
        self.state = ERROR
        self.error = message
        log.error("Export failed: %s", message)

    def clear_error(self) -> None:
        self.error = None
        self.state = IDLE

    def export(
        self,
        output_path,
        duration=None,
        format: str | None = None,
        quiet: bool = False,
    ) -> Path | None:
        """Record the timeline to *output_path*.

        Args:
            output_path: Destination file.
            duration: Duration (or ms) to record. Defaults to the
                timeline's total declared duration.
            format: mp4, mov or webm. Defaults to the path's suffix.
            quiet: Suppress moviepy's progress bar.

        Returns:
            The written path, or None when the exporter ended in error.
        """
        output_path = Path(output_path)
        fmt = (format or output_path.suffix.lstrip(".")).lower()
        if fmt not in SUPPORTED_FORMATS:
            self._fail(
                f"{fmt.upper() or 'Unknown'} format is not supported. "
                f"Valid: {sorted(SUPPORTED_FORMATS)}"
            )
            return None

        duration = to_duration(duration) or self.timeline.get_total_duration()
        if not duration:
            self._fail("Nothing to record: timeline has no declared duration")
            return None

        width, height = self.size
        if width % 2 or height % 2:
            self._fail(f"{fmt} output needs even dimensions, got {width}x{height}")
            return None

        codec = SUPPORTED_FORMATS[fmt]
        self.state = RECORDING
        self.error = None
        self.progress = 0.0
        log.info("Recording %s (%s, %d fps) to %s", duration, codec, self.fps, output_path)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        clip = self.make_clip(duration)
        try:
            clip.write_videofile(
                str(output_path),
                fps=self.fps,
                codec=codec,
                audio=False,
                preset="medium",
                ffmpeg_params=ENCODER_PARAMS[codec],
                logger=None if quiet else "bar",
            )
        except Exception as exc:
            self._fail(str(exc))
            raise
        finally:
            clip.close()
            self._stage = None

        self.state = DONE
        self.progress = 1.0
        return output_path


def probe_video(path) -> tuple[int, float]:
    """Count the frames and seconds of a written video with ffmpeg."""
    return imageio_ffmpeg.count_frames_and_secs(str(path))
