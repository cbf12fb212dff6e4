"""CLI for rendering a timeline manifest to video.

Reads a YAML manifest, builds the timeline, and records it with the
video exporter (mp4, mov or webm, picked from the output suffix).

Usage:
    # Render the whole timeline (sum of scene durations)
    roughcut render --manifest demo.yaml --output /tmp/demo.mp4

    # Render a fixed length, e.g. two passes of a looping timeline
    roughcut render --manifest demo.yaml --output /tmp/demo.webm --duration 10

    # Validate only (no rendering)
    roughcut render --manifest demo.yaml --validate
    roughcut validate --manifest demo.yaml
"""

import argparse
import logging
import sys
import time

from .duration import Duration
from .export import VideoExporter, probe_video
from .manifest import build_timeline, load_manifest


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def describe_manifest(config: dict) -> None:
    """Print a one-line summary per scene."""
    w, h = config["video"]["resolution"]
    loop = "looping" if config["loop"] else "once"
    print(f"Manifest valid: {len(config['scenes'])} scenes, {w}x{h}, "
          f"{config['video']['fps']}fps, {loop}")
    for i, scene in enumerate(config["scenes"]):
        name = scene["name"] or "(unnamed)"
        duration = scene["duration"]
        length = f"{duration.to_seconds():.1f}s" if duration else "open-ended"
        print(f"  {i}: {name} — {length}, {len(scene['steps'])} steps")


# ── Main render ─────────────────────────────────────────────────────


def render(
    manifest_path: str,
    output_path: str,
    duration: float | None = None,
    fmt: str | None = None,
    fps: int | None = None,
    seed: int | None = None,
    quiet: bool = False,
) -> bool:
    """Load a manifest and record its timeline.

    Args:
        manifest_path: Path to YAML manifest.
        output_path: Output video path.
        duration: Seconds to record. Defaults to the timeline's total.
        fmt: Container format; defaults to the output suffix.
        fps: Override video.fps from the manifest.
        seed: Override video.seed from the manifest.
        quiet: Suppress moviepy's progress bar.

    Returns:
        True when the video was written.
    """
    config = load_manifest(manifest_path)
    timeline = build_timeline(config)
    video = config["video"]
    resolution = video["resolution"]
    fps = fps or video["fps"]
    seed = seed if seed is not None else video["seed"]

    length = Duration.seconds(duration) if duration is not None else timeline.get_total_duration()
    print(f"Rendering {timeline.get_scene_count()} scenes, {length.to_seconds():.1f}s")
    print(f"Resolution: {resolution[0]}x{resolution[1]}, {fps}fps")
    print(f"Writing to: {output_path}")

    t0 = time.monotonic()
    exporter = VideoExporter(timeline, resolution, fps=fps, seed=seed if seed is not None else 0)
    written = exporter.export(output_path, duration=length, format=fmt, quiet=quiet)
    if written is None:
        print(f"\nError: {exporter.error}")
        return False
    frames, seconds = probe_video(written)
    print(f"\nDone: {written} ({frames} frames, {seconds:.1f}s video, "
          f"{time.monotonic() - t0:.1f}s wall)")
    return True


# ── CLI entry point ───────────────────────────────────────────────


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render a timeline manifest to video.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML manifest file",
    )
    parser.add_argument(
        "--output",
        help="Output video path (.mp4, .mov or .webm)",
    )
    parser.add_argument(
        "--duration", type=float, default=None,
        help="Seconds to record (default: sum of scene durations)",
    )
    parser.add_argument(
        "--format", default=None, choices=["mp4", "mov", "webm"],
        help="Container format (default: from --output suffix)",
    )
    parser.add_argument(
        "--fps", type=int, default=None,
        help="Override video.fps",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Override video.seed (stroke jitter)",
    )
    parser.add_argument(
        "--quiet", action="store_true",
        help="Hide the encoder progress bar",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log scene transitions and shape lifecycle",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only, don't render",
    )
    args = parser.parse_args(args)
    setup_logging(args.verbose)

    if args.validate:
        describe_manifest(load_manifest(args.manifest))
        return

    if not args.output:
        parser.error("--output is required (unless using --validate)")

    ok = render(
        args.manifest, args.output,
        duration=args.duration,
        fmt=args.format,
        fps=args.fps,
        seed=args.seed,
        quiet=args.quiet,
    )
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
