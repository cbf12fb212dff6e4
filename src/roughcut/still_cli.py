"""CLI for rendering still frames of a timeline manifest.

Useful for checking layout without encoding a video.

Usage:
    # One frame
    roughcut still --manifest demo.yaml --at 1.5 --output /tmp/frame.png

    # Several frames into a directory (frame-001500ms.png, ...)
    roughcut still --manifest demo.yaml --at 0.5 --at 1.5 --at 4 --output-dir /tmp/frames/
"""

import argparse
from pathlib import Path

from .cli import setup_logging
from .manifest import build_timeline, load_manifest
from .stage import Stage


def frame_filename(ms: float) -> str:
    return f"frame-{round(ms):07d}ms.png"


def render_stills(manifest_path: str, times: list[float], seed: int | None = None) -> list:
    """Render frames at the given times (seconds), in time order.

    Returns:
        List of (ms, PIL image) pairs sorted by time.
    """
    config = load_manifest(manifest_path)
    stage = Stage(
        build_timeline(config),
        config["video"]["resolution"],
        seed=seed if seed is not None else config["video"]["seed"],
    )
    frames = []
    for ms in sorted(t * 1000 for t in times):
        frames.append((ms, stage.render_frame(ms)))
    return frames


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render still frames of a timeline manifest.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML manifest file",
    )
    parser.add_argument(
        "--at", type=float, action="append", required=True,
        help="Timestamp in seconds (repeatable)",
    )
    parser.add_argument(
        "--output", default=None,
        help="Output PNG path (single --at only)",
    )
    parser.add_argument(
        "--output-dir", default=None,
        help="Output directory for one PNG per --at",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Override video.seed (stroke jitter)",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log scene transitions and shape lifecycle",
    )
    parsed = parser.parse_args(args)
    setup_logging(parsed.verbose)

    if any(t < 0 for t in parsed.at):
        parser.error("--at must be >= 0")
    if (parsed.output is None) == (parsed.output_dir is None):
        parser.error("Exactly one of --output or --output-dir is required")
    if parsed.output is not None and len(parsed.at) != 1:
        parser.error("--output takes a single --at; use --output-dir for several")

    frames = render_stills(parsed.manifest, parsed.at, seed=parsed.seed)

    if parsed.output is not None:
        ms, image = frames[0]
        Path(parsed.output).parent.mkdir(parents=True, exist_ok=True)
        image.save(parsed.output)
        print(f"Done: {parsed.output} ({ms / 1000:.2f}s)")
        return

    out_dir = Path(parsed.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    for ms, image in frames:
        path = out_dir / frame_filename(ms)
        image.save(path)
        print(f"  {ms / 1000:6.2f}s  {path}")
    print(f"\nDone: {len(frames)} frames in {out_dir}/")


if __name__ == "__main__":
    main()
