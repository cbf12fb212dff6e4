#!/usr/bin/env python3
"""Build a two-scene timeline in code and render it.

Scene 1 slides a labeled box in, casts a shadow behind a triangle, then
fades both out. Scene 2 lays out circles on a grid with hand-lettered
text. The timeline loops, so the default render covers one pass.

Usage:
    python examples/demo_timeline.py
    python examples/demo_timeline.py --output /tmp/demo.webm --seed 3
    # Single frame instead of a video:
    python examples/demo_timeline.py --still 1.2 --output /tmp/frame.png
"""

import argparse
from pathlib import Path

from roughcut.animate import fade_in, fade_out, slide_from
from roughcut.duration import Duration
from roughcut.export import VideoExporter
from roughcut.stage import Stage
from roughcut.styles import LabelSpec, ShadowSpec
from roughcut.timeline import Timeline

OUTPUT_DIR = Path(__file__).resolve().parent / "demo-renders"
SIZE = (400, 400)
FPS = 12

BLUE = "#3b82f6"
PINK = "#e04c77"
INK = "#f4f4f5"


async def boxes(api):
    box = api.rect(
        80, 120, 100, 100,
        stroke=BLUE, stroke_width=2, fill=BLUE,
        label=LabelSpec("DB", font_size=20, color=INK),
        animate_in=fade_in(600).slide_from("left", 150, 700),
        animate_out=fade_out(500),
    )
    await api.wait(Duration.seconds(0.8))
    tri = api.triangle(
        240, 140, 90,
        stroke=PINK, fill=PINK, fill_style="cross_hatch",
        shadow=ShadowSpec.cast(),
        animate_in=fade_in(400),
    )
    await api.wait(Duration.seconds(1.2))
    # Start both exits together, then wait for the slower one.
    box.remove()
    await tri.remove(fade_out(300).slide_to("bottom", 40, 300))


async def grid(api):
    cells = api.canvas.grid(3, 2)
    for row in range(2):
        for col in range(3):
            cell = cells.cell(col, row)
            api.circle(
                cell.center, cell.width / 4,
                stroke=INK, fill=BLUE if (row + col) % 2 else PINK,
                shadow=ShadowSpec.drop(blur=6),
                animate_in=slide_from("top", 30, 400).fade_in(400),
            )
            await api.wait(150)
    api.sketchy_text(
        "roughcut", api.canvas.pos.bottom(api.canvas.center_x).offset(0, -24),
        font_size=36, color=INK, text_align="center",
    )


def build_timeline() -> Timeline:
    return (
        Timeline()
        .add_scene("boxes", Duration.seconds(3.5), boxes)
        .add_scene("grid", Duration.seconds(2.5), grid, "#18181b")
        .loop(True)
    )


def main():
    parser = argparse.ArgumentParser(description="Render the roughcut demo timeline.")
    parser.add_argument("--output", default=None, help="Output path (.mp4/.mov/.webm, or .png with --still)")
    parser.add_argument("--still", type=float, default=None, help="Render one frame at this time (seconds)")
    parser.add_argument("--seed", type=int, default=7)
    args = parser.parse_args()

    timeline = build_timeline()
    if args.still is not None:
        out = Path(args.output or OUTPUT_DIR / "demo-frame.png")
        out.parent.mkdir(parents=True, exist_ok=True)
        Stage(timeline, SIZE, seed=args.seed).render_frame(args.still * 1000).save(out)
        print(f"  Created {out}")
        return

    out = Path(args.output or OUTPUT_DIR / "demo.mp4")
    exporter = VideoExporter(timeline, SIZE, fps=FPS, seed=args.seed)
    if exporter.export(out) is None:
        raise SystemExit(f"Export failed: {exporter.error}")
    print(f"\nDone. Render saved to {out}")


if __name__ == "__main__":
    main()
