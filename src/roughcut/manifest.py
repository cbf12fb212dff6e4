"""Manifest loader for scripted timelines.

A manifest declares a whole animation in YAML: video settings, a color
palette, and scenes made of steps. Each scene becomes a choreography
routine that plays its steps in order.

Schema:

    video:
      resolution: [400, 400]     # or a preset name, e.g. youtube_video
      fps: 12
      background: "#3f3f46"      # default scene background
      seed: 7                    # optional, for reproducible jitter
    loop: true
    colors:
      blue: "#3b82f6"
    scenes:
      - name: intro
        duration: 3.0            # seconds; omit for an open-ended scene
        background: white
        steps:
          - add: {type: rect, id: box, x: 80, y: 120, width: 100, height: 100,
                  stroke: blue, label: {text: DB},
                  animate_in: [{fade: 0.6}]}
          - wait: 1.0
          - remove: box
            animate_out: [{fade: 0.5}]
            await: true          # block until the exit finishes
          - clear: true

Step kinds: add (a shape dict plus an optional `id` used by later removes),
wait (seconds), remove (an id), clear. Color fields (stroke, fill, color,
label.color, shadow.color) may name palette entries.

All durations in a manifest are seconds.
"""

from pathlib import Path

import yaml

from .animate import to_animation_spec
from .canvas import PRESETS
from .common import parse_color, resolve_color
from .duration import Duration
from .shapes import descriptor_from_dict
from .timeline import DEFAULT_BACKGROUND, Timeline


# ── Valid values ────────────────────────────────────────────────────

VALID_STEP_KINDS = {"add", "wait", "remove", "clear"}

SHAPE_COLOR_KEYS = ("stroke", "fill", "color")

DEFAULT_FPS = 12

DEFAULT_RESOLUTION = (400, 400)


# ── Manifest loading ──────────────────────────────────────────────


def load_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a timeline manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Parse video.resolution (pair or preset) and video.background.
      3. Parse the colors palette to RGBA tuples.
      4. Validate every scene and step, resolving palette references and
         building shape descriptors and animation specs.

    Args:
        manifest_path: Path to the YAML manifest file.

    Returns:
        Normalized config dict ready for build_timeline().

    Raises:
        ValueError: Invalid field, unknown color, bad step.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Manifest {manifest_path}: expected a mapping at top level")

    config = {}

    colors = {}
    for key, value in (raw.get("colors") or {}).items():
        try:
            colors[key] = parse_color(value)
        except ValueError as exc:
            raise ValueError(f"colors.{key}: {exc}") from None
    config["colors"] = colors

    config["video"] = _parse_video(raw.get("video") or {}, colors)

    loop = raw.get("loop", True)
    if not isinstance(loop, bool):
        raise ValueError(f"'loop' must be true or false, got {loop!r}")
    config["loop"] = loop

    scenes = raw.get("scenes")
    if not isinstance(scenes, list) or not scenes:
        raise ValueError("'scenes' must be a non-empty list")
    default_bg = config["video"]["background"]
    config["scenes"] = [
        _parse_scene(scene, i, colors, default_bg) for i, scene in enumerate(scenes)
    ]

    return config


def _parse_video(video: dict, colors: dict) -> dict:
    resolution = video.get("resolution", DEFAULT_RESOLUTION)
    if isinstance(resolution, str):
        if resolution not in PRESETS:
            raise ValueError(
                f"video.resolution: unknown preset '{resolution}'. Valid: {sorted(PRESETS)}"
            )
        resolution = PRESETS[resolution]
    if (
        not isinstance(resolution, (list, tuple))
        or len(resolution) != 2
        or not all(isinstance(v, int) and v > 0 for v in resolution)
    ):
        raise ValueError(
            f"video.resolution must be [width, height] in pixels, got {resolution!r}"
        )

    fps = video.get("fps", DEFAULT_FPS)
    if isinstance(fps, bool) or not isinstance(fps, int) or fps <= 0:
        raise ValueError(f"video.fps must be a positive integer, got {fps!r}")

    seed = video.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError(f"video.seed must be an integer, got {seed!r}")

    background = _color(video.get("background", DEFAULT_BACKGROUND), colors, "video.background")
    return {
        "resolution": tuple(resolution),
        "fps": fps,
        "background": background,
        "seed": seed,
    }


def _color(value, colors: dict, where: str):
    try:
        return resolve_color(value, colors)
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from None


def _seconds(value, where: str, allow_zero: bool = True) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: expected seconds as a number, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        raise ValueError(f"{where}: must be {'>=' if allow_zero else '>'} 0, got {value!r}")
    return float(value)


# ── Scenes and steps ──────────────────────────────────────────────


def _parse_scene(scene, index: int, colors: dict, default_bg) -> dict:
    if not isinstance(scene, dict):
        raise ValueError(f"Scene {index}: expected a mapping, got {scene!r}")
    name = scene.get("name")
    prefix = f"Scene {index} ({name})" if name else f"Scene {index}"

    duration = scene.get("duration")
    if duration is not None:
        duration = Duration.seconds(_seconds(duration, f"{prefix}: duration", allow_zero=False))

    background = default_bg
    if "background" in scene:
        background = _color(scene["background"], colors, f"{prefix}: background")

    steps = scene.get("steps") or []
    if not isinstance(steps, list):
        raise ValueError(f"{prefix}: 'steps' must be a list")

    live_ids: set[str] = set()
    parsed = [
        _parse_step(step, f"{prefix}, step {j}", colors, live_ids)
        for j, step in enumerate(steps)
    ]
    return {
        "name": name,
        "duration": duration,
        "background": background,
        "steps": parsed,
    }


def _parse_step(step, prefix: str, colors: dict, live_ids: set) -> dict:
    if not isinstance(step, dict):
        raise ValueError(f"{prefix}: expected a mapping, got {step!r}")
    kinds = VALID_STEP_KINDS & set(step)
    if len(kinds) != 1:
        raise ValueError(
            f"{prefix}: a step needs exactly one of {sorted(VALID_STEP_KINDS)}, "
            f"got {sorted(step)}"
        )
    kind = kinds.pop()

    if kind == "add":
        return _parse_add(step["add"], prefix, colors, live_ids)

    if kind == "wait":
        return {"kind": "wait", "seconds": _seconds(step["wait"], f"{prefix}: wait")}

    if kind == "remove":
        shape_id = step["remove"]
        if not isinstance(shape_id, str) or shape_id not in live_ids:
            raise ValueError(f"{prefix}: remove '{shape_id}' does not name a shape added earlier")
        live_ids.discard(shape_id)
        try:
            animate_out = to_animation_spec(step.get("animate_out"))
        except ValueError as exc:
            raise ValueError(f"{prefix}: animate_out: {exc}") from None
        block = step.get("await", False)
        if not isinstance(block, bool):
            raise ValueError(f"{prefix}: 'await' must be true or false")
        return {"kind": "remove", "id": shape_id, "animate_out": animate_out, "await": block}

    live_ids.clear()
    return {"kind": "clear"}


def _parse_add(shape, prefix: str, colors: dict, live_ids: set) -> dict:
    if not isinstance(shape, dict):
        raise ValueError(f"{prefix}: 'add' must be a shape mapping")
    fields = dict(shape)
    shape_id = fields.pop("id", None)
    if shape_id is not None:
        if not isinstance(shape_id, str):
            raise ValueError(f"{prefix}: shape id must be a string, got {shape_id!r}")
        if shape_id in live_ids:
            raise ValueError(f"{prefix}: shape id '{shape_id}' is already on stage")
        live_ids.add(shape_id)

    for key in SHAPE_COLOR_KEYS:
        if key in fields and fields[key] != "none":
            fields[key] = _color(fields[key], colors, f"{prefix}: {key}")
    for key in ("label", "shadow"):
        nested = fields.get(key)
        if isinstance(nested, dict) and "color" in nested:
            fields[key] = {**nested, "color": _color(nested["color"], colors, f"{prefix}: {key}.color")}
    if "points" in fields:
        fields["points"] = [tuple(p) for p in fields["points"]]

    try:
        descriptor = descriptor_from_dict(fields)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{prefix}: {exc}") from None
    return {"kind": "add", "id": shape_id, "descriptor": descriptor}


# ── Timeline building ─────────────────────────────────────────────


def scripted_routine(steps: list[dict]):
    """Choreography routine that plays parsed manifest steps in order."""

    async def routine(api):
        handles = {}
        for step in steps:
            kind = step["kind"]
            if kind == "add":
                handle = api.add_shape(step["descriptor"])
                if step["id"] is not None:
                    handles[step["id"]] = handle
            elif kind == "wait":
                await api.wait(Duration.seconds(step["seconds"]))
            elif kind == "remove":
                completion = handles.pop(step["id"]).remove(step["animate_out"])
                if step["await"]:
                    await completion
            elif kind == "clear":
                api.clear_shapes()
                handles.clear()

    return routine


def build_timeline(config: dict) -> Timeline:
    """Turn a loaded manifest config into a Timeline."""
    timeline = Timeline().loop(config["loop"])
    for scene in config["scenes"]:
        timeline.add_scene(
            name=scene["name"],
            duration=scene["duration"],
            routine=scripted_routine(scene["steps"]),
            background_color=scene["background"],
        )
    return timeline


def load_timeline(manifest_path: str | Path) -> tuple[dict, Timeline]:
    """Load a manifest and build its timeline in one go."""
    config = load_manifest(manifest_path)
    return config, build_timeline(config)
