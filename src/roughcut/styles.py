"""Shadow and label styles attached to shapes.

Two shadow kinds:
  - drop: blurred ambient shadow painted under the shape's own geometry.
  - cast: solid silhouette offset from the shape and joined to it by
    extrusion polygons (retro poster look). No blur.

Labels are text painted on top of a shape, anchored by shape type (see
render.label_position).

Both are immutable. Callers may pass the spec objects or plain dicts
(manifest form); to_shadow_spec / to_label_spec normalize at the boundary.
"""

from dataclasses import dataclass, replace


VALID_SHADOW_KINDS = {"drop", "cast"}

VALID_LABEL_ALIGNS = {"middle", "top", "bottom"}


@dataclass(frozen=True)
class ShadowSpec:
    kind: str = "drop"
    color: object = "rgba(0, 0, 0, 0.3)"
    offset_x: float = 5
    offset_y: float = 5
    blur: float = 0

    def __post_init__(self):
        if self.kind not in VALID_SHADOW_KINDS:
            raise ValueError(
                f"Unknown shadow kind '{self.kind}'. Valid: {sorted(VALID_SHADOW_KINDS)}"
            )

    @classmethod
    def drop(
        cls,
        color="rgba(0, 0, 0, 0.3)",
        offset_x: float = 5,
        offset_y: float = 5,
        blur: float = 4,
    ) -> "ShadowSpec":
        return cls("drop", color, offset_x, offset_y, blur)

    @classmethod
    def cast(
        cls,
        color="rgba(0, 0, 0, 0.7)",
        offset_x: float = 15,
        offset_y: float = 15,
    ) -> "ShadowSpec":
        return cls("cast", color, offset_x, offset_y, 0)


@dataclass(frozen=True)
class LabelSpec:
    text: str
    font_size: float = 16
    font_family: str | None = None
    color: object = "#000000"
    align: str = "middle"
    offset_x: float = 0
    offset_y: float = 0
    sketchy: bool = False
    jitter: float = 1.5
    roughness: float = 3

    def __post_init__(self):
        if self.align not in VALID_LABEL_ALIGNS:
            raise ValueError(
                f"Unknown label align '{self.align}'. Valid: {sorted(VALID_LABEL_ALIGNS)}"
            )

    def sketchy_style(self, jitter: float = 1.5, roughness: float = 3) -> "LabelSpec":
        """Copy of this label drawn with hand-drawn jitter."""
        return replace(self, sketchy=True, jitter=jitter, roughness=roughness)


# ── Boundary normalization ───────────────────────────────────────


def to_shadow_spec(value) -> ShadowSpec | None:
    """Normalize a ShadowSpec, None or manifest dict.

    Manifest form: {type: cast, color: "#000", offset: [15, 15], blur: 4}
    """
    if value is None or isinstance(value, ShadowSpec):
        return value
    if not isinstance(value, dict):
        raise ValueError(f"Cannot interpret shadow {value!r}")
    kind = value.get("type", value.get("kind", "drop"))
    if kind not in VALID_SHADOW_KINDS:
        raise ValueError(
            f"Unknown shadow kind '{kind}'. Valid: {sorted(VALID_SHADOW_KINDS)}"
        )
    base = ShadowSpec.cast() if kind == "cast" else ShadowSpec.drop()
    offset_x, offset_y = value.get("offset", (base.offset_x, base.offset_y))
    return ShadowSpec(
        kind=kind,
        color=value.get("color", base.color),
        offset_x=offset_x,
        offset_y=offset_y,
        blur=value.get("blur", base.blur),
    )


def to_label_spec(value) -> LabelSpec | None:
    """Normalize a LabelSpec, None, bare string or manifest dict.

    Manifest form: {text: DB, font_size: 14, color: blue, align: top,
    offset: [0, 10], sketchy: true, jitter: 1.5, roughness: 3}
    """
    if value is None or isinstance(value, LabelSpec):
        return value
    if isinstance(value, str):
        return LabelSpec(value)
    if not isinstance(value, dict):
        raise ValueError(f"Cannot interpret label {value!r}")
    if "text" not in value:
        raise ValueError("Label requires 'text'")
    fields = {k: v for k, v in value.items() if k != "offset"}
    if "offset" in value:
        fields["offset_x"], fields["offset_y"] = value["offset"]
    try:
        return LabelSpec(**fields)
    except TypeError as exc:
        raise ValueError(f"Invalid label fields: {exc}") from None
