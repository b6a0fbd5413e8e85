"""3D preview of generated house geometry using plotly.

Example:
    >>> from facadekit import build_house
    >>> from facadekit.visualization import view_house
    >>>
    >>> fig = view_house(build_house())  # doctest: +SKIP
    >>> fig.show()  # doctest: +SKIP
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .house import HouseModel
from .meshes import Material, MeshBuffers, is_transparent_id


@dataclass(frozen=True)
class HouseViewConfig:
    """Configuration for the 3D house preview.

    Attributes:
        width: Figure width in pixels.
        height: Figure height in pixels.
        opacity: Opacity of opaque elements (0-1).
        glass_opacity: Opacity of glazing (0-1).
        background_color: Plot background color.
        colors: Per-material color overrides.
        show_legend: Whether every mesh gets a legend entry.
    """

    width: int = 1000
    height: int = 700
    opacity: float = 1.0
    glass_opacity: float = 0.35
    background_color: str = "#f8f9fa"
    colors: dict[Material, str] = field(default_factory=dict)
    show_legend: bool = False

    def __post_init__(self) -> None:
        for name in ("opacity", "glass_opacity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                msg = f"{name} must be within [0, 1], got {value}"
                raise ValueError(msg)

    def color_for(self, material: Material) -> str:
        return self.colors.get(material, material.color)


def _get_go() -> Any:
    """Get plotly.graph_objects, raising ImportError if unavailable."""
    try:
        import plotly.graph_objects as go  # type: ignore[import-not-found]
    except ImportError:
        msg = "plotly is required for the 3D preview. Install it with: pip install facadekit[plotly]"
        raise ImportError(msg) from None
    return go


# ---------------------------------------------------------------------------
# Traces
# ---------------------------------------------------------------------------


def _mesh_trace(go: Any, mesh_id: str, buffers: MeshBuffers, material: Material, config: HouseViewConfig) -> Any:
    """One Mesh3d trace for a triangle soup.

    Plotly's vertical axis is z, so world Y (up) is plotted as z and world Z
    (depth) as y.
    """
    points = buffers.positions.reshape(-1, 3)
    count = buffers.triangle_count
    opacity = config.glass_opacity if is_transparent_id(mesh_id) else config.opacity
    return go.Mesh3d(
        x=points[:, 0],
        y=points[:, 2],
        z=points[:, 1],
        i=list(range(0, 3 * count, 3)),
        j=list(range(1, 3 * count, 3)),
        k=list(range(2, 3 * count, 3)),
        color=config.color_for(material),
        opacity=opacity,
        name=mesh_id,
        hoverinfo="name",
        showlegend=config.show_legend,
        flatshading=True,
    )


def build_mesh_traces(
    meshes: Iterable[tuple[str, MeshBuffers, Material]],
    config: HouseViewConfig | None = None,
) -> list[Any]:
    """Mesh3d traces for ``(id, buffers, material)`` triples; empty meshes are skipped."""
    go = _get_go()
    cfg = config or HouseViewConfig()
    return [
        _mesh_trace(go, mesh_id, buffers, material, cfg)
        for mesh_id, buffers, material in meshes
        if buffers.triangle_count
    ]


def _make_3d_layout(go: Any, config: HouseViewConfig, title: str | None) -> Any:
    """Create a standard 3D layout with equal aspect ratio."""
    return go.Layout(
        title=title,
        width=config.width,
        height=config.height,
        scene={
            "aspectmode": "data",
            "xaxis": {"title": "X (m)", "backgroundcolor": config.background_color},
            "yaxis": {"title": "Z depth (m)", "backgroundcolor": config.background_color},
            "zaxis": {"title": "Y up (m)", "backgroundcolor": config.background_color},
        },
        paper_bgcolor=config.background_color,
        showlegend=config.show_legend,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def view_house(
    model: HouseModel,
    config: HouseViewConfig | None = None,
    *,
    title: str | None = "House",
) -> Any:
    """Interactive 3D preview of a generated house.

    Args:
        model: Output of :func:`facadekit.build_house`.
        config: Optional view configuration.
        title: Optional plot title.

    Returns:
        A plotly Figure with one Mesh3d trace per non-empty mesh.

    Raises:
        ImportError: If plotly is not installed.
    """
    go = _get_go()
    cfg = config or HouseViewConfig()
    traces = build_mesh_traces(model.world_meshes(), cfg)
    return go.Figure(data=traces, layout=_make_3d_layout(go, cfg, title))
