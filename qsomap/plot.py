"""Paint a Frame to PNG with matplotlib."""

from io import BytesIO

from matplotlib.figure import Figure
from matplotlib.patches import Circle, Polygon

from .render import Frame, LineItem, MarkerItem, PolygonItem, LINE_WIDTH
from .tooltip import build_tooltip


DPI = 100

COLORS = {
    "background": "#11151C",
    "land": "#2C3440",
    "border": "#1A1F28",
    "line": "#FF6B6B",
    "home": "#4CC9F0",
    "contacted": "#F72585",
    "text": "#E0E0E0",
    "error": "#FF6B6B",
}


def draw_frame(frame: Frame, show_tooltip: bool = True) -> Figure:
    """Draw the frame's items in order onto a new figure sized to the canvas."""
    fig = Figure(figsize=(frame.width / DPI, frame.height / DPI), dpi=DPI)
    fig.patch.set_facecolor(COLORS["background"])
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, frame.width)
    ax.set_ylim(frame.height, 0)  # screen y grows downward
    ax.set_axis_off()

    for item in frame.items():
        if isinstance(item, PolygonItem):
            ax.add_patch(Polygon(item.points, closed=True, facecolor=COLORS["land"],
                                 edgecolor=COLORS["border"], linewidth=0.5))
        elif isinstance(item, LineItem):
            ax.plot([item.start[0], item.end[0]], [item.start[1], item.end[1]],
                    color=COLORS["line"], linewidth=LINE_WIDTH, solid_capstyle="round")
        elif isinstance(item, MarkerItem):
            ax.add_patch(Circle(item.point, item.radius, facecolor=COLORS[item.role],
                                edgecolor="white", linewidth=1))

    if frame.error:
        ax.text(frame.width / 2, frame.height / 2, "Error loading map data. Please try again.",
                ha="center", va="center", color=COLORS["error"])

    label = f"{frame.day:%b} {frame.day.day}, {frame.day.year}" if frame.day else ""
    ax.text(8, 16, f"{label}  {len(frame.connections)} QSOs  Zoom: {round(frame.view.zoom * 100)}%",
            color=COLORS["text"], fontsize=9)

    drawn = frame.hovered()
    if show_tooltip and drawn is not None and frame.view.pointer is not None:
        tooltip = build_tooltip(drawn.record, drawn.connection)
        x, y = frame.view.pointer
        ax.text(x, y, str(tooltip), ha="center", va="bottom", fontsize=8,
                color="black", bbox={"facecolor": "white", "alpha": 0.9, "boxstyle": "round"})

    return fig


def render_png(frame: Frame, show_tooltip: bool = True) -> bytes:
    fig = draw_frame(frame, show_tooltip)
    buf = BytesIO()
    fig.savefig(buf, format="png", dpi=DPI, facecolor=fig.get_facecolor())
    return buf.getvalue()
