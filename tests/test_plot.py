#!/usr/bin/env -S uv run
# /// script
# requires-python = ">=3.10"
# dependencies = [
#   "pytest",
#   "matplotlib",
# ]
# ///
"""Test painting frames to PNG."""

import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from qsomap.plot import draw_frame, render_png
from qsomap.projection import Equirectangular
from qsomap.render import build_frame, project_background
from qsomap.viewport import ViewState


PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
PROJ = Equirectangular(360, 180)
RECORDS = [{"CALL": "EAST", "QSO_DATE": "20220115", "MY_GRIDSQUARE": "JJ00", "GRIDSQUARE": "LJ00"}]
BACKGROUND = project_background([("Box", [[0, 0], [10, 0], [10, 10], [0, 10]])], PROJ)


def test_render_png():
    frame = build_frame(RECORDS, PROJ, ViewState(), background=BACKGROUND, day=date(2022, 1, 15))
    png = render_png(frame)
    print(f"  PNG: {len(png)} bytes")
    assert png[:8] == PNG_MAGIC


def test_figure_matches_canvas():
    frame = build_frame(RECORDS, PROJ, ViewState())
    fig = draw_frame(frame)
    width, height = fig.get_size_inches() * fig.dpi
    assert width == pytest.approx(360)
    assert height == pytest.approx(180)
    ax = fig.axes[0]
    assert ax.get_ylim() == (180, 0)
    assert len(ax.lines) == 1
    assert len(ax.patches) == 2  # two markers


def test_error_and_tooltip_text():
    view = ViewState(hover=0, pointer=(200, 90))
    frame = build_frame(RECORDS, PROJ, view, error="offline")
    texts = [t.get_text() for t in draw_frame(frame).axes[0].texts]
    assert any("Error loading map data" in t for t in texts)
    assert any(t.startswith("EAST\n") for t in texts)

    texts = [t.get_text() for t in draw_frame(frame, show_tooltip=False).axes[0].texts]
    assert not any(t.startswith("EAST\n") for t in texts)


def test_empty_frame():
    assert render_png(build_frame([], PROJ, ViewState()))[:8] == PNG_MAGIC


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
