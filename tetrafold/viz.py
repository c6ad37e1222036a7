"""
Matplotlib rendering of board snapshots, for debugging and test artefacts.

Needs the optional ``viz`` extra (matplotlib).
"""

from __future__ import annotations
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .board import BoardSnapshot
from .fold_spec import FoldSpec
from .grid import all_vertices


def plot_polygon(ax, polygon, color='blue', alpha=0.3, edgecolor='black', linewidth=1, **kwargs):
    """Plot a polygon."""
    if len(polygon) < 3:
        return
    patch = plt.Polygon(list(polygon), facecolor=color, alpha=alpha, edgecolor=edgecolor,
                        linewidth=linewidth, **kwargs)
    ax.add_patch(patch)


def plot_fold_spec(ax, fold_spec: FoldSpec, near_color='orange', far_color='green'):
    """Plot both triangles of a fold and its hinge."""
    triangles = fold_spec.to_triangles()
    plot_polygon(ax, triangles.near, color=near_color, alpha=0.5, label='Near')
    plot_polygon(ax, triangles.far, color=far_color, alpha=0.5, label='Far')

    (h0x, h0y), (h1x, h1y) = fold_spec.hinges
    ax.plot([h0x, h1x], [h0y, h1y], color='red', linewidth=2, linestyle='--', label='Hinge')
    ax.annotate('', xy=fold_spec.end, xytext=fold_spec.start,
                arrowprops=dict(arrowstyle='->', color='red'))


def plot_board(snapshot: BoardSnapshot, ax=None, show_vertices: bool = False,
               fold_spec: Optional[FoldSpec] = None):
    """
    Draw every shape and lock region of a board snapshot.

    Args:
        snapshot: Result of Board.snapshot()
        ax: Axes to draw into; a new figure is created if None
        show_vertices: Also scatter the lattice corner vertices
        fold_spec: Optional candidate fold drawn on top

    Returns:
        The matplotlib Axes.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    bounds = snapshot.bounds
    ax.add_patch(plt.Rectangle((bounds.min_x, bounds.min_y), bounds.width, bounds.height,
                               fill=False, edgecolor='black', linewidth=2))

    if show_vertices:
        vertices = np.array(all_vertices(bounds))
        ax.scatter(vertices[:, 0], vertices[:, 1], s=4, color='gray', zorder=1)

    colors = plt.cm.Set3(np.linspace(0, 1, max(len(snapshot.shapes), 1)))
    for color, (shape_id, rings) in zip(colors, snapshot.shapes.items()):
        for ring in rings:
            plot_polygon(ax, ring, color=color, alpha=0.8)
        for hole in snapshot.holes.get(shape_id, []):
            plot_polygon(ax, hole, color='white', alpha=1.0)
        cx, cy = rings[0].centroid
        ax.text(cx, cy, str(shape_id), ha='center', va='center', fontsize=9)

    for owner_id, ring in snapshot.locks:
        plot_polygon(ax, ring, color='black', alpha=0.4, hatch='//')

    if fold_spec is not None:
        plot_fold_spec(ax, fold_spec)

    ax.set_xlim(bounds.min_x - 0.5, bounds.max_x + 0.5)
    ax.set_ylim(bounds.min_y - 0.5, bounds.max_y + 0.5)
    ax.set_aspect('equal')
    ax.set_title(f'{snapshot.shape_count} shapes, {len(snapshot.locks)} locks')
    return ax
