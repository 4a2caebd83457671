"""KEYMAZE visualization: terminal rendering of labyrinths and routes."""

from keymaze.visualization.ascii_renderer import render_labyrinth, render_path

__all__ = ['render_labyrinth', 'render_path']
