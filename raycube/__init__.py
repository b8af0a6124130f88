"""Grid-based ray-casting maze viewer for .cub scene files."""

__version__ = "0.1.0"
__all__ = ["geometry", "state", "mapfile", "raycast", "movement", "render", "app"]