"""OBJ model loading, transform helpers, camera, scene animation and quiz logic for an animated car showcase."""

__version__ = "0.1.0"
__all__ = ["camera", "geometry", "model", "quiz", "scene"]