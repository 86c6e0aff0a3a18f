"""Scene module: scene construction and serialization.

Components:
    reference: The reference six-sphere scene
    config: JSON scene files
    intersection: Taichi scene storage and ray queries (not imported here,
        it declares Taichi fields; import it after init_taichi())
"""

from .config import SceneConfig, load_scene, save_scene
from .reference import create_reference_scene

__all__ = [
    "SceneConfig",
    "load_scene",
    "save_scene",
    "create_reference_scene",
]
