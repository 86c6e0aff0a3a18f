"""Scene configuration and JSON serialization.

A scene file is a JSON object with a ``spheres`` list. Each entry describes
one sphere:

    {
        "center": [0.0, 0.0, -20.0],
        "radius": 4.0,
        "surface_color": [1.0, 0.32, 0.36],
        "reflection": 1.0,
        "transparency": 0.5,
        "emission_color": [0.0, 0.0, 0.0]
    }

``center`` and ``radius`` are required. ``surface_color`` and
``emission_color`` default to black, ``reflection`` and ``transparency`` to 0.
Sphere order is preserved since it decides nearest-hit ties.

Example:
    >>> from whitted.scene.config import load_scene, save_scene
    >>> from whitted.scene.reference import create_reference_scene
    >>> save_scene(create_reference_scene(), "scene.json")
    >>> spheres = load_scene("scene.json")
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from whitted.core.vector import Vec3
from whitted.geometry.sphere import Sphere


@dataclass
class SceneConfig:
    """Serializable description of a scene.

    Attributes:
        spheres: List of sphere configurations, in scene order.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_spheres(cls, spheres: Sequence[Sphere]) -> SceneConfig:
        """Export a sphere list to a configuration object."""
        config = cls()
        for sphere in spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "surface_color": list(sphere.surface_color),
                    "reflection": sphere.reflection,
                    "transparency": sphere.transparency,
                    "emission_color": list(sphere.emission_color),
                }
            )
        return config

    def to_spheres(self) -> list[Sphere]:
        """Build the sphere list described by this configuration.

        Raises:
            ValueError: If an entry is missing a required key, has a
                non-positive radius, or a vector that is not 3 numbers.
        """
        return [_sphere_from_dict(index, entry) for index, entry in enumerate(self.spheres)]

    def to_dict(self) -> dict[str, Any]:
        """Export to a dictionary (for JSON serialization)."""
        return {"spheres": self.spheres}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        """Load from a dictionary with a ``spheres`` key.

        Raises:
            ValueError: If ``spheres`` is missing or is not a list.
        """
        spheres = data.get("spheres")
        if not isinstance(spheres, list):
            raise ValueError("Scene configuration must contain a 'spheres' list")
        return cls(spheres=spheres)


def _vector(index: int, entry: dict[str, Any], key: str, default: Sequence[float]) -> Vec3:
    value = entry.get(key, default)
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"Sphere {index}: '{key}' must be a list of 3 numbers, got {value!r}")
    try:
        return Vec3(float(value[0]), float(value[1]), float(value[2]))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Sphere {index}: '{key}' must contain numbers, got {value!r}") from e


def _number(index: int, entry: dict[str, Any], key: str, default: float) -> float:
    value = entry.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Sphere {index}: '{key}' must be a number, got {value!r}") from e


def _sphere_from_dict(index: int, entry: dict[str, Any]) -> Sphere:
    if not isinstance(entry, dict):
        raise ValueError(f"Sphere {index}: expected an object, got {entry!r}")
    for key in ("center", "radius"):
        if key not in entry:
            raise ValueError(f"Sphere {index}: missing required key '{key}'")

    radius = _number(index, entry, "radius", 0.0)
    if radius <= 0:
        raise ValueError(f"Sphere {index}: radius must be positive, got {radius}")

    return Sphere(
        center=_vector(index, entry, "center", (0.0, 0.0, 0.0)),
        radius=radius,
        surface_color=_vector(index, entry, "surface_color", (0.0, 0.0, 0.0)),
        reflection=_number(index, entry, "reflection", 0.0),
        transparency=_number(index, entry, "transparency", 0.0),
        emission_color=_vector(index, entry, "emission_color", (0.0, 0.0, 0.0)),
    )


def load_scene(path: str | Path) -> list[Sphere]:
    """Load a sphere list from a JSON scene file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid scene file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid scene file {path}: top level must be an object")
    return SceneConfig.from_dict(data).to_spheres()


def save_scene(spheres: Sequence[Sphere], path: str | Path) -> None:
    """Write a sphere list to a JSON scene file."""
    config = SceneConfig.from_spheres(spheres)
    Path(path).write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
