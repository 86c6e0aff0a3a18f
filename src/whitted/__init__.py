"""Whitted-style ray tracer for sphere scenes.

This package renders a static image of a scene made of spheres with
recursive ray tracing, with support for:
- Diffuse direct lighting from emissive spheres with hard shadows
- Fresnel-weighted specular reflection and refraction
- A pure Python reference tracer and a parallel Taichi kernel
- Binary PPM and PNG output

Subpackages:
    core: Vector math, the reference tracer and the Taichi integrator
    geometry: The sphere primitive and its ray intersection test
    camera: Fixed pinhole camera and primary ray generation
    scene: Reference scene, JSON scene files and Taichi scene storage
    preview: Image quantization and export
"""

__version__ = "0.1.0"
