"""Taichi runtime initialization.

The kernels store every quantity in double precision and rely on IEEE NaN
semantics (an unguarded refraction square root must produce NaN, and NaN
comparisons must be false), so Taichi is initialized with ``default_fp=f64``
and fast math disabled.

Calling ``ti.init()`` again discards every existing field, including the
scene and render target fields declared by the integrator modules, so
``init_taichi`` only initializes once per process.
"""

import taichi as ti

# Accepted values for the ``arch`` argument
ARCHS = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
}

_initialized = False


def init_taichi(arch: str = "cpu", **kwargs) -> bool:
    """Initialize Taichi for the whitted kernels.

    Must be called before importing ``whitted.scene.intersection``,
    ``whitted.core.integrator`` or ``whitted.core.renderer``.

    Args:
        arch: Backend name, one of ARCHS. Backends without f64 support
            (Metal, most Vulkan devices) cannot run the kernels.
        **kwargs: Extra keyword arguments passed to ``ti.init``.

    Returns:
        True if Taichi was initialized by this call, False if it already was.

    Raises:
        ValueError: If ``arch`` is not a known backend name.
    """
    global _initialized

    if arch not in ARCHS:
        raise ValueError(f"Unknown Taichi arch: {arch!r} (expected one of {sorted(ARCHS)})")
    if _initialized:
        return False
    ti.init(arch=ARCHS[arch], default_fp=ti.f64, fast_math=False, **kwargs)
    _initialized = True
    return True


def is_initialized() -> bool:
    """Whether init_taichi has already run in this process."""
    return _initialized
