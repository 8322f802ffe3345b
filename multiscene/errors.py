"""Exceptions that end startup.

Anything raised from here during startup is reported by ``main()`` and turns
into a nonzero exit code. Per-frame GPU errors are not represented here; the
renderer handles those as ``moderngl.Error`` and keeps going.
"""


class StartupError(RuntimeError):
    """Windowing or context setup failed, or the surface layout is invalid."""


class MeshAllocationError(StartupError):
    """A mesh's GPU buffer could not be allocated."""


class ShaderError(StartupError):
    """A shader program failed to build.

    ``diagnostic`` carries the full compiler or linker output.
    """

    def __init__(self, message: str, diagnostic: str) -> None:
        super().__init__(message)
        self.diagnostic = diagnostic


class CompileError(ShaderError):
    """A shader stage failed to compile."""


class LinkError(ShaderError):
    """The compiled stages failed to link into a program."""
