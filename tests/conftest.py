from __future__ import annotations

from collections.abc import Iterator

import moderngl
import pytest

# The default standalone backend needs an X display; EGL covers headless hosts.
_HEADLESS_BACKENDS: tuple[dict[str, str], ...] = ({}, {"backend": "egl"})


def _create_headless_context() -> moderngl.Context:
    errors = []
    for options in _HEADLESS_BACKENDS:
        try:
            return moderngl.create_context(standalone=True, require=330, **options)
        except Exception as e:
            errors.append(f"{options.get('backend', 'default')}: {e}")
    pytest.skip(f"No headless OpenGL context available ({'; '.join(errors)})")


@pytest.fixture
def gl_context() -> Iterator[moderngl.Context]:
    """A headless OpenGL 3.3 context, or skip where the machine has none."""
    ctx = _create_headless_context()
    yield ctx
    ctx.release()
