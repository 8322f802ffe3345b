from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from multiscene import config
from multiscene.config import ShaderErrorPolicy
from multiscene.surfaces import SurfaceConfig, default_surface_configs


@dataclass
class AppConfig:
    """Configuration for an App implementation."""

    surfaces: list[SurfaceConfig] = field(default_factory=default_surface_configs)
    vsync: bool = config.VSYNC
    shader_error_policy: ShaderErrorPolicy = config.SHADER_ERROR_POLICY


class App(Protocol):
    """
    Defines the structural interface for an application driver.

    An App bridges the backend-agnostic surfaces, scene and render loop with
    a concrete windowing library.

    Responsibilities:
    -----------------
    - Window and Context Management: Creates the primary window, then every
      secondary window with its GL context shared against the primary, so one
      set of meshes and one program serve all of them.

    - Resource Setup: Builds the shader program and uploads the meshes once,
      against the primary context, before the first frame.

    - Input Event Translation: Captures backend-specific input events and
      translates them into ``multiscene.input_events`` objects dispatched to
      the surface they came from.

    - Main Loop Execution: Implements ``run()``, which drives the
      ``RenderLoop`` until the primary surface closes and then tears down GPU
      resources and windows.
    """

    def __init__(self, app_config: AppConfig) -> None:
        """Creates windows and GPU resources. Raises StartupError on failure."""
        ...

    def run(self) -> None:
        """Runs the render loop until the primary surface closes."""
        ...
