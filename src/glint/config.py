"""Render configuration record.

``RenderConfig`` collects the parameters of one render: output size,
sampling budget, random seed, Taichi backend and output gamma. The
command line builds one from its arguments; library users can build one
directly and pass it to :meth:`glint.core.renderer.Renderer.from_config`.
"""

from dataclasses import dataclass

# Shared with glint.core.integrator. This module allocates no Taichi fields
# and may be imported before ti.init().
MAX_DEPTH = 50
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Taichi backends selectable by name
ARCH_CHOICES = ("cpu", "gpu", "cuda", "vulkan", "metal")


@dataclass
class RenderConfig:
    """Parameters of a single render.

    Attributes:
        image_width: Output width in pixels.
        aspect_ratio: Width divided by height; the height is derived.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Bounce budget per primary ray.
        seed: Seed for Taichi's random generator. It takes effect only
            through ti.init (see glint.cli.init_taichi); Renderer does not
            reseed an already initialized runtime.
        arch: Taichi backend name (see ARCH_CHOICES).
        gamma: Output gamma, or None to write linear values.
    """

    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = MAX_DEPTH
    seed: int = 0
    arch: str = "cpu"
    gamma: float | None = None

    @property
    def image_height(self) -> int:
        """Output height in pixels, ``int(image_width / aspect_ratio)``."""
        return int(self.image_width / self.aspect_ratio)

    def validate(self) -> None:
        """Check every field.

        Raises:
            ValueError: If any field is out of range.
        """
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio = {self.aspect_ratio} must be positive")

        width, height = self.image_width, self.image_height
        if width < 2 or height < 2:
            raise ValueError(f"Image dimensions ({width}x{height}) must be at least 2x2")
        if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({width}x{height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )

        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel = {self.samples_per_pixel} must be positive")
        if self.max_depth < 0:
            raise ValueError(f"max_depth = {self.max_depth} must be non-negative")
        if self.seed < 0:
            raise ValueError(f"seed = {self.seed} must be non-negative")
        if self.arch not in ARCH_CHOICES:
            raise ValueError(f"Unknown arch '{self.arch}'. Choose from: {', '.join(ARCH_CHOICES)}")
        if self.gamma is not None and self.gamma <= 0.0:
            raise ValueError(f"gamma = {self.gamma} must be positive")
