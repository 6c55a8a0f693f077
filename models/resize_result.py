"""Resize result with stage timings."""

from dataclasses import dataclass

from models.image import Image


@dataclass
class ResizeResult:
    """Output of one de-gamma / resample / gamma run."""

    output_image: Image

    # Linear-light working buffers
    linear_input: Image
    linear_output: Image

    # Runtime
    degamma_time_ms: float = 0.0
    resample_time_ms: float = 0.0
    gamma_time_ms: float = 0.0

    @property
    def total_time_ms(self) -> float:
        return self.degamma_time_ms + self.resample_time_ms + self.gamma_time_ms
