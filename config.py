"""Multiplier selection settings.

The selector picks a strategy by operand size.  The thresholds are the
only tunables; they change performance, never results.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MultiplierSettings(BaseModel):
    """Limb-count thresholds for the size-based multiplier selector."""

    model_config = ConfigDict(frozen=True)

    karatsuba_threshold: int = Field(
        default=32,
        ge=2,
        description="Shorter operand limb count at which Karatsuba takes over from schoolbook",
    )
    fft_threshold: int = Field(
        default=1536,
        ge=2,
        description="Limb count both operands must reach before FFT is used",
    )

    @model_validator(mode="after")
    def thresholds_ordered(self) -> "MultiplierSettings":
        if self.karatsuba_threshold > self.fft_threshold:
            raise ValueError(
                f"karatsuba_threshold ({self.karatsuba_threshold}) must be "
                f"<= fft_threshold ({self.fft_threshold})"
            )
        return self


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS = MultiplierSettings()

# Never leaves schoolbook; useful as a reference configuration
SCHOOLBOOK_ONLY = MultiplierSettings(
    karatsuba_threshold=1 << 62, fft_threshold=1 << 62
)

# Reaches every strategy on small operands
EAGER_FFT = MultiplierSettings(karatsuba_threshold=4, fft_threshold=16)
