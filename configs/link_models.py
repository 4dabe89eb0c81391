from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from configs.appconfig import AppConfig


class AssemblyMode(str, Enum):
    """Which of the two circle-intersection branches places the coupler/rocker joint."""
    OPEN = "open"
    CROSSED = "crossed"

    @property
    def sign(self) -> int:
        # legacy +1/-1 convention
        return 1 if self is AssemblyMode.OPEN else -1

    @classmethod
    def from_sign(cls, sign: int) -> AssemblyMode:
        if sign not in (1, -1):
            raise ValueError(f"assembly mode sign must be +1 or -1, got {sign!r}")
        return cls.OPEN if sign == 1 else cls.CROSSED


PositiveLength = Annotated[float, Field(gt=0, allow_inf_nan=False)]


class MechanismConfig(BaseModel):
    """Link lengths and assembly mode of a planar four-bar linkage.

    O2 sits at the origin and O4 at (r1, 0). Lengths are in any consistent unit.
    """
    r1: PositiveLength = Field(description="Ground link length (O2 to O4)")
    r2: PositiveLength = Field(description="Crank / driver length (O2 to A)")
    r3: PositiveLength = Field(description="Coupler length (A to B)")
    r4: PositiveLength = Field(description="Rocker / follower length (O4 to B)")
    assembly_mode: AssemblyMode = Field(default=AssemblyMode.OPEN, description="Branch used to place joint B")

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @property
    def lengths(self) -> tuple[float, float, float, float]:
        return (self.r1, self.r2, self.r3, self.r4)

    def with_mode(self, assembly_mode: AssemblyMode) -> MechanismConfig:
        return self.model_copy(update={"assembly_mode": AssemblyMode(assembly_mode)})

    def as_dict(self):
        """Convert to a JSON-friendly dictionary"""
        return self.model_dump(mode="json")

    @classmethod
    def default(cls) -> MechanismConfig:
        return cls(
            r1=AppConfig.DEFAULT_R1,
            r2=AppConfig.DEFAULT_R2,
            r3=AppConfig.DEFAULT_R3,
            r4=AppConfig.DEFAULT_R4,
            assembly_mode=AppConfig.DEFAULT_ASSEMBLY_MODE,
        )
