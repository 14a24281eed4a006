"""Configuration settings using Pydantic Settings.

Usage:
    from mathbridge.config import BridgeSettings

    # Load from environment variables (MATHBRIDGE_*)
    settings = BridgeSettings()

    # Or override with explicit values
    settings = BridgeSettings(representations=["f64"], out_arg_order="legacy")
"""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mathbridge.core.types import Repr


class BridgeSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for runtimes and namespace assembly.

    Attributes:
        representations: Scalar representations every type is monomorphized
            over, in namespace order.
        out_arg_order: Where the optional output handle goes in `add`, `sub`,
            `mul` and `div`. "trailing" puts it last for every type;
            "legacy" restores the leading position Vector3 and Isometry3
            used to take.
        namespace_name: Global name the namespace is installed under.

    Environment Variables:
        MATHBRIDGE_REPRESENTATIONS (JSON list, e.g. '["f32"]')
        MATHBRIDGE_OUT_ARG_ORDER
        MATHBRIDGE_NAMESPACE_NAME
    """

    model_config = SettingsConfigDict(
        env_prefix="MATHBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    representations: list[str] = ["f32", "f64"]
    out_arg_order: Literal["trailing", "legacy"] = "trailing"
    namespace_name: str = "nalgebra"

    @field_validator("representations")
    @classmethod
    def _known_representations(cls, value: list[str]) -> list[str]:
        for name in value:
            Repr.parse(name)
        return value

    def reprs(self) -> list[Repr]:
        """Configured representations as Repr members."""
        return [Repr.parse(name) for name in self.representations]
