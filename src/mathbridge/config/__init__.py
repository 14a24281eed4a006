"""Configuration module using Pydantic Settings.

Usage:
    from mathbridge.config import BridgeSettings

    settings = BridgeSettings(representations=["f64"])
"""

from mathbridge.config.settings import BridgeSettings

__all__ = [
    "BridgeSettings",
]
