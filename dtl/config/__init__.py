"""DTL configuration."""

from dtl.config.settings import DTLSettings, get_settings

__all__ = ["DTLSettings", "get_settings"]
