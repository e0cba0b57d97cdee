"""
Configuration module for formcraft.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class FormcraftConfig:
    """Configuration settings for formcraft."""

    # Identifier settings
    field_id_prefix: str = "field"

    # Display settings
    date_display_format: str = "%Y-%m-%d"
    unknown_field_label: str = "Unknown field"

    # Logging
    log_level: str = "INFO"

    # MCP Server settings
    mcp_transport: str = "stdio"  # stdio or sse
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8080

    @classmethod
    def from_env(cls) -> "FormcraftConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            field_id_prefix=os.getenv("FORMCRAFT_FIELD_ID_PREFIX", _defaults.field_id_prefix),
            date_display_format=os.getenv("FORMCRAFT_DATE_FORMAT", _defaults.date_display_format),
            unknown_field_label=os.getenv("FORMCRAFT_UNKNOWN_FIELD_LABEL", _defaults.unknown_field_label),
            log_level=os.getenv("FORMCRAFT_LOG_LEVEL", _defaults.log_level).upper(),
            mcp_transport=os.getenv("MCP_TRANSPORT", _defaults.mcp_transport),
            mcp_host=os.getenv("MCP_HOST", _defaults.mcp_host),
            mcp_port=int(os.getenv("MCP_PORT", str(_defaults.mcp_port))),
        )


config = FormcraftConfig.from_env()


def get_config() -> FormcraftConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> FormcraftConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
