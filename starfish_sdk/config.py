"""
Configuration for the Starfish SDK.

Options can be given explicitly or read from ``STARFISH_*`` environment
variables. Explicit values win over the environment, which wins over defaults.
"""
import os
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ENV_PREFIX = "STARFISH_"

_TRUE_VALUES = ("1", "true", "yes", "on")


class NetworkOptions(BaseModel):
    """Options used when connecting a Network"""

    artifacts_path: str = "artifacts"
    auto_load_local_artifacts: bool = True
    receipt_timeout: int = 120
    poll_interval: float = 0.1
    http_timeout: int = 30

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides: Any) -> "NetworkOptions":
        """
        Build options from the environment with explicit overrides

        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Option values that take precedence over the environment

        Returns:
            NetworkOptions instance

        Raises:
            pydantic.ValidationError: If a value cannot be parsed
        """
        if environ is None:
            environ = os.environ

        values: Dict[str, Any] = {}
        for field_name in cls.model_fields:
            env_name = f"{ENV_PREFIX}{field_name.upper()}"
            if env_name in environ:
                raw = environ[env_name]
                if field_name == "auto_load_local_artifacts":
                    values[field_name] = raw.strip().lower() in _TRUE_VALUES
                else:
                    values[field_name] = raw
                logger.debug(f"Using {env_name} from environment")

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
