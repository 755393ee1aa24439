"""Configuration loading.

:func:`load_config` reads an :class:`~bernard.models.AuthConfig` from a JSON
file. A missing path yields the defaults; a file that exists but cannot be
parsed or validated raises :class:`~bernard.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from bernard.exceptions import ConfigurationError
from bernard.models import AuthConfig


def load_config(path: Optional[Union[str, Path]] = None) -> AuthConfig:
    """Load the auth configuration from a JSON file.

    Args:
        path: Location of the JSON file. ``None`` or a path that does not
            exist returns a default :class:`~bernard.models.AuthConfig`.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file contains invalid JSON or fails
            validation.
    """
    if path is None:
        return AuthConfig()
    path = Path(path).expanduser()
    if not path.is_file():
        return AuthConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return AuthConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid auth config at {path}: {exc}") from exc
