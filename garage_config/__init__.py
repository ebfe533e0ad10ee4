"""
Garage Configuration (``garage_config``).

Module settings live in version-controlled YAML files under
``garage_config/sets/<module>.yaml``::

    module: inventory_valuation
    version: 1
    settings:
      gap_fill_method: average_cost
      history_entries: 3

``get_module_config()`` is the single entry point; it returns the
``settings`` mapping, which module config dataclasses accept through
their ``from_dict()`` constructors.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from garage_config.loader import compute_checksum, load_yaml_file

_logger = logging.getLogger("garage_kernel.config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_module_config(
    module_name: str,
    config_dir: Path | None = None,
) -> dict[str, Any]:
    """Load the settings mapping for one module.

    Args:
        module_name: File stem under the sets directory
            (e.g. ``"inventory_valuation"``).
        config_dir: Override path to the configuration sets directory.
            Defaults to garage_config/sets/.

    Returns:
        A fresh dict of settings (empty when the file declares none).

    Raises:
        FileNotFoundError: No config set exists for the module.
        ValueError: The file names a different module, or ``settings``
            is not a mapping.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = Path(sets_dir) / f"{module_name}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"No configuration set for module {module_name!r} in {sets_dir}")

    data = load_yaml_file(path)

    declared = data.get("module", module_name)
    if declared != module_name:
        raise ValueError(
            f"{path}: declares module {declared!r}, expected {module_name!r}"
        )

    settings = data.get("settings") or {}
    if not isinstance(settings, dict):
        raise ValueError(f"{path}: 'settings' must be a mapping")

    _logger.info(
        "GARAGE_CONFIG_TRACE",
        extra={
            "trace_type": "GARAGE_CONFIG_TRACE",
            "module": module_name,
            "config_version": data.get("version"),
            "checksum": compute_checksum(settings),
            "setting_count": len(settings),
        },
    )
    return dict(settings)


__all__ = ["get_module_config", "load_yaml_file", "compute_checksum"]
