"""TOML persistence of :class:`ChargeFitConfig`."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ValidationError

from chargefit.core.domain.config import ChargeFitConfig
from chargefit.core.shared.exceptions import ConfigError

_TEMPLATE_HEADER = (
    "# chargefit configuration\n"
    "# Every key is optional; omitted keys take the values shown.\n"
)


def load_config(path: Path) -> ChargeFitConfig:
    """Read and validate a TOML configuration file.

    Raises:
        ConfigError: The file is missing, is not TOML or fails validation
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as exc:
        msg = f"Configuration file not found: {path}"
        raise ConfigError(msg) from exc
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc

    try:
        return ChargeFitConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid configuration in {path}:\n{exc}"
        raise ConfigError(msg) from exc


def save_config(config: ChargeFitConfig, path: Path) -> None:
    with path.open("wb") as f:
        tomli_w.dump(config.model_dump(mode="json", exclude_none=True), f)


def _section(name: str, model: BaseModel) -> str:
    lines = [f"[{name}]"]
    for field, info in type(model).model_fields.items():
        value = tomli_w.dumps({field: getattr(model, field)}).strip()
        lines.append(f"{value:<32}# {info.description}" if info.description else value)
    return "\n".join(lines)


def generate_default_config() -> str:
    """Default configuration as commented TOML, built from the model defaults."""
    defaults = ChargeFitConfig()
    sections = [
        _section(name, getattr(defaults, name)) for name in type(defaults).model_fields
    ]
    return _TEMPLATE_HEADER + "\n" + "\n\n".join(sections) + "\n"
