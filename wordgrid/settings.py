import os
from dataclasses import dataclass
from pathlib import Path

from wordgrid.grid import FULL_ALPHABET


@dataclass
class Settings:
    DICTIONARY_PATH: Path = Path("/usr/share/dict/words")

    GRID_SIZE: int = 4
    MAX_GRID_SIZE: int = 12
    ALPHABET: str = FULL_ALPHABET
    RANDOM_SEED: int = -1

    WORKERS: int = 1
    MAX_RESULTS: int = 50
    DEBUG: bool = False
    PORT: int = 10001

    def __post_init__(self):
        # Override from environment
        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                current = getattr(self, fld)
                if isinstance(current, bool):
                    setattr(self, fld, env_val.lower() in ("1", "true", "yes"))
                elif isinstance(current, int):
                    setattr(self, fld, int(env_val))
                elif isinstance(current, Path):
                    setattr(self, fld, Path(env_val))
                else:
                    setattr(self, fld, env_val)


# Fields that may be changed while the service is running.
EDITABLE_FIELDS: dict[str, type] = {
    "GRID_SIZE": int,
    "ALPHABET": str,
    "RANDOM_SEED": int,
    "WORKERS": int,
    "MAX_RESULTS": int,
    "DEBUG": bool,
}

_MINIMUMS = {"GRID_SIZE": 1, "WORKERS": 1, "MAX_RESULTS": 0}


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def _coerce(cfg: Settings, name: str, value):
    kind = EDITABLE_FIELDS[name]
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("1", "true", "yes", "0", "false", "no"):
            return value.lower() in ("1", "true", "yes")
        raise ValueError(f"expected a boolean, got {value!r}")
    if kind is int:
        if isinstance(value, bool):
            raise ValueError(f"expected an integer, got {value!r}")
        value = int(value)
        minimum = _MINIMUMS.get(name)
        if minimum is not None and value < minimum:
            raise ValueError(f"must be >= {minimum}")
        if name == "GRID_SIZE" and value > cfg.MAX_GRID_SIZE:
            raise ValueError(f"must be <= {cfg.MAX_GRID_SIZE}")
        return value
    value = str(value)
    if name == "ALPHABET" and not value:
        raise ValueError("must not be empty")
    return value


def update_settings(cfg: Settings, **values) -> dict[str, str]:
    """Apply editable values to ``cfg``. Returns a mapping of field name to error message.

    Valid fields are applied even if others fail.
    """
    errors: dict[str, str] = {}
    for name, value in values.items():
        if name not in EDITABLE_FIELDS:
            if name in cfg.__dataclass_fields__:
                errors[name] = "field is not editable"
            else:
                errors[name] = "unknown field"
            continue
        try:
            setattr(cfg, name, _coerce(cfg, name, value))
        except (TypeError, ValueError) as e:
            errors[name] = str(e)
    return errors


settings = Settings()
