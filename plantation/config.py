"""Service configuration loaded from a dotenv file."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import dotenv_values


@dataclass(frozen=True)
class Config:
    """Runtime settings of the plantation service."""

    database_url: str = ""
    scale_factor: int = 0


def _parse_int(key: str, raw: str) -> int:
    text = raw.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def load_config(path: str | os.PathLike[str]) -> Config:
    """Read DATABASE_URL and SCALE_FACTOR from the dotenv file at *path*.

    Raises FileNotFoundError if the file does not exist and ValueError if
    SCALE_FACTOR is not an integer. Missing keys take their zero values.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"config file not found: {os.fspath(path)}")

    values = {key.upper(): (value or "") for key, value in dotenv_values(path).items()}
    return Config(
        database_url=values.get("DATABASE_URL", ""),
        scale_factor=_parse_int("SCALE_FACTOR", values.get("SCALE_FACTOR", "")),
    )