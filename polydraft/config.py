"""
Editor Configuration Module.

Holds user preferences for new documents (default style, history depth).
Settings are persisted to a JSON config file.
"""
import json
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator
from PySide6.QtGui import QColor

from .geometry import DEFAULT_VERTEX_SIZE
from .models import VertexShape

# Config file location
CONFIG_DIR = Path.home() / ".polydraft"
CONFIG_FILE = CONFIG_DIR / "config.json"


class EditorConfig(BaseModel):
    """
    Attributes:
        history_limit: Max batches kept on the undo stack, None for unlimited.
        vertex_size: Handle radius for new polygons.
        hull_color, vertex_color, background_color: Colour names or #RRGGBB.
        default_shape: Vertex shape checked when the editor starts.
    """
    history_limit: Optional[int] = Field(default=None, ge=1)
    vertex_size: int = Field(default=DEFAULT_VERTEX_SIZE, ge=1, le=100)
    hull_color: str = "black"
    vertex_color: str = "black"
    background_color: str = "white"
    default_shape: VertexShape = VertexShape.CIRCLE

    @field_validator('hull_color', 'vertex_color', 'background_color')
    @classmethod
    def check_color(cls, v: str) -> str:
        if not QColor(v).isValid():
            raise ValueError(f"Invalid colour: {v!r}")
        return v


def load_config(path: Path = CONFIG_FILE) -> EditorConfig:
    """Load configuration from file, defaults for anything missing or broken."""
    path = Path(path)
    if not path.exists():
        return EditorConfig()

    try:
        with open(path, 'r') as f:
            data = json.load(f)
        config = EditorConfig.model_validate(data)
        logger.info(f"Loaded editor config from {path}")
        return config
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Error loading editor config, using defaults: {e}")
        return EditorConfig()


def save_config(config: EditorConfig, path: Path = CONFIG_FILE) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(config.model_dump(mode='json'), f, indent=2)
    logger.info(f"Saved editor config to {path}")
