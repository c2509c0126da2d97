"""Loading of design configuration and deck input files."""

import json
import logging
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import ValidationError

from .exceptions import DesignConfigError
from .models import DesignConfig, SlideContent

logger = logging.getLogger(__name__)


def _read_mapping(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DesignConfigError(f"Could not parse {path}: {e}") from e
    except (UnicodeDecodeError, OSError) as e:
        raise DesignConfigError(f"Could not read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DesignConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def load_design_config(path: Union[str, Path, None]) -> DesignConfig:
    """
    Load a design configuration from a YAML (or JSON) file.

    Args:
        path: Config file path; None yields the defaults

    Returns:
        Validated DesignConfig

    Raises:
        DesignConfigError: If the file cannot be parsed or fails validation
    """
    if path is None:
        return DesignConfig()

    path = Path(path)
    if not path.exists():
        logger.warning(f"Design config not found at {path}. Using defaults.")
        return DesignConfig()

    data = _read_mapping(path)
    try:
        config = DesignConfig(**data)
    except ValidationError as e:
        raise DesignConfigError(f"Invalid design config in {path}: {e}") from e

    logger.info(f"Loaded design config from {path}")
    return config


def load_deck(path: Union[str, Path]) -> List[SlideContent]:
    """
    Load slide contents from a YAML or JSON deck file with a ``slides`` list.

    Raises:
        DesignConfigError: If the file is missing, malformed or a slide is invalid
    """
    path = Path(path)
    if not path.exists():
        raise DesignConfigError(f"Deck file not found: {path}")

    data = _read_mapping(path)
    slides = data.get("slides")
    if not isinstance(slides, list):
        raise DesignConfigError(f"{path} must define a 'slides' list")

    contents = []
    for index, slide in enumerate(slides):
        if not isinstance(slide, dict):
            raise DesignConfigError(f"Slide {index} in {path} must be a mapping")
        try:
            contents.append(SlideContent(**slide))
        except ValidationError as e:
            raise DesignConfigError(f"Invalid slide {index} in {path}: {e}") from e

    logger.info(f"Loaded {len(contents)} slides from {path}")
    return contents
