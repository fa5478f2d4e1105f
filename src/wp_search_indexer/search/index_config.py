"""
Index Configuration Files

Settings, synonyms and rules of each logical index are versioned as JSON
files in one directory:

    {config_dir}/{logical_name}-settings.json
    {config_dir}/{logical_name}-synonyms.json
    {config_dir}/{logical_name}-rules.json

A missing file means there is nothing to push for that kind.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .client import SearchIndex
from ..core.errors import ConfigMissingError

logger = logging.getLogger("indexer.index_config")

SETTINGS = "settings"
SYNONYMS = "synonyms"
RULES = "rules"

CONFIG_KINDS = (SETTINGS, SYNONYMS, RULES)


def config_path(config_dir: str | Path, logical_name: str, kind: str) -> Path:
    if kind not in CONFIG_KINDS:
        raise ValueError(f"Unknown index configuration kind: {kind}")
    return Path(config_dir) / f"{logical_name}-{kind}.json"


def read_index_config(config_dir: str | Path, logical_name: str, kind: str) -> Any:
    """
    Load one configuration file.

    Raises
    ------
    ConfigMissingError
        If the file does not exist.
    """
    path = config_path(config_dir, logical_name, kind)
    if not path.is_file():
        raise ConfigMissingError(f"No {kind} file for index {logical_name}: {path}")

    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def push_index_config(
    index: SearchIndex,
    config_dir: str | Path,
    logical_name: str,
    kinds: Iterable[str] = CONFIG_KINDS,
) -> List[str]:
    """
    Push local configuration files to an index.

    Missing or empty files are skipped. Returns the kinds that were pushed.
    """
    pushed: List[str] = []

    for kind in kinds:
        try:
            data = read_index_config(config_dir, logical_name, kind)
        except ConfigMissingError:
            logger.info("No %s to push for %s", kind, logical_name)
            continue

        if not data:
            continue

        if kind == SETTINGS:
            index.set_settings(data)
        elif kind == SYNONYMS:
            index.replace_all_synonyms(data)
        else:
            index.replace_all_rules(data)

        logger.info("Pushed %s to %s", kind, index.name)
        pushed.append(kind)

    return pushed


def fetch_index_config(index: SearchIndex, kinds: Iterable[str] = CONFIG_KINDS) -> Dict[str, Any]:
    """
    Read the live configuration of an index, keyed by kind.
    """
    config: Dict[str, Any] = {}

    for kind in kinds:
        if kind == SETTINGS:
            config[kind] = index.get_settings()
        elif kind == SYNONYMS:
            config[kind] = list(index.browse_synonyms())
        elif kind == RULES:
            config[kind] = list(index.search_rules())
        else:
            raise ValueError(f"Unknown index configuration kind: {kind}")

    return config
