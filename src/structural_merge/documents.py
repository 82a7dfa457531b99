"""Layered YAML documents combined with the structural merge."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import DocumentError
from .merge import merge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentLayers:
    """Ordered YAML documents, lowest precedence first.

    Later layers override earlier ones key by key, with nested mappings and
    lists merged rather than replaced.

    Attributes:
        paths: Document paths in precedence order (None entries are skipped)

    Example:
        ```python
        layers = DocumentLayers((
            Path.home() / ".app" / "settings.yaml",
            Path(".app") / "settings.yaml",
            Path(".app") / "settings.local.yaml",
        ))
        settings = layers.merged()
        layers.update(2, {"server": {"port": 9090}})
        ```
    """

    paths: tuple[Path | None, ...]

    def merged(self) -> dict[str, Any]:
        """Merge every existing layer into a new dictionary.

        Returns:
            Merged document (empty when no layer exists)
        """
        return merge_documents(*self.paths)

    def update(self, layer: int, updates: dict[str, Any]) -> dict[str, Any]:
        """Deep merge updates into one layer and write it back.

        Args:
            layer: Index into paths
            updates: Values to merge into the layer

        Returns:
            The layer's new content

        Raises:
            DocumentError: If the layer is disabled or cannot be read or written
        """
        path = self.paths[layer]
        if path is None:
            raise DocumentError(f"Layer {layer} has no document path")
        return update_document(path, updates)


def load_document(path: Path) -> dict[str, Any] | None:
    """Read a YAML document.

    Args:
        path: Path to YAML file

    Returns:
        Dictionary from YAML, {} for an empty file, or None if the file
        doesn't exist

    Raises:
        DocumentError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        return None

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise DocumentError(f"Failed to read document from {path}: {e}") from e

    if data is None:
        logger.warning(f"Document {path} is empty")
        return {}
    if not isinstance(data, dict):
        raise DocumentError(f"Document {path} must contain a mapping, got {type(data).__name__}")
    return data


def write_document(path: Path, data: dict[str, Any]) -> None:
    """Write a YAML document, creating parent directories.

    Args:
        path: Path to YAML file
        data: Dictionary to write

    Raises:
        DocumentError: If write fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        raise DocumentError(f"Failed to write document to {path}: {e}") from e


def merge_documents(*paths: Path | None) -> dict[str, Any]:
    """Merge YAML documents in order; missing files are skipped."""
    merged: dict[str, Any] = {}
    for path in paths:
        if path is None:
            continue
        document = load_document(path)
        if document is None:
            logger.debug(f"Skipping missing document {path}")
            continue
        merge(merged, document)
    return merged


def update_document(path: Path, updates: dict[str, Any]) -> dict[str, Any]:
    """Deep merge updates into a YAML document and write it back.

    Args:
        path: Path to YAML file (created if missing)
        updates: Values to merge into the document

    Returns:
        The document's new content
    """
    existing = load_document(path) or {}
    merge(existing, updates)
    write_document(path, existing)
    logger.info(f"Updated document {path}")
    return existing
