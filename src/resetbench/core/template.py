"""Job template: text substitution + YAML parse + per-batch naming."""

from __future__ import annotations

import logging
import os
from typing import Any

import yaml

from resetbench.errors import TemplateError

logger = logging.getLogger(__name__)

NODE_NAME_PLACEHOLDER = "##NODE_NAME##"
RESET_THRESHOLD_PLACEHOLDER = "##RESET_THRESHOLD_DAYS##"


class JobTemplate:
    """A Job manifest with ``##NODE_NAME##`` and ``##RESET_THRESHOLD_DAYS##`` slots."""

    def __init__(self, text: str, source: str = "<string>"):
        self.text = text
        self.source = source

    @classmethod
    def load(cls, path: str) -> JobTemplate:
        if not os.path.isfile(path):
            raise TemplateError(f"{path} not found.")
        with open(path) as f:
            text = f.read()
        logger.debug("Loaded job template %s (%d bytes)", path, len(text))
        return cls(text, source=path)

    def render(
        self,
        node: str,
        reset_threshold_days: str,
        generate_name: str,
        labels: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Return a Job manifest targeting ``node`` with a unique name prefix."""
        text = self.text.replace(NODE_NAME_PLACEHOLDER, node)
        text = text.replace(RESET_THRESHOLD_PLACEHOLDER, str(reset_threshold_days))
        try:
            manifest = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise TemplateError(f"{self.source}: invalid YAML: {exc}") from exc

        if not isinstance(manifest, dict) or manifest.get("kind") != "Job":
            raise TemplateError(f"{self.source}: expected a single Job document")

        metadata = manifest.get("metadata") or {}
        manifest["metadata"] = metadata
        # generateName only applies when name is absent
        metadata.pop("name", None)
        metadata["generateName"] = generate_name
        if labels:
            metadata["labels"] = {**(metadata.get("labels") or {}), **labels}
        return manifest
