###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Module catalog loading.

A catalog is a YAML file listing patch modules:

    extends:
      - base.yaml
    modules:
      - name: context_limit
        description: Read the context limit from the environment
        operations:
          - pattern: 'return 200000\\}'
            replacement: 'return Number(process.env.LIMIT||200000)}'

Modules of extended catalogs come first (in `extends` order), followed by
the file's own modules. Patterns and replacements are taken verbatim; no
environment or template expansion is applied to them.
"""

import os
from typing import Any, Dict, List, Optional, Set

import yaml

from patchkit.core.patches.errors import CatalogError
from patchkit.core.patches.module import PatchModule
from patchkit.core.patches.registry import ModuleRegistry

CATALOG_ENV = "PATCHKIT_CATALOG"
_CATALOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "configs", "catalogs")


def default_catalog_path() -> str:
    """PATCHKIT_CATALOG if set, otherwise the catalog bundled with the package."""
    return os.getenv(CATALOG_ENV) or os.path.join(_CATALOG_DIR, "default.yaml")


def load_catalog(path: Optional[str] = None) -> ModuleRegistry:
    """Parse a catalog file into a frozen ModuleRegistry."""
    path = path or default_catalog_path()
    registry = ModuleRegistry()
    for entry in parse_catalog(path):
        registry.add(_build_module(entry, path))
    return registry.freeze()


def parse_catalog(path: str) -> List[Dict[str, Any]]:
    """Load raw module entries from `path`, resolving `extends` recursively."""
    return _parse(os.path.abspath(path), set())


# ================================================================
# 1. Load YAML
# ================================================================
def _load_yaml(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.load(f, Loader=yaml.SafeLoader)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Catalog '{path}' is not valid YAML: {e}") from e


# ================================================================
# 2. extends: catalog composition
# ================================================================
def _parse(path: str, visiting: Set[str]) -> List[Dict[str, Any]]:
    if path in visiting:
        raise CatalogError(f"Circular 'extends' detected at '{path}'")

    cfg = _load_yaml(path)
    if cfg is None:
        raise CatalogError(f"Catalog file '{path}' is empty or invalid.")
    if not isinstance(cfg, dict):
        raise CatalogError(f"Catalog file '{path}' must be a mapping with a 'modules' list.")

    extends = cfg.get("extends") or []
    if isinstance(extends, str):
        extends = [extends]

    entries: List[Dict[str, Any]] = []
    base_dir = os.path.dirname(path)
    for base in extends:
        entries.extend(_parse(os.path.abspath(os.path.join(base_dir, base)), visiting | {path}))

    modules = cfg.get("modules") or []
    if not isinstance(modules, list):
        raise CatalogError(f"'modules' in '{path}' must be a list.")
    entries.extend(modules)
    return entries


# ================================================================
# 3. Entry -> PatchModule
# ================================================================
def _build_module(entry: Any, path: str) -> PatchModule:
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str) or not entry["name"]:
        raise CatalogError(f"Every module in '{path}' needs a non-empty 'name': {entry!r}")

    name = entry["name"]
    operations = entry.get("operations")
    if not isinstance(operations, list) or not operations:
        raise CatalogError(f"Module '{name}' in '{path}' must define at least one operation.")

    pairs = []
    for i, op in enumerate(operations):
        if not isinstance(op, dict):
            raise CatalogError(f"Operation {i + 1} of module '{name}' must be a mapping.")
        pattern, replacement = op.get("pattern"), op.get("replacement")
        if not isinstance(pattern, str) or not isinstance(replacement, str):
            raise CatalogError(
                f"Operation {i + 1} of module '{name}' needs string 'pattern' and 'replacement'."
            )
        pairs.append((pattern, replacement))

    return PatchModule.create(name, str(entry.get("description") or ""), pairs)
