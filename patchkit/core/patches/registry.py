###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Patch Module Registry

Holds the ordered collection of PatchModule definitions for a run.
A registry is built once (usually from a catalog), frozen, and then passed
explicitly to the runner; there is no process-wide registry.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Tuple

from patchkit.core.patches.errors import DuplicateModuleError, UnknownModuleError
from patchkit.core.patches.module import OperationLike, PatchModule

log = logging.getLogger(__name__)


class _ModuleListing:
    """Restartable view of (name, description) pairs in registration order."""

    def __init__(self, modules: Dict[str, PatchModule]):
        self._modules = modules

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        for module in self._modules.values():
            yield module.name, module.description

    def __len__(self) -> int:
        return len(self._modules)


# ============================================================================
# Module Registry
# ============================================================================


class ModuleRegistry:
    """
    Ordered, name-indexed collection of patch modules.

    Usage:
        registry = ModuleRegistry()
        registry.register("context_limit", "Raise the limit", [(pattern, replacement)])
        registry.freeze()
        run_patches(target, registry)
    """

    def __init__(self):
        # dict preserves insertion order, which is the registration order
        self._modules: Dict[str, PatchModule] = {}
        self._frozen = False

    @classmethod
    def from_modules(cls, modules: Iterable[PatchModule]) -> "ModuleRegistry":
        """Build a frozen registry from already constructed modules."""
        registry = cls()
        for module in modules:
            registry.add(module)
        registry.freeze()
        return registry

    # ------------------------ Registration ------------------------ #

    def register(self, name: str, description: str, operations: Iterable[OperationLike]) -> PatchModule:
        """Create and register a module."""
        return self.add(PatchModule.create(name, description, operations))

    def add(self, module: PatchModule) -> PatchModule:
        if self._frozen:
            raise RuntimeError("Registry is frozen; modules cannot be registered after construction")
        if module.name in self._modules:
            raise DuplicateModuleError(module.name)
        self._modules[module.name] = module
        log.debug(
            "[ModuleRegistry] Registered module: %s (%d operation(s))",
            module.name,
            len(module.operations),
        )
        return module

    def freeze(self) -> "ModuleRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------- Lookup APIs ------------------------ #

    def lookup(self, name: str) -> PatchModule:
        try:
            return self._modules[name]
        except KeyError:
            raise UnknownModuleError(name) from None

    def list_all(self) -> _ModuleListing:
        """(name, description) pairs in registration order; for discovery only."""
        return _ModuleListing(self._modules)

    def names(self) -> List[str]:
        return list(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)
