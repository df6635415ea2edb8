###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################


import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Add project root first to ensure the local patchkit package takes precedence
    project_root = Path(__file__).resolve().parent.parent.parent
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep user-level PATCHKIT_* settings out of the tests."""
    for var in ("PATCHKIT_MODULES", "PATCHKIT_CATALOG", "PATCHKIT_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    yield
    from patchkit.core.utils import logger

    logger.reset_logger()
