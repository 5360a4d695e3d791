from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.module_builder import ModuleBuilder


@pytest.fixture
def module_builder(tmp_path: Path) -> ModuleBuilder:
    """Provide a reusable module directory rooted at the pytest tmp_path."""
    return ModuleBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_tenantaudit_logger() -> Iterator[None]:
    """Undo handlers installed by configure_logging so caplog sees records."""
    yield
    for name in ("tenantaudit", "tenantaudit.skipped"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
