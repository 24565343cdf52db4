"""Shared fixtures: an in-memory ComputeCatalog."""

from __future__ import annotations

import pytest

from instance_type_catalog.catalog.models import InstanceTypeInfo


class FakeCatalog:
    """Serves pre-built pages of instance type names; optionally fails after N pages."""

    def __init__(self, pages: list[list[str]], fail_after: int | None = None, error: Exception | None = None):
        self.pages = pages
        self.fail_after = fail_after
        self.error = error or RuntimeError("connection reset")
        self.calls: list[dict] = []

    def enumerate_instance_types(self, filters, page_handler) -> None:
        self.calls.append(dict(filters))
        for index, names in enumerate(self.pages):
            if self.fail_after is not None and index >= self.fail_after:
                raise self.error
            page = [InstanceTypeInfo(instance_type=name) for name in names]
            if not page_handler(page, index == len(self.pages) - 1):
                return


@pytest.fixture
def make_catalog():
    return FakeCatalog
