"""Exclude-list matching and the filtered instance type listing."""

from __future__ import annotations

import logging
from typing import Sequence

from ..config import EMPTY_LIST_EXCLUDES_ALL
from ..exceptions import CatalogFetchError
from . import ComputeCatalog
from .matcher import ExcludeMatcher
from .models import InstanceTypeInfo

logger = logging.getLogger(__name__)

# Server-side filter, not configurable.
HVM_FILTER: dict[str, list[str]] = {"supported-virtualization-type": ["hvm"]}


class InstanceCatalogFilter:
    """Lists hvm instance types from a catalog, minus the excluded ones."""

    def __init__(
        self,
        catalog: ComputeCatalog,
        exclude_list: Sequence[str],
        *,
        match_mode: str = "exact",
        empty_list_excludes_all: bool = EMPTY_LIST_EXCLUDES_ALL,
    ):
        self._catalog = catalog
        self._empty_list_excludes_all = empty_list_excludes_all
        # No matcher for an empty list; is_excluded() then falls back to the policy flag
        self._matcher: ExcludeMatcher | None = None
        if exclude_list:
            self._matcher = ExcludeMatcher(exclude_list, match_mode)

    def is_excluded(self, name: str) -> bool:
        if self._matcher is None:
            # Historical quirk: with no exclude list everything is excluded,
            # unless empty_list_excludes_all was turned off.
            return self._empty_list_excludes_all
        return self._matcher.matches(name)

    def list_included_instance_types(self) -> list[InstanceTypeInfo]:
        """Fetch every hvm instance type and drop the excluded ones, keeping catalog order.

        Raises CatalogFetchError if the catalog fails at any point; nothing
        collected before the failure is returned.
        """
        included: list[InstanceTypeInfo] = []
        excluded = 0

        def _handle_page(page: list[InstanceTypeInfo], last_page: bool) -> bool:
            nonlocal excluded
            for descriptor in page:
                if self.is_excluded(descriptor.instance_type):
                    excluded += 1
                    continue
                included.append(descriptor)
            return True

        try:
            self._catalog.enumerate_instance_types(HVM_FILTER, _handle_page)
        except CatalogFetchError:
            raise
        except Exception as exc:
            raise CatalogFetchError(f"unable to fetch instance types: {exc}", cause=exc) from exc

        logger.info(
            "Instance type listing complete",
            extra={"included": len(included), "excluded": excluded},
        )
        return included
