"""Compute catalog package: provider-agnostic Protocol and page handler type."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Mapping, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from .models import InstanceTypeInfo

# Receives one page of descriptors and whether it is the last one.
# Returning False stops the enumeration.
PageHandler = Callable[["list[InstanceTypeInfo]", bool], bool]


@runtime_checkable
class ComputeCatalog(Protocol):
    """Protocol that every compute catalog client must satisfy."""

    def enumerate_instance_types(
        self,
        filters: Mapping[str, Sequence[str]],
        page_handler: PageHandler,
    ) -> None:
        """Call page_handler once per page until exhausted or the handler returns False.

        Raises whatever the underlying SDK raises on failure.
        """
        ...
