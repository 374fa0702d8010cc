"""Port for reading reference rows from the backing store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from labelcheck.domain.model import DatasetName, ReferenceEntry


@runtime_checkable
class ReferenceStore(Protocol):
    """Paginated read access to the active rows of a reference dataset.

    The store caps every request at ``max_page_size`` rows, silently. Callers that want a whole
    dataset must keep requesting pages until one comes back short. Failures are raised as
    ``ReferenceStoreError``.
    """

    max_page_size: int

    async def list_active(
        self,
        dataset: DatasetName,
        *,
        offset: int,
        limit: int,
    ) -> Sequence[ReferenceEntry]: ...


__all__ = ["ReferenceStore"]
