from __future__ import annotations

from typing import Protocol

from plugdash.models.smart_plug import AggregatedBucket, QueryParameters, RawSample


class SmartPlugSource(Protocol):
    async def fetch(
        self, params: QueryParameters
    ) -> list[RawSample] | list[AggregatedBucket]: ...

    async def aclose(self) -> None: ...
