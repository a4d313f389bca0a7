from __future__ import annotations

from dineflow.application.dto.responses import (
    OccupantResponse,
    PositionResponse,
    TableResponse,
)
from dineflow.domain.table.entities import Table


def to_table_response(table: Table) -> TableResponse:
    occupant = None
    if table.occupant is not None:
        occupant = OccupantResponse(
            partyName=table.occupant.party_name,
            partySize=table.occupant.party_size,
            seatedAt=table.occupant.seated_at,
        )
    return TableResponse(
        tableId=str(table.table_id),
        number=table.number,
        capacity=table.capacity,
        status=table.status.value,
        occupant=occupant,
        position=PositionResponse(x=table.position.x, y=table.position.y),
    )
