from __future__ import annotations

from dineflow.application.dto.responses import WaitlistEntryResponse
from dineflow.domain.waitlist.entities import WaitlistEntry


def to_waitlist_entry_response(entry: WaitlistEntry) -> WaitlistEntryResponse:
    return WaitlistEntryResponse(
        entryId=str(entry.entry_id),
        partyName=entry.party_name,
        partySize=entry.party_size,
        phone=entry.phone,
        status=entry.status.value,
        notified=entry.notified,
        estimatedWaitMinutes=entry.estimated_wait_minutes,
        createdAt=entry.created_at,
    )
