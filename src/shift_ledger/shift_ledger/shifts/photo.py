from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.enums import ShiftAction


class PhotoCapture(Protocol):
    async def capture(self, *, employee_id: str, slot: int, action: ShiftAction) -> Optional[str]:
        """Return an opaque photo reference, or None when the user cancelled."""

        raise NotImplementedError


@dataclass(frozen=True)
class ProvidedPhoto:
    """Capture adapter for requests that already carry an uploaded photo reference."""

    photo_ref: Optional[str] = None

    async def capture(self, *, employee_id: str, slot: int, action: ShiftAction) -> Optional[str]:
        return self.photo_ref or None
