# models/principal.py

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel


class Principal(BaseModel):
    """
    The authenticated caller of a request.
    Built from the Supabase session on every request; never stored
    and never carries a role (roles are re-derived per check).
    """

    id: str
    email: str
    session_valid_until: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.session_valid_until is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.session_valid_until
