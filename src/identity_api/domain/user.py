import datetime
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    id: Optional[uuid.UUID]
    email: str
    hashed_password: str
    first_name: str = ""
    last_name: str = ""
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.datetime.now(datetime.timezone.utc)
        if self.updated_at is None:
            self.updated_at = self.created_at
