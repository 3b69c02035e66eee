from uuid import UUID

from pydantic import BaseModel


class NotificationReadPayload(BaseModel):
    user_id: UUID
