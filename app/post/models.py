from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.ids import stringify_id


def to_bson_datetime(value: datetime) -> datetime:
    # MongoDB 는 UTC 기준 밀리초 단위까지만 저장 (tz 정보 X)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now():
    return to_bson_datetime(datetime.now(timezone.utc))


class Post(BaseModel):
    """posts 컬렉션 문서 (userID → users._id)"""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str = Field(..., alias="_id")
    title: Optional[str] = None
    content: Optional[str] = None
    userID: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("id", "userID", mode="before")
    @classmethod
    def convert_object_id(cls, value):
        return stringify_id(value)
