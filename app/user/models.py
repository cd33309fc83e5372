from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.ids import stringify_id


class User(BaseModel):
    """users 컬렉션 문서 (email 은 유니크 인덱스)"""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str = Field(..., alias="_id")
    userName: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def convert_object_id(cls, value):
        return stringify_id(value)
