from typing import List

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.post.models import Post
from app.user.models import User


# Request
class UserCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    userName: str = Field(..., min_length=1)
    email: str
    password: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)
    gender: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)

    # 형식만 검사하고 입력값은 그대로 저장 (정규화 X)
    @field_validator("email")
    @classmethod
    def check_email_format(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("must be a valid email")
        return value

    # JSON true/false 가 1/0 으로 바뀌지 않도록
    @field_validator("age", mode="before")
    @classmethod
    def reject_boolean_age(cls, value):
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value


# 수정도 전체 필드를 다시 검증 (부분 수정 X)
class UserUpdateRequest(UserCreateRequest):
    pass


# Response
class UserProfileResponse(User):
    posts: List[Post] = []
