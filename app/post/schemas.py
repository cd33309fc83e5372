from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.post.models import Post
from app.user.models import User


# Request
class PostCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    userID: str = Field(..., min_length=1)
    date: Optional[datetime] = None  # 없으면 작성 시각


class PostUpdateRequest(PostCreateRequest):
    pass


# 삭제 요청 시 작성자 확인용
class PostOwnerRequest(BaseModel):
    userID: Optional[str] = None


# Response
class PostWithUserResponse(Post):
    userID: Optional[User] = None
