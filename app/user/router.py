import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.database import get_mongodb, USERS, POSTS
from app.errors import server_error_boundary
from app.ids import parse_object_id
from app.user.credentials import PasswordPolicy, get_password_policy
from app.user.models import User
from app.user.schemas import UserCreateRequest, UserUpdateRequest, UserProfileResponse

router = APIRouter()

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
EMAIL_EXISTS = "Email already exists"


def build_name_age_query(name_starts_with: Optional[str], max_age: Optional[float]) -> dict:
    """이름 접두어(대소문자 무시) + 최대 나이(미만) 조건. 값이 없으면 해당 조건은 제외"""
    query = {}
    if name_starts_with:
        query["userName"] = {"$regex": f"^{re.escape(name_starts_with)}", "$options": "i"}
    if max_age is not None:
        query["age"] = {"$lt": max_age}
    return query


def build_age_range_query(min_age: Optional[float], max_age: Optional[float]) -> dict:
    """minAge <= age <= maxAge (양 끝 포함)"""
    age = {}
    if min_age is not None:
        age["$gte"] = min_age
    if max_age is not None:
        age["$lte"] = max_age
    return {"age": age} if age else {}


@router.post("/signup", response_model=User, summary="회원가입",
             description="입력값을 검증한 뒤 사용자를 생성합니다. 이미 존재하는 이메일이면 400 을 반환합니다.")
async def signup(
    user_create: UserCreateRequest,
    mongodb: AsyncIOMotorDatabase = Depends(get_mongodb),
    password_policy: PasswordPolicy = Depends(get_password_policy),
):
    with server_error_boundary("signup"):
        if await mongodb[USERS].find_one({"email": user_create.email}):
            raise HTTPException(status_code=400, detail=EMAIL_EXISTS)

        new_user = user_create.model_dump()
        new_user["password"] = password_policy.prepare(user_create.password)
        try:
            result = await mongodb[USERS].insert_one(new_user)
        except DuplicateKeyError:
            # find_one 이후 동시에 가입한 경우 유니크 인덱스가 막아줌
            raise HTTPException(status_code=400, detail=EMAIL_EXISTS)

        new_user["_id"] = result.inserted_id
        logger.info(f"회원가입 완료: {new_user['_id']}")
        return new_user


@router.put("/{user_id}", response_model=User, summary="유저 정보 수정",
            description="전체 필드를 다시 검증한 뒤 id 에 해당하는 사용자를 덮어씁니다.")
async def update_user(
    user_id: str,
    user_update: UserUpdateRequest,
    mongodb: AsyncIOMotorDatabase = Depends(get_mongodb),
    password_policy: PasswordPolicy = Depends(get_password_policy),
):
    with server_error_boundary("update_user"):
        object_id = parse_object_id(user_id)
        if object_id is None:
            raise HTTPException(status_code=404, detail=USER_NOT_FOUND)

        changes = user_update.model_dump()
        changes["password"] = password_policy.prepare(user_update.password)
        try:
            user = await mongodb[USERS].find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise HTTPException(status_code=400, detail=EMAIL_EXISTS)

        if not user:
            raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
        return user


@router.delete("/{user_id}", response_model=User, summary="회원 삭제", description="id 에 해당하는 사용자를 삭제하고 삭제된 정보를 반환합니다.")
async def delete_user(user_id: str, mongodb: AsyncIOMotorDatabase = Depends(get_mongodb)):
    with server_error_boundary("delete_user"):
        object_id = parse_object_id(user_id)
        user = await mongodb[USERS].find_one_and_delete({"_id": object_id}) if object_id else None
        if not user:
            raise HTTPException(status_code=404, detail=USER_NOT_FOUND)

        logger.info(f"회원 삭제 완료: {user_id}")
        return user


@router.get("/search", response_model=List[User], summary="이름/나이 검색",
            description="userName 이 nameStartsWith 로 시작하고 (대소문자 무시) age 가 maxAge 미만인 사용자를 조회합니다.")
async def search_users(
    nameStartsWith: Optional[str] = Query(None, description="이름 접두어"),
    maxAge: Optional[float] = Query(None, description="최대 나이 (미포함)"),
    mongodb: AsyncIOMotorDatabase = Depends(get_mongodb),
):
    with server_error_boundary("search_users"):
        query = build_name_age_query(nameStartsWith, maxAge)
        return await mongodb[USERS].find(query).to_list(length=None)


@router.get("/search/age", response_model=List[User], summary="나이 범위 검색",
            description="age 가 minAge 이상 maxAge 이하인 사용자를 조회합니다.")
async def search_users_by_age(
    minAge: Optional[float] = Query(None, description="최소 나이 (포함)"),
    maxAge: Optional[float] = Query(None, description="최대 나이 (포함)"),
    mongodb: AsyncIOMotorDatabase = Depends(get_mongodb),
):
    with server_error_boundary("search_users_by_age"):
        query = build_age_range_query(minAge, maxAge)
        return await mongodb[USERS].find(query).to_list(length=None)


@router.get("", response_model=List[User], summary="전체 유저 조회", description="모든 사용자를 조회합니다.")
async def get_users(mongodb: AsyncIOMotorDatabase = Depends(get_mongodb)):
    with server_error_boundary("get_users"):
        return await mongodb[USERS].find().to_list(length=None)


@router.get("/{user_id}/profile", response_model=UserProfileResponse, summary="프로필 조회",
            description="사용자 정보와 해당 사용자가 작성한 게시글 목록을 함께 반환합니다.")
async def get_user_profile(user_id: str, mongodb: AsyncIOMotorDatabase = Depends(get_mongodb)):
    with server_error_boundary("get_user_profile"):
        object_id = parse_object_id(user_id)
        user = await mongodb[USERS].find_one({"_id": object_id}) if object_id else None
        if not user:
            raise HTTPException(status_code=404, detail=USER_NOT_FOUND)

        # users 에 posts 필드가 없으므로 posts.userID 로 역조회
        user["posts"] = await mongodb[POSTS].find({"userID": object_id}).to_list(length=None)
        return user
