import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from app.database import get_mongodb, USERS, POSTS
from app.errors import server_error_boundary
from app.ids import parse_object_id
from app.post.models import Post, to_bson_datetime, utc_now
from app.post.schemas import PostCreateRequest, PostUpdateRequest, PostOwnerRequest, PostWithUserResponse

router = APIRouter()

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"
USER_NOT_FOUND = "User not found"


def is_owner(post: dict, user_id: Optional[str]) -> bool:
    # 요청 본문의 userID 와 게시글 작성자 비교 (인증된 사용자 정보가 아님)
    return user_id is not None and str(post.get("userID")) == user_id


def to_document(request: PostCreateRequest, user_object_id) -> dict:
    document = request.model_dump()
    document["userID"] = user_object_id
    document["date"] = to_bson_datetime(document["date"]) if document.get("date") else utc_now()
    return document


@router.post("", response_model=Post, summary="게시글 작성",
             description="작성자(userID)가 존재할 때만 게시글을 저장합니다. date 가 없으면 현재 시각으로 저장합니다.")
async def create_post(post_create: PostCreateRequest, mongodb: AsyncIOMotorDatabase = Depends(get_mongodb)):
    with server_error_boundary("create_post"):
        user_object_id = parse_object_id(post_create.userID)
        user = await mongodb[USERS].find_one({"_id": user_object_id}) if user_object_id else None
        if not user:
            raise HTTPException(status_code=404, detail=USER_NOT_FOUND)

        new_post = to_document(post_create, user_object_id)
        result = await mongodb[POSTS].insert_one(new_post)
        new_post["_id"] = result.inserted_id

        logger.info(f"게시글 작성 완료: {new_post['_id']} (user={post_create.userID})")
        return new_post


@router.delete("/{post_id}", response_model=Post, summary="게시글 삭제",
               description="본문의 userID 가 작성자와 같을 때만 삭제합니다.")
async def delete_post(
    post_id: str,
    owner: Optional[PostOwnerRequest] = Body(None),
    mongodb: AsyncIOMotorDatabase = Depends(get_mongodb),
):
    with server_error_boundary("delete_post"):
        object_id = parse_object_id(post_id)
        post = await mongodb[POSTS].find_one({"_id": object_id}) if object_id else None
        if not post:
            raise HTTPException(status_code=404, detail=POST_NOT_FOUND)

        if not is_owner(post, owner.userID if owner else None):
            raise HTTPException(status_code=403, detail="You are not authorized to delete this post")

        await mongodb[POSTS].delete_one({"_id": object_id})
        logger.info(f"게시글 삭제 완료: {post_id}")
        return post


@router.put("/{post_id}", response_model=Post, summary="게시글 수정",
            description="전체 필드를 검증하고, 본문의 userID 가 작성자와 같을 때만 수정합니다.")
async def update_post(
    post_id: str,
    post_update: PostUpdateRequest,
    mongodb: AsyncIOMotorDatabase = Depends(get_mongodb),
):
    with server_error_boundary("update_post"):
        object_id = parse_object_id(post_id)
        post = await mongodb[POSTS].find_one({"_id": object_id}) if object_id else None
        if not post:
            raise HTTPException(status_code=404, detail=POST_NOT_FOUND)

        if not is_owner(post, post_update.userID):
            raise HTTPException(status_code=403, detail="You are not authorized to update this post")

        changes = post_update.model_dump(exclude_none=True)
        if "date" in changes:
            changes["date"] = to_bson_datetime(changes["date"])
        changes["userID"] = post["userID"]
        return await mongodb[POSTS].find_one_and_update(
            {"_id": object_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )


@router.get("", response_model=List[Post], summary="전체 게시글 조회", description="모든 게시글을 조회합니다.")
async def get_posts(mongodb: AsyncIOMotorDatabase = Depends(get_mongodb)):
    with server_error_boundary("get_posts"):
        return await mongodb[POSTS].find().to_list(length=None)


@router.get("/withUsers", response_model=List[PostWithUserResponse], summary="작성자 포함 게시글 조회",
            description="모든 게시글을 작성자(userID) 정보를 펼쳐서 반환합니다. 작성자가 삭제된 경우 null 입니다.")
async def get_posts_with_users(mongodb: AsyncIOMotorDatabase = Depends(get_mongodb)):
    with server_error_boundary("get_posts_with_users"):
        posts = await mongodb[POSTS].find().to_list(length=None)

        user_ids = list({post["userID"] for post in posts if post.get("userID") is not None})
        users = await mongodb[USERS].find({"_id": {"$in": user_ids}}).to_list(length=None)
        users_by_id = {user["_id"]: user for user in users}

        for post in posts:
            post["userID"] = users_by_id.get(post.get("userID"))
        return posts


@router.get("/sort", response_model=List[Post], summary="최신순 게시글 조회", description="모든 게시글을 date 기준 내림차순으로 반환합니다.")
async def get_posts_sorted(mongodb: AsyncIOMotorDatabase = Depends(get_mongodb)):
    with server_error_boundary("get_posts_sorted"):
        return await mongodb[POSTS].find().sort("date", DESCENDING).to_list(length=None)
