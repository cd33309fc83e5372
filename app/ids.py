from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId


def parse_object_id(value) -> Optional[ObjectId]:
    """문자열 id 를 ObjectId 로 변환. 형식이 잘못되면 None (존재하지 않는 문서로 취급)"""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def stringify_id(value):
    # MongoDB _id → 문자열 변환
    if isinstance(value, ObjectId):
        return str(value)
    return value
