from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from dotenv import load_dotenv
import logging
import os

# 환경 변수 로드
load_dotenv()

logger = logging.getLogger(__name__)

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB", "myapp")

USERS = "users"
POSTS = "posts"


class MongoDB:
    def __init__(self, uri: str = MONGO_URI, db_name: str = MONGO_DB_NAME):
        self.client = AsyncIOMotorClient(uri)
        self.database = self.client[db_name]

    def get_database(self):
        return self.database

    def close(self):
        self.client.close()


async def ensure_indexes(database: AsyncIOMotorDatabase):
    # users.email 유니크 제약은 DB 레벨에서 보장
    await database[USERS].create_index("email", unique=True)
    logger.info("MongoDB 인덱스 확인 완료")


# FastAPI 의존성 주입을 위한 MongoDB 연결 함수
# 연결은 lifespan 에서 한 번만 만들고 app.state 에 보관
def get_mongodb(request: Request):
    return request.app.state.mongodb.get_database()
