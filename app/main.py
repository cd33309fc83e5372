import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.database import MongoDB, ensure_indexes
from app.errors import validation_exception_handler
from app.user.router import router as user_router
from app.post.router import router as post_router

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 프로세스 전체에서 하나의 MongoDB 연결을 공유
    app.state.mongodb = MongoDB()
    await ensure_indexes(app.state.mongodb.get_database())
    logger.info("Connected to MongoDB")
    try:
        yield
    finally:
        app.state.mongodb.close()


app = FastAPI(lifespan=lifespan)

app.include_router(user_router, prefix="/api/users", tags=["users"])
app.include_router(post_router, prefix="/api/posts", tags=["posts"])

app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 모든 도메인 허용 (개발용)
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"message": "users / posts API 서버입니다."}


if __name__ == "__main__":
    logger.info(f"Listening on port {PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
