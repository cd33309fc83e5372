import logging
from contextlib import contextmanager

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error"


@contextmanager
def server_error_boundary(action: str):
    """
    핸들러 경계에서 예상하지 못한 예외를 500 으로 바꿔주는 컨텍스트 매니저
    HTTPException 은 그대로 통과시키고, 나머지는 로그만 남기고 상세 내용은 숨긴다.
    """
    try:
        yield
    except HTTPException:
        raise
    except Exception:
        logger.exception(f"[{action}] 처리 중 오류")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)


def first_error_message(errors) -> str:
    # 첫 번째 오류만 보고 (fail-fast)
    if not errors:
        return "Invalid request"
    error = errors[0]
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    msg = error.get("msg", "is invalid")
    if error.get("type") == "extra_forbidden":
        msg = "is not allowed"
    elif error.get("type") == "missing":
        msg = "is required"
    if not loc:
        return msg
    return f'"{".".join(loc)}" {msg}'


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": first_error_message(exc.errors())},
    )
