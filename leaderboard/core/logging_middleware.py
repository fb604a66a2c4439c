import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("leaderboard")

REQUEST_ID_HEADER = "X-Request-ID"
CLAIM_PATH = "/claim-points"


def claim_outcome(status_code: int) -> str:
    """claim 응답 코드로 본 처리 결과

    - committed: 잔액/이력 모두 반영
    - rejected: 요청 오류 또는 사용자 없음 (트랜잭션 미반영)
    - aborted: 트랜잭션 롤백
    """
    if status_code < 400:
        return "committed"
    if status_code < 500:
        return "rejected"
    return "aborted"


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청마다 request id 를 붙여 요청/응답/소요 시간을 기록

    claim 요청은 응답 코드로 판정한 처리 결과를 함께 남긴다.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        prefix = f"[{request_id}] {request.method} {request.url.path}"

        logger.info(f"{prefix} started")
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"{prefix} failed with unhandled error")
            raise

        duration_ms = (time.time() - start) * 1000
        message = f"{prefix} -> {response.status_code} in {duration_ms:.1f}ms"
        if request.url.path == CLAIM_PATH:
            message += f" (claim {claim_outcome(response.status_code)})"

        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
