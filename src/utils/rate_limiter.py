# src/utils/rate_limiter.py
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict


@dataclass
class RateLimitInfo:
    """한 번의 요청 허용 여부 판단 결과."""
    allowed: bool
    limit: int
    remaining: int
    retry_after: float

    def to_headers(self) -> Dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(max(0, self.remaining)),
        }
        if not self.allowed:
            headers["X-RateLimit-Reset"] = str(int(time.time() + self.retry_after))
            headers["Retry-After"] = str(max(1, int(round(self.retry_after))))
        return headers


class SlidingWindowRateLimiter:
    """
    키(클라이언트 주소)별 슬라이딩 윈도우 요청 제한기.

    프로세스 시작 시 한 번 생성하여 WSGI 애플리케이션에 주입합니다. 여러 요청 스레드에서
    동시에 호출되므로 내부 상태는 잠금으로 보호합니다. 요청 처리와 트랜잭션으로 묶이지 않는
    참고용 카운터이며, 프로세스가 재시작되면 초기화됩니다.
    """

    def __init__(self, limit: int = 100, window_seconds: float = 1.0, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def tracked_clients(self) -> int:
        """현재 요청 기록이 남아 있는 클라이언트 수."""
        with self._lock:
            return len(self._requests)

    def _prune(self, key: str, now: float) -> Deque[float]:
        requests = self._requests.get(key)
        if requests is None:
            return deque()
        while requests and now - requests[0] >= self.window_seconds:
            requests.popleft()
        # 빈 윈도우의 키는 남기지 않습니다.
        if not requests:
            del self._requests[key]
        return requests

    def _sweep(self, now: float) -> None:
        # 다시 요청하지 않는 클라이언트의 기록은 윈도우마다 한 번씩 정리합니다.
        for key in list(self._requests):
            self._prune(key, now)
        self._last_sweep = now

    def hit(self, key: str) -> RateLimitInfo:
        """요청 한 건을 기록하고 허용 여부를 반환합니다. 거부된 요청은 기록하지 않습니다."""
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            requests = self._prune(key, now)
            if len(requests) >= self.limit:
                retry_after = self.window_seconds - (now - requests[0])
                return RateLimitInfo(False, self.limit, 0, retry_after)
            requests.append(now)
            self._requests[key] = requests
            return RateLimitInfo(True, self.limit, self.limit - len(requests), 0.0)

    def get_stats(self, key: str) -> Dict[str, int]:
        with self._lock:
            requests = self._prune(key, self._clock())
            return {"requests": len(requests), "remaining": max(0, self.limit - len(requests))}

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()
