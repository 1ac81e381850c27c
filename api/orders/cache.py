"""
    주문 목록 캐시 (Redis)

    상담 상태 탭별 목록 조회 결과와 탭별 주문 수를 Redis에 보관합니다.
    여러 워커가 같은 Redis를 보므로 한 워커의 무효화가 모든 워커에 반영됩니다.

    키 형식: orders:list:{상태 또는 *}:{조회 조건 해시}
"""

import hashlib
import json
import logging
from typing import Any, Iterable, Optional

import redis

import config

logger = logging.getLogger(__name__)

KEY_PREFIX = "orders:list"

# 상태 필터가 없는 조회(전체 탭) 키에 쓰는 값
ALL_STATUSES = "*"


class OrderListCache:

    def __init__(self, client: redis.Redis, ttl_seconds: int = config.ORDER_LIST_CACHE_TTL):
        self.client = client
        self.ttl_seconds = ttl_seconds

    def _key(self, status: Optional[str], key: str) -> str:
        digest = hashlib.md5(key.encode("utf-8")).hexdigest()
        return f"{KEY_PREFIX}:{status or ALL_STATUSES}:{digest}"

    def get(self, status: Optional[str], key: str) -> Optional[Any]:
        if self.ttl_seconds <= 0:
            return None

        # Redis 장애 시 캐시 없이 DB 조회로 진행
        try:
            cached = self.client.get(self._key(status, key))
        except redis.RedisError as e:
            logger.warning("주문 목록 캐시 조회 실패: %s", e)
            return None

        return json.loads(cached) if cached is not None else None

    def set(self, status: Optional[str], key: str, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return

        try:
            self.client.setex(self._key(status, key), self.ttl_seconds, json.dumps(value, ensure_ascii=False))
        except redis.RedisError as e:
            logger.warning("주문 목록 캐시 저장 실패: %s", e)

    def invalidate(self, statuses: Iterable[Optional[str]]) -> int:
        """
        주어진 상태 탭들과 전체 탭 캐시를 삭제합니다.

        Returns:
            int: 삭제된 캐시 키 수
        """
        targets = {status for status in statuses if status}
        targets.add(ALL_STATUSES)

        try:
            stale_keys = []
            for status in targets:
                # "*" 탭은 glob 문자이므로 이스케이프
                pattern_status = "\\*" if status == ALL_STATUSES else status
                stale_keys.extend(self.client.scan_iter(match=f"{KEY_PREFIX}:{pattern_status}:*"))

            removed = self.client.delete(*stale_keys) if stale_keys else 0

        # 이미 커밋된 변경은 되돌리지 않음 (TTL 이후 갱신)
        except redis.RedisError as e:
            logger.error("주문 목록 캐시 무효화 실패: statuses=%s, error=%s", sorted(targets), e)
            return 0

        logger.debug("주문 목록 캐시 무효화: statuses=%s, removed=%d", sorted(targets), removed)
        return removed

    def clear(self) -> None:
        stale_keys = list(self.client.scan_iter(match=f"{KEY_PREFIX}:*"))
        if stale_keys:
            self.client.delete(*stale_keys)


# 연결은 첫 명령 실행 시점에 생성
order_list_cache = OrderListCache(redis.Redis.from_url(config.REDIS_URL, decode_responses=True))
