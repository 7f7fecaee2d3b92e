"""分析结果缓存（进程内，TTL + 定时清理）"""
import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "analysis_cache_sweep"


@dataclass
class CacheEntry:
    """缓存条目"""
    key: str
    value: Any
    created_at: float


@dataclass
class CacheMetrics:
    """缓存计数"""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    shared: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0


class ResultCache:
    """
    分析结果缓存

    - 读取时检查 TTL，过期条目视为未命中
    - 同一 key 同时只有一个计算在进行，其余请求等待同一结果
    - 过期条目由后台定时任务批量清理（start_sweeper / shutdown）
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        sweep_interval_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._in_flight: Dict[str, Future] = {}
        self._lock = threading.Lock()
        self._metrics = CacheMetrics()
        self._scheduler: Optional[BackgroundScheduler] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self.ttl_seconds

    def get_or_compute(self, key: str, compute: Callable[[], Any]) -> Tuple[Any, bool]:
        """
        命中直接返回，否则计算并写入

        Returns:
            (value, cached)：cached 为 True 表示本次调用没有自行计算
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if not self._is_expired(entry, self._clock()):
                    self._metrics.hits += 1
                    logger.debug("Analysis cache hit: %s", key[:12])
                    return entry.value, True
                del self._entries[key]
                self._metrics.evictions += 1

            pending = self._in_flight.get(key)
            if pending is None:
                pending = Future()
                self._in_flight[key] = pending
                owner = True
            else:
                self._metrics.shared += 1
                owner = False

        if not owner:
            logger.debug("Waiting for in-flight analysis: %s", key[:12])
            return pending.result(), True

        try:
            value = compute()
        except BaseException as e:
            # 含 KeyboardInterrupt / SystemExit：在途 key 必须释放并通知等待者
            with self._lock:
                self._in_flight.pop(key, None)
            pending.set_exception(e)
            raise

        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())
            self._in_flight.pop(key, None)
            self._metrics.misses += 1
        pending.set_result(value)
        logger.debug("Analysis cache miss, stored: %s", key[:12])
        return value, False

    def sweep(self) -> int:
        """清理过期条目，返回清理数量"""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
            for key in expired:
                del self._entries[key]
            self._metrics.evictions += len(expired)

        if expired:
            logger.info("Analysis cache sweep evicted %d entries", len(expired))
        return len(expired)

    def start_sweeper(self) -> None:
        """启动后台定时清理（应在服务启动时调用）"""
        if self._scheduler is not None:
            logger.warning("Analysis cache sweeper already running")
            return

        self._scheduler = BackgroundScheduler(
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
            },
            timezone="UTC",
        )
        self._scheduler.add_job(
            func=self.sweep,
            trigger=IntervalTrigger(seconds=self.sweep_interval_seconds),
            id=SWEEP_JOB_ID,
            replace_existing=True,
            name="Analysis result cache sweep",
        )
        self._scheduler.start()
        logger.info("Analysis cache sweeper started (interval=%ss)", self.sweep_interval_seconds)

    def shutdown(self, wait: bool = True) -> None:
        """停止后台清理"""
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Analysis cache sweeper shut down")

    @property
    def sweeper_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            size = len(self._entries)
            in_flight = len(self._in_flight)
        return {
            "size": size,
            "in_flight": in_flight,
            "hits": self._metrics.hits,
            "misses": self._metrics.misses,
            "evictions": self._metrics.evictions,
            "shared": self._metrics.shared,
            "hit_rate": round(self._metrics.hit_rate, 2),
            "ttl_seconds": self.ttl_seconds,
            "sweeper_running": self.sweeper_running,
            "uptime_seconds": round(time.time() - self._metrics.start_time, 0),
        }
