"""
로깅 시스템 설정
구조화된 JSON 로깅 및 파일 로테이션
"""

import json
import logging
import logging.handlers
import sys
import time
import traceback
from datetime import datetime, timezone
from functools import wraps

from loguru import logger as loguru_logger

from strategy_evolution.config.settings import settings

LOG_DIR = settings.logging.log_dir
LOG_DIR.mkdir(parents=True, exist_ok=True)

# LogRecord 예약 속성과 겹치지 않는 추가 필드
_STRUCTURED_FIELDS = (
    "strategy_id",
    "variant",
    "policy",
    "sharpe_ratio",
    "total_return",
    "num_trades",
    "metric",
    "value",
)


class JSONFormatter(logging.Formatter):
    """JSON 형식 포맷터"""

    def format(self, record: logging.LogRecord) -> str:
        """로그 레코드를 JSON으로 포맷"""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        # 추가 필드
        for field in _STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        # 예외 정보
        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data, ensure_ascii=False, default=str)


class LoggerManager:
    """로거 관리자"""

    def __init__(self, name: str = "strategy_evolution"):
        """
        초기화

        Args:
            name: 로거 이름
        """
        self.name = name
        self.logger = self._setup_logger()
        self._setup_loguru()

    def _setup_logger(self) -> logging.Logger:
        """표준 로거 설정"""
        logger = logging.getLogger(self.name)

        # 이미 설정된 경우 반환
        if logger.handlers:
            return logger

        logger.setLevel(getattr(logging, settings.logging.log_level))

        # 콘솔 핸들러
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(console_handler)

        # 파일 핸들러 (JSON)
        file_handler = logging.handlers.RotatingFileHandler(
            LOG_DIR / f"{self.name}.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

        return logger

    def _setup_loguru(self):
        """Loguru 설정 (파일 전용)"""
        loguru_logger.remove()

        loguru_logger.add(
            LOG_DIR / "loguru_{time:YYYY-MM-DD}.log",
            format="{message}",
            level="DEBUG",
            rotation="00:00",
            retention="30 days",
            serialize=True,  # JSON 직렬화
            encoding="utf-8",
        )

        loguru_logger.add(
            LOG_DIR / "loguru_error.log",
            format="{message}",
            level="ERROR",
            rotation="10 MB",
            retention="7 days",
            serialize=True,
            encoding="utf-8",
        )

    def debug(self, message: str, **kwargs):
        """디버그 로그"""
        self.logger.debug(message, extra=kwargs)
        loguru_logger.bind(**kwargs).debug(message)

    def info(self, message: str, **kwargs):
        """정보 로그"""
        self.logger.info(message, extra=kwargs)
        loguru_logger.bind(**kwargs).info(message)

    def warning(self, message: str, **kwargs):
        """경고 로그"""
        self.logger.warning(message, extra=kwargs)
        loguru_logger.bind(**kwargs).warning(message)

    def error(self, message: str, **kwargs):
        """에러 로그"""
        self.logger.error(message, exc_info=True, extra=kwargs)
        loguru_logger.bind(**kwargs).error(message)

    def log_performance(self, metric: str, value: float, **kwargs):
        """성능 메트릭 로그"""
        self.debug(f"Performance metric: {metric}={value}", metric=metric, value=value, **kwargs)


# 전역 로거 인스턴스
logger = LoggerManager()


def log_execution_time(func):
    """실행 시간 로깅 데코레이터"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
            logger.log_performance(f"{func.__name__}_seconds", time.time() - start_time)
            return result
        except Exception as e:
            execution_time = time.time() - start_time
            logger.error(f"{func.__name__} failed after {execution_time:.3f}s: {e}")
            raise

    return wrapper
