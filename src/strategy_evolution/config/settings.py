"""
프로젝트 설정 관리
환경변수 로드 및 설정 검증
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# 프로젝트 루트 디렉토리
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# .env 파일 로드
load_dotenv(BASE_DIR / '.env')


class BacktestSettings(BaseSettings):
    """백테스트 설정"""
    model_config = SettingsConfigDict(env_prefix='BACKTEST_', env_file='.env', extra='ignore')

    initial_capital: float = Field(100_000.0, gt=0)  # 시작 자본
    rsi_period: int = Field(14, gt=0)
    trading_days_per_year: int = Field(252, gt=0)  # Sharpe 연율화


class OptimizerSettings(BaseSettings):
    """최적화 설정"""
    model_config = SettingsConfigDict(env_prefix='OPTIMIZER_', env_file='.env', extra='ignore')

    variant_count: int = 20
    selection_policy: str = 'sharpe'
    max_workers: Optional[int] = None
    executor: str = 'thread'  # thread | process
    parallel_threshold: int = 32  # 이 개수 미만이면 순차 실행
    seed: Optional[int] = None

    @field_validator('variant_count')
    @classmethod
    def validate_variant_count(cls, v):
        if v < 15:
            raise ValueError('variant_count must be at least 15')
        return v

    @field_validator('executor')
    @classmethod
    def validate_executor(cls, v):
        if v not in ('thread', 'process'):
            raise ValueError("executor must be 'thread' or 'process'")
        return v


class LoggingSettings(BaseSettings):
    """로깅 설정"""
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    log_level: str = 'INFO'
    log_dir: Path = BASE_DIR / 'logs'

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return v


class Settings(BaseSettings):
    """통합 설정"""
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    # 하위 설정들
    backtest: BacktestSettings = Field(default_factory=BacktestSettings)
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def initialize(self):
        """초기화 - 로그 디렉토리 생성"""
        self.logging.log_dir.mkdir(parents=True, exist_ok=True)


# 전역 설정 인스턴스
settings = Settings()

# 초기화
settings.initialize()


def get_settings() -> Settings:
    return settings
