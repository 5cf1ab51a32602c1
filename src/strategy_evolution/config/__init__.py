"""
Configuration
환경 변수 / .env 기반 설정
"""

from .settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
