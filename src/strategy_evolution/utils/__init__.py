"""
Utilities
로깅 및 Prometheus 메트릭
"""
