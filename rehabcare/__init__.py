"""
재활 치료 주간 일정 편성 서비스
"""
__version__ = "1.0.0"
