"""
Stock Checklist - 재무 지표 체크리스트 평가 엔진

- core: 설정, 로깅, DB, 예외, 규칙 모델/인터페이스
- checklist: 필드 카탈로그, 연산자, 피연산자 해석, 평가기
- ingest: 지표 데이터 소스 (정적, 폴백)
- storage: 체크리스트 저장소 (인메모리, SQLAlchemy)
- orchestrator: 체크리스트 실행기
- output: 결과 요약
"""

__version__ = "0.1.0"
