# tests/__init__.py

"""
FAM FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

- `core/`: 조회 엔진(필터 파서/검증기, 표현식 변환기, 정렬 해석기, 필드 매핑, 페이지 조회)
           단위 테스트
- `domains/`: 각 비즈니스 도메인(usr, loc, ven, asset) API 통합 테스트
- `conftest.py`: 데이터베이스 엔진/세션, 테스트 클라이언트 등 공용 픽스처
"""

__title__ = "FAM API Tests"
__description__ = "Test suite for FAM FastAPI application."
__version__ = "0.1.0"
__all__ = []
