# fam/core/exceptions.py

"""
조회 엔진(필터/정렬/페이지)과 필드 매핑에서 사용하는 예외 계층입니다.

- QueryError 계열: 클라이언트 입력 오류 (라우터에서 400 으로 변환)
- TranslationError: 도메인 → 저장소 표현식 변환 실패 (설정/프로그래밍 오류, 500)
- FieldMapError: 애플리케이션 시작 시점의 필드 매핑 테이블 오류
"""

from typing import Iterable, Optional


class QueryError(Exception):
    """클라이언트가 보낸 조회 조건이 잘못되었을 때의 기본 예외입니다."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FilterSyntaxError(QueryError):
    """필터 DSL 문자열을 토큰화/파싱할 수 없을 때 발생합니다."""

    def __init__(self, message: str, position: Optional[int] = None):
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.position = position


class FilterValidationError(QueryError):
    """구문은 맞지만 필드/연산자/값이 허용되지 않을 때 발생합니다."""


class IncludeNotAllowedError(QueryError):
    def __init__(self, include: str, allowed: Iterable[str]):
        allowed = sorted(allowed)
        super().__init__(
            f"Include '{include}' is not allowed. Allowed includes: {', '.join(allowed) or '(none)'}"
        )
        self.include = include
        self.allowed = allowed


class FieldSelectionError(QueryError):
    """fields 로 요청한 필드가 없거나 선택할 수 없을 때 발생합니다."""


class PaginationError(QueryError):
    """page / page_size 가 1 미만일 때 발생합니다."""


class TranslationError(Exception):
    """
    도메인 엔티티 기준 술어(predicate)를 저장소 엔티티 기준으로 다시 쓸 수 없을 때 발생합니다.
    저장소 호출 이전에 발생하며, 클라이언트 입력 오류가 아니므로 QueryError 를 상속하지 않습니다.
    """

    def __init__(self, message: str, member: Optional[str] = None):
        super().__init__(message)
        self.member = member


class FieldMapError(Exception):
    """도메인/저장소 필드 매핑 테이블 구성이 잘못되었을 때 (모듈 임포트 시점) 발생합니다."""
