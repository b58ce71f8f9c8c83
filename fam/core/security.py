# fam/core/security.py

"""
비밀번호 해싱 및 검증 유틸리티 모듈입니다.
인증/인가(JWT, 권한 평가)는 이 서비스의 범위가 아니며, 사용자 비밀번호 저장에만 사용합니다.
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    일반 텍스트 비밀번호와 해싱된 비밀번호를 비교하여 일치하는지 확인합니다.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    주어진 비밀번호를 해싱합니다.
    """
    logger.debug("Hashing password.")
    return pwd_context.hash(password)
