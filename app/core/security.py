"""
security.py

비밀번호 해싱 및 JWT 토큰 생성을 담당하는 보안 유틸리티 모음.

이 파일은 회원 관리 로직에서 사용하는
저수준(low-level) 보안 기능만을 제공하며,
라우터나 비즈니스 로직은 포함하지 않는다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt)
- JWT Access Token 생성
- 관리자 초대용 registration token 생성

설계 원칙:
- 로그인/토큰 발급 API는 이 서비스 범위 밖 (토큰 검증만 수행)
- 시간 기반(exp) 만료는 UTC 기준으로 처리

관련 파일:
- app.core.config        : JWT 시크릿 키 및 만료 설정
- app.core.deps          : 토큰을 실제로 검증하는 인증 의존성
- app.services.users     : 비밀번호 변경 / 초대 토큰 발급

"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from passlib.context import CryptContext

from app.core.config import settings


# bcrypt 기반 비밀번호 해싱 컨텍스트
# deprecated="auto"로 향후 알고리즘 교체 가능하도록 설정

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


"""
비밀번호 해싱 함수

- 평문 비밀번호를 bcrypt 해시로 변환
- DB에는 해시 값만 저장

"""

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


"""
Access Token 생성 함수

- subject(sub): 사용자 식별자(user_id)
- 관리자 API 요청 인증에 사용 (Authorization: Bearer)
- 운영에서는 외부 인증 서비스가 발급하고, 이 함수는 스크립트/테스트에서 사용

"""

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": subject,
        "type": "access",
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# 관리자 초대 링크용 토큰 (20바이트 hex)
def create_registration_token() -> str:
    return secrets.token_hex(20)
