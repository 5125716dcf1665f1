from typing import Optional, Annotated
from fastapi import Header, HTTPException
from config.settings import settings
import hmac

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]
StaffIdHeader = Annotated[Optional[str], Header(alias="X-Staff-Id")]

def require_staff(authorization: AuthHeader = None, staff_id: StaffIdHeader = None):
    """
    교직원 Bearer 토큰 검증 후 요청 주체(principal)를 반환
    - 반환값은 서비스 호출 시 actor 로 명시적으로 전달한다
    - X-Staff-Id 는 토큰으로 검증되지 않는 자기 신고 값이므로 claimed_staff_id 로만 보관
    """
    if not settings.STAFF_API_TOKEN:
        raise HTTPException(status_code=500, detail="Server token not configured")

    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # "Bearer <token>" 파싱
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail="Invalid auth scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 타이밍 안전 비교
    if not hmac.compare_digest(token.strip(), settings.STAFF_API_TOKEN):
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"role": "staff", "claimed_staff_id": (staff_id or "").strip() or None}


def actor_label(principal: dict) -> str:
    """감사 로그용 주체 표기 (예: 'staff', 'staff(claimed:STF-7)')"""
    claimed = principal.get("claimed_staff_id")
    if claimed:
        return f"{principal['role']}(claimed:{claimed})"
    return principal["role"]
