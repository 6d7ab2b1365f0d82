"""
로그인 코드 검증 및 역할별 패스워드 정책
"""

from dataclasses import dataclass
from typing import Optional
import logging
import re

from karts.core import timeutil
from karts.core.config import Settings, settings
from karts.core.errors import InvalidFormat, InvalidPassword, NotPermitted, PasswordNotConfigured
from karts.core.roles import Role, code_pattern, role_for_letter
from karts.core.security import Session, get_password_hash, verify_password
from karts.services.document_store import BPASSWORDS, DocumentStore

logger = logging.getLogger(__name__)

FOUR_DIGITS = re.compile(r"^[0-9]{4}$")


@dataclass(frozen=True)
class AuthenticatedCode:
    code: str
    role: Role


def normalize_code(raw: Optional[str]) -> str:
    return (raw or "").strip().upper()


def parse_code(raw: Optional[str], config: Settings = settings) -> AuthenticatedCode:
    """코드 형식 검증 -> (코드, 역할). 형식이 틀리면 InvalidFormat"""
    code = normalize_code(raw)
    if not code_pattern(config).match(code):
        raise InvalidFormat()
    return AuthenticatedCode(code=code, role=role_for_letter(code[0], config))


async def authenticate(
    store: DocumentStore,
    raw_code: Optional[str],
    raw_password: Optional[str],
    config: Settings = settings,
) -> AuthenticatedCode:
    """로그인 검증. 레코드는 읽기만 하고 절대 수정하지 않는다."""
    result = parse_code(raw_code, config)
    password = (raw_password or "").strip()

    if result.role in (Role.PRIMARY, Role.ADMIN):
        if password != config.SHARED_PASSWORD:
            raise InvalidPassword()
        return result

    policy = config.SECONDARY_PASSWORD_POLICY
    if policy == "none":
        return result
    if policy == "any_four_digits":
        if not FOUR_DIGITS.match(password):
            raise InvalidPassword("패스워드는 4자리 숫자로 입력해주세요.")
        return result

    # per_code
    if not password:
        raise InvalidPassword("패스워드를 입력해주세요.")
    info = await store.get(BPASSWORDS, result.code)
    if not info or not info.get("passwordHash"):
        raise PasswordNotConfigured()
    if not verify_password(password, info["passwordHash"]):
        raise InvalidPassword()
    return result


async def set_secondary_password(
    store: DocumentStore,
    session: Session,
    raw_code: Optional[str],
    raw_password: Optional[str],
    config: Settings = settings,
) -> str:
    """작품 전용(secondary) 코드의 4자리 패스워드 설정. 지정된 관리자 코드만 가능"""
    if session.role != Role.ADMIN or session.code != config.BPASSWORD_ADMIN_CODE:
        raise NotPermitted("패스워드 설정 권한이 없습니다.")

    code = normalize_code(raw_code)
    if not code_pattern(config, Role.SECONDARY).match(code):
        example = f"{config.ROLE_LETTERS[1]}00001"
        raise InvalidFormat(f"코드는 {example} 처럼 입력해주세요.")
    password = (raw_password or "").strip()
    if not FOUR_DIGITS.match(password):
        raise InvalidFormat("패스워드는 4자리 숫자로 입력해주세요.")

    await store.set(
        BPASSWORDS,
        code,
        {"passwordHash": get_password_hash(password), "updatedAt": timeutil.utcnow_iso()},
    )
    logger.info(f"secondary password set: code={code} by={session.code}")
    return code
