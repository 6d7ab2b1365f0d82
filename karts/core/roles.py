"""
역할(Role)

로그인 코드의 첫 글자로만 결정된다. 글자 배정은 배포마다 다르므로
ROLE_LETTERS 설정(작품+추천 / 작품 / 관리자 순)에서 읽는다.
"""

from enum import Enum
import re

from karts.core.config import Settings, settings


class Role(str, Enum):
    PRIMARY = "primary"      # 작품 페이지 + 추천 작품 등록
    SECONDARY = "secondary"  # 작품 페이지만
    ADMIN = "admin"          # 설문 데이터 관리

    @property
    def has_artwork(self) -> bool:
        return self in (Role.PRIMARY, Role.SECONDARY)


_ORDER = (Role.PRIMARY, Role.SECONDARY, Role.ADMIN)


def role_for_letter(letter: str, config: Settings = settings) -> Role | None:
    idx = config.ROLE_LETTERS.find(letter)
    if idx < 0 or len(letter) != 1:
        return None
    return _ORDER[idx]


def letter_for_role(role: Role, config: Settings = settings) -> str:
    return config.ROLE_LETTERS[_ORDER.index(role)]


def code_pattern(config: Settings = settings, role: Role | None = None) -> re.Pattern:
    letters = letter_for_role(role, config) if role else config.ROLE_LETTERS
    return re.compile(rf"^[{letters}][0-9]{{5}}$")
