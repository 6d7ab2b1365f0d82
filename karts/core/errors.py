"""
도메인 예외

서비스 계층은 HTTPException 대신 아래 예외를 던지고,
main.py의 예외 핸들러가 {"detail": ..., "error": ...} JSON으로 변환한다.
"""

from typing import Optional

RETRY_LATER_MESSAGE = "처리에 실패했습니다. 잠시 후 다시 시도해주세요."


class KartsError(Exception):
    """도메인 예외 기본 클래스"""
    code = "error"
    status_code = 400
    default_message = "요청을 처리할 수 없습니다."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.code}


class InvalidFormat(KartsError):
    code = "invalid_format"
    default_message = "「B00001」처럼 영문 대문자 1자 + 숫자 5자리로 입력해주세요."


class InvalidPassword(KartsError):
    code = "invalid_password"
    status_code = 401
    default_message = "패스워드가 올바르지 않습니다."


class PasswordNotConfigured(KartsError):
    code = "password_not_configured"
    status_code = 403
    default_message = "이 코드의 패스워드가 아직 설정되지 않았습니다. 스태프에게 문의해주세요."


class NotPermitted(KartsError):
    code = "not_permitted"
    status_code = 403
    default_message = "이 기능을 사용할 권한이 없습니다."


class IncompleteArtwork(KartsError):
    code = "incomplete_artwork"
    status_code = 409
    default_message = "사진과 해설을 먼저 저장해주세요."


class NothingToDelete(KartsError):
    code = "nothing_to_delete"
    status_code = 409
    default_message = "삭제할 이미지가 없습니다."


class ConfirmationRequired(KartsError):
    code = "confirmation_required"
    status_code = 428
    default_message = "확인이 필요합니다. confirm=true 로 다시 요청해주세요."


class InvalidEntry(KartsError):
    code = "invalid_entry"
    default_message = "나이와 지갑 금액을 올바르게 입력해주세요."


class RemoteFailure(KartsError):
    """저장소/이미지 호스트 오류 (재시도는 사용자가 직접)"""
    code = "remote_failure"
    status_code = 502
    default_message = RETRY_LATER_MESSAGE


class ImageUploadFailed(RemoteFailure):
    """업로드 실패. 클라이언트는 미리보기를 revert_to 로 되돌린다.

    저장된 상태를 읽지 못했으면 (reload=True) revert_to 없이 reload 만 내려가고,
    클라이언트는 작품을 다시 불러온다.
    """
    code = "image_upload_failed"
    default_message = "업로드에 실패했습니다. 잠시 후 다시 시도해주세요."

    def __init__(self, revert_to: Optional[str], message: Optional[str] = None, reload: bool = False):
        super().__init__(message)
        self.revert_to = revert_to
        self.reload = reload

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.reload:
            data["reload"] = True
        else:
            data["revert_to"] = self.revert_to
        return data
