"""Error kinds raised by the Gemini / Veo services and the credential gate.

Every error carries a localized ``user_message``; the controller shows that
text and logs the full exception.
"""

from typing import Optional


class FortuneShortsError(Exception):
    """Base exception for the fortune shorts services."""

    user_message = "요청을 처리하지 못했습니다."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)
        if message:
            self.user_message = message


class CredentialMissing(FortuneShortsError):
    """No usable API key at call time."""

    user_message = "API 키가 설정되지 않았습니다. API 키를 먼저 입력해주세요."


class CredentialInvalid(FortuneShortsError):
    """The remote API rejected the key."""

    user_message = "API 키가 올바르지 않거나 프로젝트가 존재하지 않습니다. 키를 다시 선택해주세요."


class ParseFailure(FortuneShortsError):
    """Empty or malformed structured response."""

    user_message = "분석 결과를 해석하지 못했습니다. 다시 시도해주세요."


class UriMissing(FortuneShortsError):
    """Finished video job without a downloadable URI (quota or safety filter)."""

    user_message = "Video URI not found. Check quota or safety filters."


class FetchFailure(FortuneShortsError):
    """Downloading the generated video failed."""

    user_message = "Failed to fetch video file from Google server."


class ValidationFailure(FortuneShortsError):
    """The user submitted an empty API key."""

    user_message = "API 키를 입력해주세요."


class TimeoutExceeded(FortuneShortsError):
    """Video job still running after the maximum number of polls."""

    user_message = "영상 생성 시간이 초과되었습니다. 잠시 후 다시 시도해주세요."


# Substrings Google returns when the key itself is the problem
INVALID_KEY_MARKERS = (
    "Requested entity was not found.",
    "API key not valid",
    "API_KEY_INVALID",
    "PERMISSION_DENIED",
)


def is_invalid_key_error(error: Exception) -> bool:
    """Heuristic check for a rejected credential in a remote error message."""
    if isinstance(error, CredentialInvalid):
        return True
    message = str(error)
    return any(marker in message for marker in INVALID_KEY_MARKERS)
