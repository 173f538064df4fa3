"""
Error taxonomy for the todo parsing pipeline.

Every error carries the HTTP status and the user-facing message that the
API returns as {"error": message}.
"""
import anthropic


class TodoAIError(Exception):
    status_code = 500
    message = "AI 분석 중 오류가 발생했습니다. 다시 시도해주세요."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)
        self.detail = detail


class InvalidInput(TodoAIError):
    status_code = 400
    message = "입력 텍스트가 필요합니다."


class ConfigurationError(TodoAIError):
    message = "서비스 설정이 완료되지 않았습니다."


class UpstreamAuthError(TodoAIError):
    message = "AI 서비스 인증 오류가 발생했습니다. API 키를 확인해주세요."


class UpstreamQuotaError(TodoAIError):
    status_code = 429
    message = "AI 서비스 사용량이 초과되었습니다. 잠시 후 다시 시도해주세요."


class ParseError(TodoAIError):
    message = "AI 응답을 처리하는 중 오류가 발생했습니다."


class UpstreamUnknownError(TodoAIError):
    pass


def classify_upstream_error(exc: Exception) -> TodoAIError:
    """
    Map a failure from the model call to the error taxonomy.
    Provider exception types and status codes are checked first; the message
    text is only inspected when the exception carries no structured kind.
    """
    if isinstance(exc, TodoAIError):
        return exc

    detail = str(exc)

    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return UpstreamAuthError(detail)
    if isinstance(exc, anthropic.RateLimitError):
        return UpstreamQuotaError(detail)
    if isinstance(exc, anthropic.APIStatusError):
        if exc.status_code in (401, 403):
            return UpstreamAuthError(detail)
        if exc.status_code == 429:
            return UpstreamQuotaError(detail)
        return UpstreamUnknownError(detail)

    # Last resort: no structured kind available
    lowered = detail.lower()
    if "api key" in lowered or "api_key" in lowered:
        return UpstreamAuthError(detail)
    if "quota" in lowered or "rate limit" in lowered:
        return UpstreamQuotaError(detail)
    return UpstreamUnknownError(detail)
