"""
성적 서비스 예외 계층

- NotFound: 학생 입학 번호 조회 실패 → 배치 전체 중단
- ValidationError: 과목/점수 검증 실패 → 항목 단위로 기록 후 계속
- StoreError: 저장소 작업 실패 → 항목 단위로 기록 후 계속
"""


class ResultServiceError(Exception):
    code = "RESULT_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ResultServiceError):
    code = "NOT_FOUND"


class ValidationError(ResultServiceError):
    code = "VALIDATION_ERROR"


class StoreError(ResultServiceError):
    code = "STORE_ERROR"
