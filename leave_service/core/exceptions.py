class LeaveTrackerError(Exception):
    """서비스 도메인 예외의 공통 부모."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(LeaveTrackerError):
    """입력이 스키마/도메인 제약을 위반한 경우 (400)."""


class DuplicateTeacherError(ValidationError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Teacher with ID '{code}' already exists")


class NotFoundError(LeaveTrackerError):
    """참조한 teacher / leave가 존재하지 않는 경우 (404)."""
