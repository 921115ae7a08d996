from fastapi import Request

from leave_service.core.exceptions import ValidationError
from leave_service.core.storage import Storage


def get_storage(request: Request) -> Storage:
    """
    startup에서 app.state.storage에 만들어 둔 저장소를 주입.
    테스트에서는 app.dependency_overrides로 교체한다.
    """
    return request.app.state.storage


def _parse_id(value: str, label: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid {label} ID") from None


def teacher_path_id(teacher_id: str) -> int:
    return _parse_id(teacher_id, "teacher")


def leave_path_id(leave_id: str) -> int:
    return _parse_id(leave_id, "leave")
