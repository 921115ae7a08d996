from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    API 스키마 공통 부모.
    파이썬 쪽은 snake_case, JSON은 camelCase (teacherId, leaveType ...).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


def coerce_date(value: Any) -> Any:
    """
    datetime 객체나 ISO datetime 문자열("2025-03-01T00:00:00.000Z")을 date로 변환.
    그 외 값은 그대로 넘겨 pydantic의 date 검증에 맡긴다.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value
