from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from leave_service.core.deps import get_storage, teacher_path_id
from leave_service.core.storage import Storage
from leave_service.schemas.leave import LeaveRecordRead
from leave_service.schemas.teacher import Teacher as TeacherSchema
from leave_service.schemas.teacher import TeacherCreate
from leave_service.schemas.usage import LeaveBalanceRead, LeaveUsageRead
from leave_service.services import leaves as queries

router = APIRouter(
    prefix="/api/teachers",
    tags=["teachers"],
)


@router.get(
    "",
    response_model=List[TeacherSchema],
)
async def list_teachers(
    storage: Storage = Depends(get_storage),
):
    teachers = await storage.get_teachers()
    return [TeacherSchema.model_validate(t) for t in teachers]


@router.get(
    "/search",
    response_model=List[TeacherSchema],
)
async def search_teachers(
    q: Optional[str] = Query(None),
    storage: Storage = Depends(get_storage),
):
    """
    이름 또는 교사 코드 부분 일치 (대소문자 무시).
    GET /api/teachers/search?q=john
    """
    teachers = await queries.search_teachers(storage, q)
    return [TeacherSchema.model_validate(t) for t in teachers]


@router.get(
    "/{teacher_id}",
    response_model=TeacherSchema,
)
async def get_teacher(
    teacher_id: int = Depends(teacher_path_id),
    storage: Storage = Depends(get_storage),
):
    teacher = await queries.get_teacher_or_404(storage, teacher_id)
    return TeacherSchema.model_validate(teacher)


@router.post(
    "",
    response_model=TeacherSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_teacher(
    payload: TeacherCreate,
    storage: Storage = Depends(get_storage),
):
    # 같은 teacherId가 이미 있으면 DuplicateTeacherError -> 400
    teacher = await storage.create_teacher(payload)
    return TeacherSchema.model_validate(teacher)


@router.get(
    "/{teacher_id}/leaves",
    response_model=List[LeaveRecordRead],
)
async def list_teacher_leaves(
    teacher_id: int = Depends(teacher_path_id),
    leave_type: Optional[str] = Query(None, alias="type"),
    storage: Storage = Depends(get_storage),
):
    """
    GET /api/teachers/1/leaves
    GET /api/teachers/1/leaves?type=sick   (type=all 이면 전체)
    """
    leaves = await queries.list_teacher_leaves(storage, teacher_id, leave_type)
    return [LeaveRecordRead.model_validate(l) for l in leaves]


@router.get(
    "/{teacher_id}/leave-usage",
    response_model=LeaveUsageRead,
)
async def get_leave_usage(
    teacher_id: int = Depends(teacher_path_id),
    storage: Storage = Depends(get_storage),
):
    usage = await queries.get_leave_usage(storage, teacher_id)
    return LeaveUsageRead.model_validate(usage)


@router.get(
    "/{teacher_id}/leave-balance",
    response_model=LeaveBalanceRead,
)
async def get_leave_balance(
    teacher_id: int = Depends(teacher_path_id),
    storage: Storage = Depends(get_storage),
):
    """사용량이 아직 없으면 0 기준으로 used / limit / remaining 반환."""
    balance = await queries.get_leave_balance(storage, teacher_id)
    return LeaveBalanceRead.model_validate(balance)
