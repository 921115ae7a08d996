from typing import List

from fastapi import APIRouter, Depends, status

from leave_service.core.deps import get_storage, leave_path_id
from leave_service.core.storage import Storage
from leave_service.schemas.leave import LeaveCreate, LeaveRecordRead, LeaveUpdate
from leave_service.services import leaves as queries

router = APIRouter(
    prefix="/api/leaves",
    tags=["leaves"],
)


@router.get(
    "",
    response_model=List[LeaveRecordRead],
)
async def list_leaves(
    storage: Storage = Depends(get_storage),
):
    leaves = await storage.get_leaves()
    return [LeaveRecordRead.model_validate(l) for l in leaves]


@router.get(
    "/{leave_id}",
    response_model=LeaveRecordRead,
)
async def get_leave(
    leave_id: int = Depends(leave_path_id),
    storage: Storage = Depends(get_storage),
):
    leave = await queries.get_leave_or_404(storage, leave_id)
    return LeaveRecordRead.model_validate(leave)


@router.post(
    "",
    response_model=LeaveRecordRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_leave(
    payload: LeaveCreate,
    storage: Storage = Depends(get_storage),
):
    """
    휴가 신청 생성.
    흐름:
    1) 스키마 검증 (실패 시 400, 아무것도 저장하지 않음)
    2) 교사 존재 확인 (없으면 404)
    3) 신청 저장 + 해당 카테고리 사용량에 days 누적
    """
    leave = await queries.submit_leave(storage, payload)
    return LeaveRecordRead.model_validate(leave)


@router.patch(
    "/{leave_id}",
    response_model=LeaveRecordRead,
)
async def update_leave(
    payload: LeaveUpdate,
    leave_id: int = Depends(leave_path_id),
    storage: Storage = Depends(get_storage),
):
    """
    status / approvedBy / notes 등 부분 수정.
    상태 전이에 제약은 없고, 사용량은 다시 계산하지 않는다.
    """
    leave = await queries.update_leave(storage, leave_id, payload)
    return LeaveRecordRead.model_validate(leave)
