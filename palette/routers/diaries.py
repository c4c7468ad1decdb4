from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from palette.schemas import (
    AdminUserResponse,
    ColorResponse,
    CreateDiaryRequest,
    CreateDiaryResponse,
    CreateHistoryRequest,
    CreateHistoryResponse,
    DiaryResponse,
    HistoryResponse,
    InviteDiaryRequest,
    InviteDiaryResponse,
)
from palette.services.diary_service import DiaryService, DiaryView
from palette.services.session_service import LoginUser, login_user

router = APIRouter(prefix="/api/v1", tags=["diaries"])
diary_service = DiaryService()


def _diary_response(view: DiaryView) -> DiaryResponse:
    history = view.current_history
    return DiaryResponse(
        id=view.id,
        title=view.title,
        invitation_code=view.invitation_code,
        color_id=view.color_id,
        color_hex=view.color_hex,
        diary_status=view.diary_status.value,
        current_history=HistoryResponse(
            id=history.id,
            diary_id=history.diary_id,
            start_date=history.start_date,
            end_date=history.end_date,
        )
        if history
        else None,
    )


@router.get("/colors", response_model=list[ColorResponse])
def list_colors():
    return [ColorResponse(id=c.id, name=c.name, hex_code=c.hex_code) for c in diary_service.list_colors()]


@router.get("/diaries", response_model=list[DiaryResponse])
def list_diaries(user: LoginUser = Depends(login_user)):
    return [_diary_response(view) for view in diary_service.list_diaries(user.email)]


@router.post("/diaries", response_model=CreateDiaryResponse, status_code=201)
def create_diary(payload: CreateDiaryRequest, user: LoginUser = Depends(login_user)):
    code = diary_service.create_diary(payload.color_id, user.email, payload.title)
    return CreateDiaryResponse(invitation_code=code)


@router.post("/diaries/invite", response_model=InviteDiaryResponse)
def invite_diary(payload: InviteDiaryRequest, user: LoginUser = Depends(login_user)):
    result = diary_service.invite(payload.invitation_code, user.email)
    admin = result.admin_user
    return InviteDiaryResponse(
        diary_id=result.diary.id,
        title=result.diary.title,
        admin_user=AdminUserResponse(id=admin.id, email=admin.email) if admin else None,
    )


@router.post("/diaries/{diary_id}/leave", status_code=204)
def leave_diary(diary_id: int, user: LoginUser = Depends(login_user)):
    diary_service.leave_diary(diary_id, user.email)
    return Response(status_code=204)


@router.post("/histories", response_model=CreateHistoryResponse, status_code=201)
def create_history(payload: CreateHistoryRequest, user: LoginUser = Depends(login_user)):
    return CreateHistoryResponse(history_id=diary_service.create_history(payload.diary_id, user.email, payload.period))


@router.post("/histories/{history_id}/close", status_code=204)
def close_history(history_id: int, user: LoginUser = Depends(login_user)):
    diary_service.close_history(history_id, user.email)
    return Response(status_code=204)
