# /teacherboard/routers/classroom_router.py

from fastapi import APIRouter, Depends, HTTPException, status

from ..core.deps import get_current_teacher
from ..core.exceptions import NoStudentsAvailableError
from ..models import classroom_tool_model
from ..models.auth_model import TeacherAccount
from ..services import classroom_tools_service

router = APIRouter()


@router.post("/pick", response_model=classroom_tool_model.PickResponse, summary="Pick Random Students")
def pick_students(request: classroom_tool_model.PickRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    try:
        return classroom_tools_service.pick_students(request.totalStudents, request.count, request.alreadyPicked)
    except NoStudentsAvailableError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/groups", response_model=classroom_tool_model.GroupResponse, summary="Make Random Groups")
def make_groups(request: classroom_tool_model.GroupRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    try:
        return classroom_tools_service.make_groups(request.totalStudents, request.groupCount, request.missingNumbers)
    except NoStudentsAvailableError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
