# /teacherboard/routers/prompts_router.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core.deps import get_current_teacher, get_document_store
from ..core.exceptions import ContentNotFoundError
from ..models import prompt_model
from ..models.auth_model import TeacherAccount
from ..services import prompt_service
from ..services.document_store import DocumentStore

router = APIRouter()


@router.get("", response_model=List[prompt_model.SavedPrompt], summary="List Saved Prompts")
def list_prompts(
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    return prompt_service.list_prompts(store, current_teacher.uid)


@router.post("", response_model=prompt_model.SavedPrompt, status_code=status.HTTP_201_CREATED, summary="Save a Prompt")
def create_prompt(
    prompt_create: prompt_model.PromptCreate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    return prompt_service.create_prompt(
        store, current_teacher.uid, prompt_create.title, prompt_create.content, prompt_create.category
    )


@router.post("/defaults", response_model=List[prompt_model.SavedPrompt], summary="Add the Starter Prompts")
def initialize_default_prompts(
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    prompt_service.initialize_default_prompts(store, current_teacher.uid)
    return prompt_service.list_prompts(store, current_teacher.uid)


@router.put("/{prompt_id}", response_model=prompt_model.SavedPrompt, summary="Update a Prompt")
def update_prompt(
    prompt_id: str,
    prompt_update: prompt_model.PromptUpdate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return prompt_service.update_prompt(store, current_teacher.uid, prompt_id, prompt_update.model_dump(exclude_none=True))
    except ContentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{prompt_id}/use", response_model=prompt_model.SavedPrompt, summary="Record a Use of a Prompt")
def use_prompt(
    prompt_id: str,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return prompt_service.use_prompt(store, current_teacher.uid, prompt_id)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Prompt")
def delete_prompt(
    prompt_id: str,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        prompt_service.delete_prompt(store, current_teacher.uid, prompt_id)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
