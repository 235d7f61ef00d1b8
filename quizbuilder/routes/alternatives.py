from fastapi import APIRouter, Depends
from quizbuilder.dependencies import get_quiz_builder, unwrap
from quizbuilder.schemas import Alternative, AlternativeCreate, AlternativeUpdate, ReorderRequest
from quizbuilder.services import QuizBuilder
from quizbuilder.utils.auth_utils import get_current_user, require_admin
from typing import List

router = APIRouter()

@router.get("/{exercise_id}/alternatives", response_model=List[Alternative])
def get_alternatives(exercise_id: str, current_user: dict = Depends(get_current_user),
                     builder: QuizBuilder = Depends(get_quiz_builder)):
    """List an exercise's alternatives in display order"""
    return builder.alternatives.list(exercise_id)

@router.post("/{exercise_id}/alternatives")
def create_alternative(exercise_id: str, alternative_data: AlternativeCreate,
                       admin_user: dict = Depends(require_admin), builder: QuizBuilder = Depends(get_quiz_builder)):
    """Add an alternative; the first one of an exercise is always correct"""
    return unwrap(builder.alternatives.create(exercise_id, alternative_data))

@router.patch("/{exercise_id}/alternatives/{alternative_id}")
def update_alternative(exercise_id: str, alternative_id: str, alternative_data: AlternativeUpdate,
                       admin_user: dict = Depends(require_admin), builder: QuizBuilder = Depends(get_quiz_builder)):
    """Update an alternative; is_correct=true moves the correct mark to it"""
    return unwrap(builder.alternatives.update(alternative_id, exercise_id, alternative_data))

@router.put("/{exercise_id}/alternatives/{alternative_id}/order")
def reorder_alternative(exercise_id: str, alternative_id: str, reorder: ReorderRequest,
                        admin_user: dict = Depends(require_admin), builder: QuizBuilder = Depends(get_quiz_builder)):
    return unwrap(builder.alternatives.reorder(alternative_id, reorder.new_index, exercise_id))

@router.delete("/{exercise_id}/alternatives/{alternative_id}")
def delete_alternative(exercise_id: str, alternative_id: str, admin_user: dict = Depends(require_admin),
                       builder: QuizBuilder = Depends(get_quiz_builder)):
    """Delete an alternative; if it was correct another one takes over"""
    return unwrap(builder.alternatives.delete(alternative_id, exercise_id))
