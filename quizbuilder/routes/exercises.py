from fastapi import APIRouter, Depends
from quizbuilder.dependencies import get_quiz_builder, unwrap
from quizbuilder.schemas import Exercise, ExerciseCreate, ExerciseUpdate, ReorderRequest
from quizbuilder.services import QuizBuilder
from quizbuilder.utils.auth_utils import get_current_user, require_admin
from typing import List

router = APIRouter()

@router.get("/{module_id}/exercises", response_model=List[Exercise])
def get_exercises(module_id: str, current_user: dict = Depends(get_current_user),
                  builder: QuizBuilder = Depends(get_quiz_builder)):
    """List a module's exercises in display order"""
    return builder.exercises.list(module_id)

@router.post("/{module_id}/exercises")
def create_exercise(module_id: str, exercise_data: ExerciseCreate, admin_user: dict = Depends(require_admin),
                    builder: QuizBuilder = Depends(get_quiz_builder)):
    """Append an exercise to the module"""
    return unwrap(builder.exercises.create(module_id, exercise_data))

@router.patch("/{module_id}/exercises/{exercise_id}")
def update_exercise(module_id: str, exercise_id: str, exercise_data: ExerciseUpdate,
                    admin_user: dict = Depends(require_admin), builder: QuizBuilder = Depends(get_quiz_builder)):
    """Update question text, media, layout or weight"""
    return unwrap(builder.exercises.update(exercise_id, module_id, exercise_data))

@router.put("/{module_id}/exercises/{exercise_id}/order")
def reorder_exercise(module_id: str, exercise_id: str, reorder: ReorderRequest,
                     admin_user: dict = Depends(require_admin), builder: QuizBuilder = Depends(get_quiz_builder)):
    return unwrap(builder.exercises.reorder(exercise_id, reorder.new_index, module_id))

@router.delete("/{module_id}/exercises/{exercise_id}")
def delete_exercise(module_id: str, exercise_id: str, admin_user: dict = Depends(require_admin),
                    builder: QuizBuilder = Depends(get_quiz_builder)):
    """Delete an exercise together with its alternatives"""
    return unwrap(builder.exercises.delete(exercise_id, module_id))
