from fastapi import APIRouter, Depends
from quizbuilder.dependencies import get_quiz_builder, unwrap
from quizbuilder.schemas import Module, ModuleCreate, ModuleUpdate, ReorderRequest
from quizbuilder.services import QuizBuilder
from quizbuilder.utils.auth_utils import get_current_user, require_admin
from typing import List

router = APIRouter()

@router.get("/{company_id}/modules", response_model=List[Module])
def get_modules(company_id: str, current_user: dict = Depends(get_current_user),
                builder: QuizBuilder = Depends(get_quiz_builder)):
    """List a company's modules in display order"""
    return builder.modules.list(company_id)

@router.post("/{company_id}/modules")
def create_module(company_id: str, module_data: ModuleCreate, admin_user: dict = Depends(require_admin),
                  builder: QuizBuilder = Depends(get_quiz_builder)):
    """Create a module or exam at the end of the list"""
    return unwrap(builder.modules.create(company_id, module_data))

@router.patch("/{company_id}/modules/{module_id}")
def update_module(company_id: str, module_id: str, module_data: ModuleUpdate,
                  admin_user: dict = Depends(require_admin), builder: QuizBuilder = Depends(get_quiz_builder)):
    """Update title and description (type cannot be changed)"""
    return unwrap(builder.modules.update(module_id, company_id, module_data))

@router.put("/{company_id}/modules/{module_id}/order")
def reorder_module(company_id: str, module_id: str, reorder: ReorderRequest,
                   admin_user: dict = Depends(require_admin), builder: QuizBuilder = Depends(get_quiz_builder)):
    return unwrap(builder.modules.reorder(module_id, reorder.new_index, company_id))

@router.post("/{company_id}/modules/{module_id}/lock")
def lock_exam(company_id: str, module_id: str, admin_user: dict = Depends(require_admin),
              builder: QuizBuilder = Depends(get_quiz_builder)):
    return unwrap(builder.modules.lock_exam(module_id, company_id))

@router.post("/{company_id}/modules/{module_id}/unlock")
def unlock_exam(company_id: str, module_id: str, admin_user: dict = Depends(require_admin),
                builder: QuizBuilder = Depends(get_quiz_builder)):
    """Allow members to retake an exam"""
    return unwrap(builder.modules.unlock_exam(module_id, company_id))

@router.delete("/{company_id}/modules/{module_id}")
def delete_module(company_id: str, module_id: str, admin_user: dict = Depends(require_admin),
                  builder: QuizBuilder = Depends(get_quiz_builder)):
    """Delete a module with its exercises"""
    return unwrap(builder.modules.delete(module_id, company_id))
