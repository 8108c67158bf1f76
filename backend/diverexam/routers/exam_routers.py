from fastapi import APIRouter, Depends

from ..dependencies import parse_mode
from ..schemas.exam_schema import ExamCatalog, ExamConfiguration
from ..schemas.question_schema import ExamMode
from ..services.exam_config_service import exam_catalog, resolve_exam_configuration

router = APIRouter(prefix="/exams", tags=["Exams"])


@router.get("", response_model=ExamCatalog)
async def list_exams():
    return ExamCatalog(exams=exam_catalog())


@router.get("/{exam_slug}", response_model=ExamConfiguration)
async def get_exam_configuration(exam_slug: str, mode: ExamMode = Depends(parse_mode)):
    # unknown slugs resolve to the default configuration, never 404
    return resolve_exam_configuration(exam_slug, mode)
