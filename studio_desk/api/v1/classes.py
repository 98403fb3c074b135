from fastapi import APIRouter, Depends, HTTPException, Query

from studio_desk.api.v1.schemas import ClassListResponseSchema, DanceClassSchema
from studio_desk.application.exceptions import UpstreamUnavailable
from studio_desk.application.use_cases.class_finder import ClassFinder
from studio_desk.application.utils.class_rules import AGE_BUCKET_LABELS, AGE_BUCKET_ORDER
from studio_desk.wiring.dependencies import get_class_finder

router = APIRouter()


@router.get("/classes", response_model=ClassListResponseSchema)
def list_classes(
    age_bucket: str | None = Query(None),
    style: str | None = Query(None),
    day: str | None = Query(None),
    finder: ClassFinder = Depends(get_class_finder),
):
    if age_bucket and age_bucket not in AGE_BUCKET_ORDER:
        raise HTTPException(status_code=400, detail=f"age_bucket must be one of {', '.join(AGE_BUCKET_ORDER)}")
    try:
        classes = finder.filter(bucket=age_bucket, style=style, day=day)
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ClassListResponseSchema(classes=[DanceClassSchema.from_entity(c) for c in classes])


@router.post("/classes/reload", response_model=ClassListResponseSchema)
def reload_classes(finder: ClassFinder = Depends(get_class_finder)):
    try:
        classes = finder.reload()
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ClassListResponseSchema(classes=[DanceClassSchema.from_entity(c) for c in classes])


@router.get("/classes/age-buckets")
def list_age_buckets() -> list[dict[str, str]]:
    return [{"value": key, "label": AGE_BUCKET_LABELS[key]} for key in AGE_BUCKET_ORDER]
