from datetime import date

from fastapi import APIRouter, Depends, Query

from studio_desk.api.v1.schemas import (
    CalendarDaySchema,
    CalendarResponseSchema,
    ReloadResponseSchema,
    RuleErrorSchema,
)
from studio_desk.application.use_cases.availability import AvailabilityService
from studio_desk.application.use_cases.calendar_view import CalendarView
from studio_desk.wiring.dependencies import get_availability_service

router = APIRouter()


@router.get("/calendar", response_model=CalendarResponseSchema)
def get_calendar(
    days: int | None = Query(None, ge=1, le=60),
    availability: AvailabilityService = Depends(get_availability_service),
):
    view = availability.calendar
    if days is not None and days != view.days_to_show:
        view = CalendarView(view.slots, days_to_show=days)
    return CalendarResponseSchema(
        days=[CalendarDaySchema.from_entity(d) for d in view.build_window(date.today())],
        used_fallback=availability.used_fallback,
    )


@router.post("/availability/reload", response_model=ReloadResponseSchema)
def reload_availability(availability: AvailabilityService = Depends(get_availability_service)):
    derivation = availability.reload()
    return ReloadResponseSchema(
        slot_count=len(derivation.slots),
        errors=[
            RuleErrorSchema(
                weekdays=[d.display_name for d in sorted(e.rule.weekdays)],
                time_spec=e.rule.time_spec,
                reason=e.reason,
            )
            for e in derivation.errors
        ],
        used_fallback=availability.used_fallback,
    )
