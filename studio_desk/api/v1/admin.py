import json
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from studio_desk.api.v1.schemas import ConversationPageSchema, ConversationSchema, StatsSchema
from studio_desk.application.use_cases.conversation_log import (
    EXPORT_FORMATS,
    SORT_KEYS,
    ConversationLogQuery,
    conversations_to_csv,
)
from studio_desk.wiring.dependencies import get_conversation_log_query

router = APIRouter(prefix="/admin")


@router.get("/conversations", response_model=ConversationPageSchema)
def list_conversations(
    q: str | None = Query(None),
    sort: str = Query("newest"),
    page: int = Query(1, ge=1),
    query: ConversationLogQuery = Depends(get_conversation_log_query),
):
    if sort not in SORT_KEYS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {', '.join(SORT_KEYS)}")
    return ConversationPageSchema.from_entity(query.search(term=q, sort_by=sort, page=page))


@router.get("/conversations/export")
def export_conversations(
    format: str = Query("json"),
    query: ConversationLogQuery = Depends(get_conversation_log_query),
):
    if format not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail=f"format must be one of {', '.join(EXPORT_FORMATS)}")

    records = query.export()
    stamp = date.today().isoformat()
    if format == "csv":
        return Response(
            content=conversations_to_csv(records),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="conversations-summary-{stamp}.csv"'},
        )

    body = [ConversationSchema.from_entity(r).model_dump(mode="json") for r in records]
    return Response(
        content=json.dumps(body, indent=2, ensure_ascii=False),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="conversations-{stamp}.json"'},
    )


@router.get("/conversations/{conversation_id}", response_model=ConversationSchema)
def get_conversation(
    conversation_id: str,
    query: ConversationLogQuery = Depends(get_conversation_log_query),
):
    record = query.get(conversation_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return ConversationSchema.from_entity(record)


@router.get("/stats", response_model=StatsSchema)
def stats(query: ConversationLogQuery = Depends(get_conversation_log_query)):
    return StatsSchema.from_entity(query.stats())
