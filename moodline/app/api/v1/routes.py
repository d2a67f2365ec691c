from __future__ import annotations

from datetime import date, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ...core.config import Settings, get_settings
from ...domain.moods import EMOJI_CHOICES, MoodSelection
from ...insights.chart import ChartMode, Viewport
from ...insights.daily import average_sleep
from ...insights.render import render_svg
from ...schemas.entries import (
    BatchResponse,
    DummyRequest,
    EntryCreate,
    EntryCreateResponse,
    EntryDeleteResponse,
    EntryListResponse,
    EntryModel,
    MoodSelectRequest,
    MoodSelectResponse,
)
from ...schemas.metrics import ChartResponse, DayAggregateModel, DaysResponse
from ...schemas.preferences import PreferencesPatch, PreferencesResponse, QuickEmojiUpdate
from ...schemas.todos import (
    TodoCreate,
    TodoCreateResponse,
    TodoListResponse,
    TodoModel,
    TodoToggleResponse,
)
from ...services.metrics_view import MetricsView
from ...services.preferences import AppPreferences, PreferencesStore
from ...services.store import EntryStore

router = APIRouter(prefix="/api/v1", tags=["journal"])


def get_entry_store(request: Request) -> EntryStore:
    return request.app.state.entry_store


def get_metrics_view(request: Request) -> MetricsView:
    return request.app.state.metrics_view


def get_preferences(request: Request) -> PreferencesStore:
    return request.app.state.preferences


def _today(settings: Settings) -> date:
    return datetime.now(settings.tzinfo).date()


def _resolve_range(start: date | None, end: date | None, settings: Settings) -> tuple[date, date]:
    """Fill in the default window of ``default_range_days`` days ending today.

    Spans longer than ``metrics_max_days`` are rejected with 422.
    """

    end = end or _today(settings)
    start = start or end - timedelta(days=min(settings.default_range_days - 1, (end - date.min).days))
    if (end - start).days >= settings.metrics_max_days:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"range longer than {settings.metrics_max_days} days",
        )
    return start, end


def _viewport(width: float | None, height: float | None, settings: Settings) -> Viewport:
    return Viewport(width=width or settings.chart_width, height=height or settings.chart_height)


def _preferences_response(prefs: AppPreferences) -> PreferencesResponse:
    return PreferencesResponse(
        quick_emojis=list(prefs.quick_emojis),
        theme=prefs.theme,
        provider=prefs.provider,
        has_openai_key=bool(prefs.openai_key),
        has_gemini_key=bool(prefs.gemini_key),
        require_biometric=prefs.require_biometric,
    )


# -- entries ---------------------------------------------------------------
@router.post("/entries", response_model=EntryCreateResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: EntryCreate,
    store: EntryStore = Depends(get_entry_store),
) -> EntryCreateResponse:
    entry_id = store.add_entry(payload.to_draft())
    return EntryCreateResponse(id=entry_id)


@router.get("/entries", response_model=EntryListResponse)
def list_entries(
    store: EntryStore = Depends(get_entry_store),
    include_test: bool = Query(default=True),
) -> EntryListResponse:
    entries = [e for e in store.entries if include_test or not e.is_test]
    return EntryListResponse(items=[EntryModel.model_validate(e) for e in entries])


@router.post("/entries/dummy", response_model=BatchResponse, status_code=status.HTTP_201_CREATED)
def generate_dummy_entries(
    payload: DummyRequest,
    store: EntryStore = Depends(get_entry_store),
    settings: Settings = Depends(get_settings),
) -> BatchResponse:
    if (payload.end - payload.start).days >= settings.dummy_max_days:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"range longer than {settings.dummy_max_days} days",
        )
    return BatchResponse(count=store.generate_dummy(payload.start, payload.end))


@router.delete("/entries/test-data", response_model=BatchResponse)
def clear_test_entries(store: EntryStore = Depends(get_entry_store)) -> BatchResponse:
    return BatchResponse(count=store.clear_test_data())


@router.post("/entries/restore", response_model=EntryCreateResponse)
def restore_entry(
    payload: EntryModel,
    store: EntryStore = Depends(get_entry_store),
) -> EntryCreateResponse:
    if store.find(payload.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="entry already present")
    store.restore_entry(payload.to_entry())
    return EntryCreateResponse(id=payload.id)


@router.get("/entries/{entry_id}", response_model=EntryModel)
def read_entry(entry_id: int, store: EntryStore = Depends(get_entry_store)) -> EntryModel:
    entry = store.find(entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="entry not found")
    return EntryModel.model_validate(entry)


@router.delete("/entries/{entry_id}", response_model=EntryDeleteResponse)
def delete_entry(entry_id: int, store: EntryStore = Depends(get_entry_store)) -> EntryDeleteResponse:
    removed = store.delete_entry(entry_id)
    if removed is None:
        return EntryDeleteResponse()
    return EntryDeleteResponse(deleted=EntryModel.model_validate(removed))


# -- moods -----------------------------------------------------------------
@router.post("/moods/select", response_model=MoodSelectResponse)
def select_mood(payload: MoodSelectRequest) -> MoodSelectResponse:
    selection = MoodSelection(payload.selected)
    selection.toggle(payload.emoji)
    return MoodSelectResponse(selected=list(selection.as_tuple()), mood_rating=selection.rating)


@router.get("/moods/choices")
def mood_choices(prefs: PreferencesStore = Depends(get_preferences)) -> dict[str, list[str]]:
    return {"quick": list(prefs.quick_emojis()), "choices": list(EMOJI_CHOICES)}


# -- todos -----------------------------------------------------------------
@router.post("/todos", response_model=TodoCreateResponse, status_code=status.HTTP_201_CREATED)
def create_todo(payload: TodoCreate, store: EntryStore = Depends(get_entry_store)) -> TodoCreateResponse:
    return TodoCreateResponse(id=store.add_todo(payload.date, payload.text))


@router.get("/todos", response_model=TodoListResponse)
def list_todos(
    day: date | None = Query(default=None, alias="date"),
    store: EntryStore = Depends(get_entry_store),
) -> TodoListResponse:
    todos = store.todos if day is None else store.todos_on(day)
    return TodoListResponse(items=[TodoModel.model_validate(t) for t in todos])


@router.post("/todos/{todo_id}/toggle", response_model=TodoToggleResponse)
def toggle_todo(todo_id: int, store: EntryStore = Depends(get_entry_store)) -> TodoToggleResponse:
    toggled = store.toggle_todo(todo_id)
    todo = store.find_todo(todo_id)
    return TodoToggleResponse(ok=toggled, item=TodoModel.model_validate(todo) if todo else None)


# -- metrics ---------------------------------------------------------------
@router.get("/metrics/days", response_model=DaysResponse)
def metrics_days(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    view: MetricsView = Depends(get_metrics_view),
    settings: Settings = Depends(get_settings),
) -> DaysResponse:
    start, end = _resolve_range(start, end, settings)
    days = view.days(start, end)
    return DaysResponse(
        start=start,
        end=end,
        avg_sleep=average_sleep(days),
        items=[DayAggregateModel.model_validate(day) for day in days],
    )


@router.get("/metrics/chart", response_model=ChartResponse)
def metrics_chart(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    mode: ChartMode = Query(default=ChartMode.SLEEP),
    width: float | None = Query(default=None, gt=0, le=4096),
    height: float | None = Query(default=None, gt=0, le=4096),
    view: MetricsView = Depends(get_metrics_view),
    settings: Settings = Depends(get_settings),
) -> ChartResponse:
    start, end = _resolve_range(start, end, settings)
    viewport = _viewport(width, height, settings)
    primitives = view.chart(start, end, mode, viewport)
    return ChartResponse.from_primitives(primitives, width=viewport.width, height=viewport.height)


@router.get("/metrics/chart.svg")
def metrics_chart_svg(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    mode: ChartMode = Query(default=ChartMode.SLEEP),
    width: float | None = Query(default=None, gt=0, le=4096),
    height: float | None = Query(default=None, gt=0, le=4096),
    view: MetricsView = Depends(get_metrics_view),
    settings: Settings = Depends(get_settings),
) -> Response:
    start, end = _resolve_range(start, end, settings)
    viewport = _viewport(width, height, settings)
    primitives = view.chart(start, end, mode, viewport)
    return Response(content=render_svg(primitives, viewport), media_type="image/svg+xml")


# -- preferences -----------------------------------------------------------
@router.get("/preferences", response_model=PreferencesResponse)
def read_preferences(prefs: PreferencesStore = Depends(get_preferences)) -> PreferencesResponse:
    return _preferences_response(prefs.current)


@router.patch("/preferences", response_model=PreferencesResponse)
def update_preferences(
    payload: PreferencesPatch,
    prefs: PreferencesStore = Depends(get_preferences),
) -> PreferencesResponse:
    changes = payload.model_dump(exclude_none=True)
    updated = prefs.update(**changes) if changes else prefs.current
    return _preferences_response(updated)


@router.put("/preferences/quick-emojis/{index}", response_model=PreferencesResponse)
def update_quick_emoji(
    index: int,
    payload: QuickEmojiUpdate,
    prefs: PreferencesStore = Depends(get_preferences),
) -> PreferencesResponse:
    try:
        updated = prefs.set_quick_emoji(index, payload.emoji)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _preferences_response(updated)
