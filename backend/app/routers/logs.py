from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from ..errors import StoreError
from ..notifications import Notifier, get_notifier
from ..services.sessions import add_part, add_session, adjust_sets, find_entry
from ..services.view import build_view
from ..store import LogStore, get_store_dependency

router = APIRouter()


class PartRecord(BaseModel):
    # Derived fields echoed back by clients (monthly_cumulative, ...) are dropped.
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=80)
    sets_done: int = Field(default=0, ge=0)
    sets_target: int = Field(ge=1)


class LogCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int = Field(ge=1970, le=9999)
    month: int = Field(ge=1, le=12)
    parts: list[PartRecord] = Field(min_length=1)


class LogPartsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    parts: list[PartRecord] = Field(min_length=1)


class LogDelete(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int


class PartCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=80)
    sets_target: int = Field(default=5, ge=1)


class SetsAdjust(BaseModel):
    model_config = ConfigDict(extra="forbid")

    delta: Literal[-1, 1]


def _dump_parts(parts: list[PartRecord]) -> list[dict]:
    return [part.model_dump() for part in parts]


def _require_entry(store: LogStore, log_id: int) -> dict:
    entry = find_entry(store, log_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Log not found")
    return entry


@router.get("")
def list_logs(store: LogStore = Depends(get_store_dependency)):
    return store.list_all()


@router.post("", status_code=201)
def create_log(entry: LogCreate, store: LogStore = Depends(get_store_dependency)):
    store.insert(entry.year, entry.month, _dump_parts(entry.parts))
    return {"message": "Log created"}


@router.put("")
def update_log(
    entry: LogPartsUpdate, store: LogStore = Depends(get_store_dependency)
):
    store.update_parts(entry.id, _dump_parts(entry.parts))
    return {"message": "Log updated"}


@router.delete("")
def delete_log(
    entry: LogDelete,
    store: LogStore = Depends(get_store_dependency),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        store.delete_by_id(entry.id)
    except StoreError:
        notifier.show("기록 삭제에 실패했습니다.")
        raise
    notifier.show("기록이 삭제되었습니다.")
    return {"message": "Log deleted"}


@router.get("/view")
def get_view(store: LogStore = Depends(get_store_dependency)):
    return build_view(store.list_all())


@router.get("/{log_id}/label", response_class=PlainTextResponse)
def get_label(log_id: int, store: LogStore = Depends(get_store_dependency)):
    for item in build_view(store.list_all()):
        if item["id"] == log_id:
            return item["label"]
    raise HTTPException(status_code=404, detail="Log not found")


@router.post("/sessions", status_code=201)
def create_session(
    part: PartCreate,
    store: LogStore = Depends(get_store_dependency),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        add_session(store, name=part.name, sets_target=part.sets_target)
    except StoreError:
        notifier.show("기록 추가에 실패했습니다.")
        raise
    notifier.show("새로운 운동 기록이 추가되었습니다.")
    return {"message": "Log created"}


@router.post("/{log_id}/parts")
def create_part(
    log_id: int,
    part: PartCreate,
    store: LogStore = Depends(get_store_dependency),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        entry = _require_entry(store, log_id)
        add_part(store, entry, name=part.name, sets_target=part.sets_target)
    except StoreError:
        notifier.show("운동 부위 추가에 실패했습니다.")
        raise
    notifier.show("운동 부위가 추가되었습니다.")
    return {"message": "Log updated"}


@router.post("/{log_id}/parts/{part_index}/sets")
def change_sets(
    log_id: int,
    part_index: int,
    change: SetsAdjust,
    store: LogStore = Depends(get_store_dependency),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        entry = _require_entry(store, log_id)
        adjust_sets(store, entry, part_index, change.delta)
    except StoreError:
        notifier.show("세트 수정에 실패했습니다.")
        raise
    return {"message": "Log updated"}
