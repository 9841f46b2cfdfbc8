"""Log store client.

Four pass-through operations against the persistent store holding workout
logs. Two backends share the contract: a local SQLite table and a hosted
PostgREST-style database reached over HTTP. Every backend failure surfaces
as ``StoreError``; nothing is retried.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Generator
from typing import Any

import httpx

from . import config
from . import db as db_module
from .errors import StoreError

logger = logging.getLogger(__name__)


def _parts_from_column(value: str | None) -> list[dict[str, Any]]:
    return json.loads(value or "[]")


class SqliteLogStore:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def list_all(self) -> list[dict[str, Any]]:
        try:
            rows = self.conn.execute(
                """SELECT id, created_at, year, month, parts
                   FROM workouts
                   ORDER BY created_at DESC, id DESC"""
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

        entries = []
        for row in rows:
            entry = db_module.row_to_dict(row)
            entry["parts"] = _parts_from_column(entry["parts"])
            entries.append(entry)
        return entries

    def insert(self, year: int, month: int, parts: list[dict[str, Any]]) -> None:
        self._write(
            "INSERT INTO workouts (year, month, parts) VALUES (?, ?, ?)",
            (year, month, json.dumps(parts, ensure_ascii=False)),
        )

    def update_parts(self, entry_id: int, parts: list[dict[str, Any]]) -> None:
        self._write(
            "UPDATE workouts SET parts=? WHERE id=?",
            (json.dumps(parts, ensure_ascii=False), entry_id),
        )

    def delete_by_id(self, entry_id: int) -> None:
        self._write("DELETE FROM workouts WHERE id=?", (entry_id,))

    def _write(self, sql: str, params: tuple) -> None:
        try:
            self.conn.execute(sql, params)
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            raise StoreError(str(exc)) from exc


class RestLogStore:
    """Hosted table exposed through a PostgREST-compatible endpoint."""

    def __init__(
        self,
        client: httpx.Client,
        *,
        base_url: str,
        api_key: str,
        table: str = "workouts",
    ):
        self.client = client
        self.endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def list_all(self) -> list[dict[str, Any]]:
        response = self._request(
            "GET",
            params={"select": "*", "order": "created_at.desc"},
        )
        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("log store GET returned a non-JSON body")
            raise StoreError("Unexpected response from log store") from exc
        if not isinstance(payload, list):
            raise StoreError("Unexpected response from log store")
        return payload

    def insert(self, year: int, month: int, parts: list[dict[str, Any]]) -> None:
        self._request(
            "POST",
            json=[{"year": year, "month": month, "parts": parts}],
            headers={"Prefer": "return=minimal"},
        )

    def update_parts(self, entry_id: int, parts: list[dict[str, Any]]) -> None:
        self._request(
            "PATCH",
            params={"id": f"eq.{entry_id}"},
            json={"parts": parts},
            headers={"Prefer": "return=minimal"},
        )

    def delete_by_id(self, entry_id: int) -> None:
        self._request("DELETE", params={"id": f"eq.{entry_id}"})

    def _request(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = self.client.request(
                method,
                self.endpoint,
                params=params,
                json=json,
                headers={**self.headers, **(headers or {})},
            )
        except httpx.TimeoutException as exc:
            raise StoreError("Log store request timed out") from exc
        except httpx.HTTPError as exc:
            raise StoreError(f"Log store unreachable: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning("log store %s returned %s: %s", method, response.status_code, message)
            raise StoreError(message)
        return response


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text or f"Log store returned HTTP {response.status_code}"


LogStore = SqliteLogStore | RestLogStore


def get_store_dependency() -> Generator[LogStore, None, None]:
    if config.LOG_STORE == "rest":
        if not config.STORE_URL:
            raise StoreError("STORE_URL is required for the rest log store")
        with httpx.Client(timeout=config.STORE_TIMEOUT_SECONDS) as client:
            yield RestLogStore(
                client,
                base_url=config.STORE_URL,
                api_key=config.STORE_API_KEY,
                table=config.STORE_TABLE,
            )
        return

    conn = db_module.get_db()
    try:
        yield SqliteLogStore(conn)
    finally:
        conn.close()
