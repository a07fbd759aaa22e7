"""Client for the station JSON feed and the trip CSV feed."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any

import requests

from bikeflow.data.models import TRIP_COLUMNS


class DataLoadError(Exception):
    """Raised when a feed cannot be fetched or does not have the expected shape."""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class FeedClient:
    """Thin wrapper that reads the two feeds over HTTP or from disk."""

    def __init__(self, timeout_seconds: int = 30) -> None:
        self._timeout_seconds = timeout_seconds

    def get_station_records(self, source: str) -> list[dict[str, Any]]:
        """Fetch raw station records; accepts the ``data.stations`` envelope or a bare list."""
        text = self._read(source)
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise DataLoadError(f"Station feed was not valid JSON: {source}") from exc

        if isinstance(payload, dict):
            envelope = payload.get("data")
            payload = envelope.get("stations") if isinstance(envelope, dict) else None
        if not isinstance(payload, list):
            raise DataLoadError(f"Station feed has no station list: {source}")
        return payload

    def get_trip_rows(self, source: str) -> list[dict[str, str]]:
        """Fetch raw trip rows keyed by CSV header."""
        text = self._read(source).lstrip("\ufeff")
        reader = csv.DictReader(io.StringIO(text))
        try:
            if not reader.fieldnames:
                raise DataLoadError(f"Trip feed has no header row: {source}")
            missing = [column for column in TRIP_COLUMNS if column not in reader.fieldnames]
            if missing:
                raise DataLoadError(f"Trip feed missing columns {', '.join(missing)}: {source}")
            return list(reader)
        except csv.Error as exc:
            raise DataLoadError(f"Trip feed is not valid CSV: {exc}") from exc

    def _read(self, source: str) -> str:
        if not _is_url(source):
            try:
                return Path(source).read_text(encoding="utf-8-sig")
            except (OSError, UnicodeDecodeError) as exc:
                raise DataLoadError(f"Feed file could not be read: {exc}") from exc

        try:
            response = requests.get(source, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise DataLoadError(f"Feed request failed: {exc}") from exc

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text[:200]}"
            raise DataLoadError(f"Feed request failed: {detail}")
        return response.text


__all__ = ["DataLoadError", "FeedClient"]
