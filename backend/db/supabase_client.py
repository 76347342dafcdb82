"""Minimal Supabase PostgREST client used by the transactions repository only."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen


_RANGE_NOT_SATISFIABLE = 416


@dataclass(slots=True)
class SupabaseSettings:
    url: str
    api_key: str


class SupabaseRequestError(RuntimeError):
    """Non-successful PostgREST response."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Supabase request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def parse_content_range_total(content_range: str | None) -> int | None:
    """Return the total from a `Content-Range` header such as `0-9/120` or `*/0`."""

    if not content_range or "/" not in content_range:
        return None
    _, total_str = content_range.split("/", maxsplit=1)
    try:
        return int(total_str)
    except ValueError:
        # `*` means the server did not compute a count.
        return None


class SupabaseClient:
    def __init__(self, settings: SupabaseSettings) -> None:
        self.settings = settings

    def healthcheck(self) -> bool:
        return bool(self.settings.url and self.settings.api_key)

    def _headers(self, *, with_count: bool) -> dict[str, str]:
        return {
            "apikey": self.settings.api_key,
            "Authorization": f"Bearer {self.settings.api_key}",
            "Accept": "application/json",
            "Prefer": "count=exact" if with_count else "return=representation",
        }

    def get_rows(
        self,
        *,
        table: str,
        query: dict[str, str | int] | list[tuple[str, str | int]],
        with_count: bool,
    ) -> tuple[list[dict[str, Any]], int | None]:
        """Fetch rows from PostgREST and optionally parse exact row count."""

        encoded_query = urlencode(query, doseq=True)
        request = Request(
            url=f"{self.settings.url}/rest/v1/{table}?{encoded_query}",
            headers=self._headers(with_count=with_count),
            method="GET",
        )
        try:
            with urlopen(request) as response:  # noqa: S310 - URL comes from trusted env config
                rows = json.loads(response.read().decode("utf-8"))
                total: int | None = None
                if with_count:
                    total = parse_content_range_total(response.headers.get("content-range"))
                return rows, total
        except HTTPError as exc:
            if with_count and exc.code == _RANGE_NOT_SATISFIABLE:
                # Offset past the last matching row: PostgREST still reports the total.
                total = parse_content_range_total(_header(exc.headers, "content-range"))
                if total is not None:
                    return [], total
            body = exc.read().decode("utf-8", errors="replace")[:500]
            raise SupabaseRequestError(exc.code, body) from exc


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    if headers is None:
        return None
    return headers.get(name)
