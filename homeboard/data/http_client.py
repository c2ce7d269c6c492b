"""Blocking HTTP GET + JSON decode for the dashboard's data sources."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

import requests

from homeboard.errors import DecodeError, NetworkError

DEFAULT_TIMEOUT_SECONDS = 10


class JsonModel(Protocol):
    @classmethod
    def from_json(cls, payload: Any) -> "JsonModel": ...


ModelT = TypeVar("ModelT", bound=JsonModel)


class JsonClient:
    """Thin wrapper around requests.get that maps failures to fetch errors."""

    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout_seconds = timeout_seconds

    def get_json(self, url: str) -> Any:
        """GET ``url`` and return the decoded JSON body."""
        try:
            response = requests.get(url, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise NetworkError(f"Request to {url} failed: {exc}") from exc

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text[:200]}"
            raise NetworkError(f"Request to {url} failed: {detail}")

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"Response from {url} was not valid JSON") from exc

    def fetch(self, url: str, model: type[ModelT]) -> ModelT:
        """GET ``url`` and decode the body into ``model``."""
        return model.from_json(self.get_json(url))


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "JsonClient"]
