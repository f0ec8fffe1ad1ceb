from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
from pydantic import BaseModel, Field

from formparams import error_messages, get_form_data, get_search_params


class Search(BaseModel):
    q: str = Field(min_length=2, json_schema_extra=error_messages(required="Enter a search term"))
    page: int = Field(default=1, ge=1)
    tags: list[str] = Field(default_factory=list)


class Contact(BaseModel):
    email: str
    subscribe: bool = False


class _BodyForm:
    """Request wrapper exposing an urlencoded body as a form container."""

    def __init__(self, request: httpx.Request) -> None:
        self.request = request

    async def form(self) -> httpx.QueryParams:
        return httpx.QueryParams(self.request.content.decode())


def _handler(request: httpx.Request) -> httpx.Response:
    if request.method == "GET":
        outcome = get_search_params(request, Search)
    else:
        outcome = asyncio.run(get_form_data(_BodyForm(request), Contact))
    status = 200 if outcome.success else 422
    payload: Any = outcome.data if outcome.success else outcome.errors
    return httpx.Response(status, json=payload)


def _client() -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(_handler), base_url="https://forms.test")


def test_search_request_is_decoded_and_defaults_applied() -> None:
    with _client() as client:
        response = client.get("/search", params={"q": "py", "tags[]": ["a", "b"], "other": "x"})

    assert response.status_code == 200
    assert response.json() == {"q": "py", "page": 1, "tags": ["a", "b"]}


def test_search_request_reports_custom_required_message() -> None:
    with _client() as client:
        response = client.get("/search", params={"page": "0"})

    assert response.status_code == 422
    assert response.json() == {
        "q": "Enter a search term",
        "page": "Number must be greater than or equal to 1",
    }


def test_form_post_is_validated() -> None:
    with _client() as client:
        ok = client.post("/contact", data={"email": "ada@example.test", "subscribe": "true"})
        ko = client.post("/contact", data={"subscribe": "true"})

    assert ok.status_code == 200
    assert json.loads(ok.text) == {"email": "ada@example.test", "subscribe": True}
    assert ko.status_code == 422
    assert ko.json() == {"email": "Required"}
