"""Pytest marker auto-assignment by folder and shared schemas."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Literal

import pytest
from pydantic import BaseModel, EmailStr, Field

from formparams import error_messages, logger


class Letter(StrEnum):
    A = "A"
    B = "B"


class SampleForm(BaseModel):
    a: str = Field(
        min_length=5,
        max_length=10,
        json_schema_extra=error_messages(
            required="a is required",
            invalid_type="a must be a string",
            too_small="a must be at least 5 characters",
            too_big="a must be at most 10 characters",
        ),
    )
    b: list[float]
    c: bool = Field(json_schema_extra=error_messages(required="c is required"))
    d: str | None = None
    e: float
    f: str | None = None
    g: str = "z"
    h: str = "z"
    letter: Literal["A", "B"]
    native: Letter | None = None
    email: EmailStr | None = Field(default=None, json_schema_extra=error_messages(email="Invalid email"))


@pytest.fixture
def sample_form() -> type[SampleForm]:
    return SampleForm


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")
