"""SSE wire formatting tests."""

import asyncio

import pytest
from pydantic import BaseModel, ValidationError

from ssestream import MessageDataError, SSEMessage, build_frame, format_message, resolve_data


class Payload(BaseModel):
    name: str
    count: int


# ============================================================================
# Frame layout
# ============================================================================

@pytest.mark.asyncio
async def test_full_message_field_order():
    message = SSEMessage(event="update", data="a\nb", id="42", retry=3000)

    assert await format_message(message) == (
        "event: update\ndata: a\ndata: b\nid: 42\nretry: 3000\n\n"
    )


@pytest.mark.asyncio
async def test_data_only_message():
    assert await format_message(SSEMessage(data="hello")) == "data: hello\n\n"


@pytest.mark.asyncio
async def test_empty_data_emits_single_data_line():
    assert await format_message(SSEMessage(data="")) == "data: \n\n"


@pytest.mark.asyncio
async def test_leading_and_trailing_newlines_keep_empty_lines():
    frame = await format_message(SSEMessage(data="\nmiddle\n"))

    assert frame == "data: \ndata: middle\ndata: \n\n"
    assert frame.count("data:") == 3


def test_line_count_matches_embedded_newlines():
    data = "one\ntwo\n\nfour\nfive"

    frame = build_frame(data)

    lines = [line for line in frame.split("\n") if line.startswith("data:")]
    assert len(lines) == data.count("\n") + 1
    assert lines == ["data: one", "data: two", "data: ", "data: four", "data: five"]


def test_carriage_return_is_not_a_line_separator():
    assert build_frame("a\rb") == "data: a\rb\n\n"


def test_zero_retry_is_omitted():
    assert build_frame("x", retry=0) == "data: x\n\n"


def test_positive_retry_is_decimal():
    assert build_frame("x", retry=1) == "data: x\nretry: 1\n\n"


def test_empty_event_and_id_are_omitted():
    assert build_frame("x", event="", id="") == "data: x\n\n"


@pytest.mark.asyncio
async def test_formatting_is_repeatable():
    message = SSEMessage(event="e", data="line1\nline2", id="7", retry=10)

    first = await format_message(message)
    second = await format_message(message)

    assert first == second


# ============================================================================
# Data resolution
# ============================================================================

@pytest.mark.asyncio
async def test_awaitable_data_is_resolved():
    async def compute() -> str:
        await asyncio.sleep(0)
        return "later"

    assert await format_message(SSEMessage(data=compute())) == "data: later\n\n"


@pytest.mark.asyncio
async def test_awaitable_data_formats_repeatedly():
    async def compute() -> str:
        await asyncio.sleep(0)
        return "a\nb"

    message = SSEMessage(event="e", data=compute())

    first = await format_message(message)
    second = await format_message(message)

    assert first == second == "event: e\ndata: a\ndata: b\n\n"


def test_awaitable_data_requires_running_loop():
    async def compute() -> str:
        return "never"

    pending = compute()
    try:
        with pytest.raises(ValidationError):
            SSEMessage(data=pending)
    finally:
        pending.close()


@pytest.mark.asyncio
async def test_callable_data_is_called():
    assert await resolve_data(lambda: "called") == "called"


@pytest.mark.asyncio
async def test_callable_returning_awaitable_is_awaited():
    async def compute() -> str:
        return "deferred"

    assert await resolve_data(compute) == "deferred"


@pytest.mark.asyncio
async def test_model_data_is_json():
    frame = await format_message(SSEMessage(event="payload", data=Payload(name="a", count=2)))

    assert frame == 'event: payload\ndata: {"name":"a","count":2}\n\n'


@pytest.mark.asyncio
async def test_dict_data_keeps_unicode():
    assert await resolve_data({"city": "Москва"}) == '{"city": "Москва"}'


@pytest.mark.asyncio
async def test_unsupported_resolved_value_fails():
    with pytest.raises(MessageDataError):
        await resolve_data(lambda: 42)


# ============================================================================
# Message validation
# ============================================================================

@pytest.mark.parametrize("field", ["event", "id"])
@pytest.mark.parametrize("value", ["two\nlines", "carriage\rreturn"])
def test_single_line_fields_reject_line_breaks(field, value):
    with pytest.raises(ValidationError):
        SSEMessage(data="x", **{field: value})


def test_negative_retry_rejected():
    with pytest.raises(ValidationError):
        SSEMessage(data="x", retry=-1)


def test_unsupported_data_rejected():
    with pytest.raises(ValidationError):
        SSEMessage(data=3.5)
