"""Tests for confirmed deletes against the displayed list."""

import asyncio

import pytest

from conftest import article
from fluentai.api import ApiError
from fluentai.list_mutation import ListMutationCoordinator


def yes(_article):
    return True


@pytest.mark.asyncio
async def test_delete_success_removes_only_that_row(content):
    items = [article("1"), article("2"), article("3")]
    coordinator = ListMutationCoordinator(content, items)

    assert await coordinator.delete("2", yes) is True

    assert [a.id for a in coordinator.items] == ["1", "3"]
    assert coordinator.items[0] is items[0]
    assert content.calls == [("delete", "2")]


@pytest.mark.asyncio
async def test_delete_failure_keeps_row_and_records_error(content):
    content.fail["delete"] = ApiError("Not allowed", 403)
    coordinator = ListMutationCoordinator(content, [article("1"), article("2")])

    assert await coordinator.delete("2", yes) is False

    assert [a.id for a in coordinator.items] == ["1", "2"]
    assert coordinator.errors == {"2": "Not allowed"}
    assert not coordinator.is_pending("2")
    assert content.calls == [("delete", "2")]


@pytest.mark.asyncio
async def test_declined_confirmation_sends_nothing(content):
    coordinator = ListMutationCoordinator(content, [article("1")])
    asked = []

    def no(target):
        asked.append(target.id)
        return False

    assert await coordinator.delete("1", no) is False
    assert asked == ["1"]
    assert content.calls == []
    assert len(coordinator.items) == 1


@pytest.mark.asyncio
async def test_async_confirmation_is_awaited(content):
    coordinator = ListMutationCoordinator(content, [article("1")])

    async def confirm(_article):
        await asyncio.sleep(0)
        return True

    assert await coordinator.delete("1", confirm) is True
    assert coordinator.items == []


@pytest.mark.asyncio
async def test_duplicate_delete_for_same_id_is_ignored(content):
    content.gates["delete"] = asyncio.Event()
    coordinator = ListMutationCoordinator(content, [article("1"), article("2")])

    first = asyncio.create_task(coordinator.delete("1", yes))
    await asyncio.sleep(0)
    assert coordinator.is_pending("1")

    assert await coordinator.delete("1", yes) is False

    content.gates["delete"].set()
    assert await first is True
    assert content.calls == [("delete", "1")]


@pytest.mark.asyncio
async def test_concurrent_deletes_of_different_rows(content):
    content.gates["delete"] = asyncio.Event()
    coordinator = ListMutationCoordinator(content, [article("1"), article("2"), article("3")])

    tasks = [asyncio.create_task(coordinator.delete(i, yes)) for i in ("1", "3")]
    await asyncio.sleep(0)
    assert coordinator.is_pending("1") and coordinator.is_pending("3")

    content.gates["delete"].set()
    assert await asyncio.gather(*tasks) == [True, True]
    assert [a.id for a in coordinator.items] == ["2"]


@pytest.mark.asyncio
async def test_reset_replaces_items_and_clears_errors(content):
    content.fail["delete"] = ApiError("Nope", 500)
    coordinator = ListMutationCoordinator(content, [article("1")])
    await coordinator.delete("1", yes)
    assert coordinator.errors

    coordinator.reset([article("9")])

    assert [a.id for a in coordinator.items] == ["9"]
    assert coordinator.errors == {}
