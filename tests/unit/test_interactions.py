from __future__ import annotations

import asyncio
import uuid

import pytest

from campus_chat.application import query_keys
from campus_chat.application.cache import QueryCache
from campus_chat.application.exceptions import NotAuthenticatedError, StoreUnavailableError
from campus_chat.domain.entities.interaction import InteractionState
from campus_chat.domain.value_objects.enums import EntityKind, InteractionKind
from campus_chat.services import interaction_service
from campus_chat.sync.counters import InteractionCounter
from tests.conftest import FakeStore, FakeUoW, uow_factory

LIKE = InteractionKind.LIKE
BOOKMARK = InteractionKind.BOOKMARK
POST = EntityKind.POST
PROJECT = EntityKind.PROJECT


@pytest.mark.asyncio
async def test_toggle_adds_then_removes(alice):
    uow = FakeUoW()
    post_id = uuid.uuid4()

    liked = await interaction_service.toggle(alice, LIKE, POST, post_id, uow)
    unliked = await interaction_service.toggle(alice, LIKE, POST, post_id, uow)

    assert liked == InteractionState(count=1, viewer_has_acted=True)
    assert unliked == InteractionState(count=0, viewer_has_acted=False)


@pytest.mark.asyncio
async def test_state_without_viewer_counts_only(alice, bob):
    uow = FakeUoW()
    project_id = uuid.uuid4()
    await interaction_service.set_interaction(alice, BOOKMARK, PROJECT, project_id, True, uow)
    await interaction_service.set_interaction(bob, BOOKMARK, PROJECT, project_id, True, uow)

    state = await interaction_service.get_state(None, BOOKMARK, PROJECT, project_id, uow)

    assert state == InteractionState(count=2, viewer_has_acted=False)


@pytest.mark.asyncio
async def test_project_and_post_counts_are_separate(alice):
    uow = FakeUoW()
    shared_id = uuid.uuid4()

    await interaction_service.set_interaction(alice, LIKE, PROJECT, shared_id, True, uow)

    assert (await interaction_service.get_state(alice, LIKE, POST, shared_id, uow)).count == 0
    assert (await interaction_service.get_state(alice, LIKE, PROJECT, shared_id, uow)).count == 1


@pytest.mark.asyncio
async def test_set_interaction_is_idempotent(alice):
    uow = FakeUoW()
    post_id = uuid.uuid4()

    await interaction_service.set_interaction(alice, LIKE, POST, post_id, True, uow)
    await interaction_service.set_interaction(alice, LIKE, POST, post_id, True, uow)
    await interaction_service.set_interaction(alice, BOOKMARK, POST, post_id, False, uow)

    assert (await interaction_service.get_state(alice, LIKE, POST, post_id, uow)).count == 1


@pytest.mark.asyncio
async def test_toggle_requires_viewer():
    with pytest.raises(NotAuthenticatedError):
        await interaction_service.toggle(None, LIKE, POST, uuid.uuid4(), FakeUoW())


@pytest.mark.asyncio
async def test_count_comments():
    uow = FakeUoW()
    post_id = uuid.uuid4()
    uow.store.comments[("post_id", post_id)] = 3

    assert await interaction_service.count_comments(POST, post_id, uow) == 3
    assert await interaction_service.count_comments(PROJECT, post_id, uow) == 0


def _counter(principal, store: FakeStore, cache: QueryCache, entity_id: uuid.UUID) -> InteractionCounter:
    return InteractionCounter(principal, LIKE, POST, entity_id, uow_factory(store), cache)


@pytest.mark.asyncio
async def test_counter_toggle_settles_to_store_state(alice, store):
    cache = QueryCache()
    post_id = uuid.uuid4()
    counter = _counter(alice, store, cache, post_id)

    optimistic = await counter.toggle()

    assert optimistic == InteractionState(count=1, viewer_has_acted=True)
    assert cache.get(query_keys.interaction(LIKE, POST, post_id)) == optimistic
    assert ("post_id", post_id, alice.user_id) in store.interactions[LIKE]


@pytest.mark.asyncio
async def test_counter_rolls_back_on_write_failure(alice, bob, store):
    cache = QueryCache()
    post_id = uuid.uuid4()
    store.interactions[LIKE].add(("post_id", post_id, bob.user_id))
    counter = _counter(alice, store, cache, post_id)
    before = await counter.state()
    store.fail_writes = True

    with pytest.raises(StoreUnavailableError):
        await counter.toggle()

    assert before == InteractionState(count=1, viewer_has_acted=False)
    assert cache.get(counter.key) == before


@pytest.mark.asyncio
async def test_counter_settle_failure_keeps_rollback(alice, store):
    cache = QueryCache()
    counter = _counter(alice, store, cache, uuid.uuid4())
    before = await counter.state()
    store.unavailable = True

    with pytest.raises(StoreUnavailableError):
        await counter.toggle()

    assert cache.get(counter.key) == before


@pytest.mark.asyncio
async def test_concurrent_toggles_decide_from_optimistic_state(alice, store):
    cache = QueryCache()
    post_id = uuid.uuid4()
    counter = _counter(alice, store, cache, post_id)
    await counter.state()

    first, second = await asyncio.gather(counter.toggle(), counter.toggle())

    assert first.viewer_has_acted is True
    assert second.viewer_has_acted is False
    assert await counter.state(force=True) == InteractionState(count=0, viewer_has_acted=False)
