"""Shared test fixtures."""
from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import pytest

from campus_chat.application.dto.principal import Principal
from campus_chat.application.exceptions import StoreUnavailableError
from campus_chat.application.repositories.interaction import EntityTarget
from campus_chat.application.repositories.outbox import OutboxRecord
from campus_chat.domain.entities.group import Group, GroupMember
from campus_chat.domain.entities.message import Message
from campus_chat.domain.entities.profile import PostPreview, ProjectPreview, UserProfile
from campus_chat.domain.value_objects.enums import (
    GroupVisibility,
    InteractionKind,
    MemberRole,
)
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.domain.value_objects.shared_ref import SharedRef
from campus_chat.infrastructure.realtime.router import ChangeRouter

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_principal(user_id: UUID | None = None) -> Principal:
    return Principal(user_id=user_id or uuid.uuid4())


@pytest.fixture
def alice() -> Principal:
    return make_principal()


@pytest.fixture
def bob() -> Principal:
    return make_principal()


def make_profile(user_id: UUID, name: str = "user", college: str | None = "MIT") -> UserProfile:
    return UserProfile(id=user_id, name=name, college=college, profile_photo=None)


def make_message(
    *,
    sender_id: UUID,
    receiver_id: UUID | None = None,
    group_id: UUID | None = None,
    body: str = "hello",
    created_at: datetime | None = None,
    shared: SharedRef | None = None,
) -> Message:
    scope = MessageScope.group(group_id) if group_id else MessageScope.direct(receiver_id or uuid.uuid4())
    return Message(
        id=uuid.uuid4(),
        scope=scope,
        sender_id=sender_id,
        body=body,
        attachment_url=None,
        attachment_kind=None,
        created_at=created_at or T0,
        shared=shared or SharedRef.none(),
    )


def make_group(
    *,
    created_by: UUID,
    visibility: GroupVisibility = GroupVisibility.MY_COLLEGE,
    college: str | None = "MIT",
    name: str = "Robotics",
    created_at: datetime | None = None,
) -> Group:
    return Group(
        id=uuid.uuid4(),
        name=name,
        description=None,
        visibility=visibility,
        college=college,
        created_by=created_by,
        image_url=None,
        created_at=created_at or T0,
    )


@dataclass
class FakeStore:
    """Rows shared by every FakeUoW opened over it."""

    messages: list[Message] = field(default_factory=list)
    group_messages: list[Message] = field(default_factory=list)
    groups: dict[UUID, Group] = field(default_factory=dict)
    members: list[GroupMember] = field(default_factory=list)
    interactions: dict[InteractionKind, set[tuple[str, UUID, UUID]]] = field(
        default_factory=lambda: {kind: set() for kind in InteractionKind},
    )
    comments: dict[tuple[str, UUID], int] = field(default_factory=dict)
    users: dict[UUID, UserProfile] = field(default_factory=dict)
    posts: dict[UUID, PostPreview] = field(default_factory=dict)
    projects: dict[UUID, ProjectPreview] = field(default_factory=dict)
    follows: set[tuple[UUID, UUID]] = field(default_factory=set)
    outbox: list[dict[str, Any]] = field(default_factory=list)
    # Failure switches
    unavailable: bool = False
    fail_writes: bool = False
    # Call counters
    reads: dict[str, int] = field(default_factory=dict)

    def add_member(self, group_id: UUID, user_id: UUID, role: MemberRole = MemberRole.MEMBER) -> None:
        self.members.append(GroupMember(group_id=group_id, user_id=user_id, role=role, joined_at=T0))

    def read(self, name: str) -> None:
        if self.unavailable:
            raise StoreUnavailableError("Store unavailable")
        self.reads[name] = self.reads.get(name, 0) + 1

    def write(self) -> None:
        if self.unavailable or self.fail_writes:
            raise StoreUnavailableError("Store unavailable")


def _thread_key(m: Message) -> tuple[datetime, str]:
    return (m.created_at, str(m.id))


@dataclass
class FakeMessageReader:
    _store: FakeStore

    async def get_by_id(self, message_id: UUID) -> Message | None:
        self._store.read("messages.get")
        return next((m for m in self._store.messages if m.id == message_id), None)

    async def list_for_user(self, user_id: UUID) -> list[Message]:
        self._store.read("messages.list_for_user")
        rows = [m for m in self._store.messages if m.involves(user_id)]
        return sorted(rows, key=_thread_key, reverse=True)

    async def list_between(self, user_id: UUID, partner_id: UUID) -> list[Message]:
        self._store.read("messages.list_between")
        pair = {user_id, partner_id}
        rows = [
            m for m in self._store.messages
            if {m.sender_id, m.scope.target_id} == pair
        ]
        return sorted(rows, key=_thread_key)


@dataclass
class FakeMessageWriter:
    _store: FakeStore

    async def create(self, message: Message) -> Message:
        self._store.write()
        self._store.messages.append(message)
        return message

    async def delete(self, message_id: UUID) -> None:
        self._store.write()
        self._store.messages = [m for m in self._store.messages if m.id != message_id]


@dataclass
class FakeGroupMessageReader:
    _store: FakeStore

    async def get_by_id(self, message_id: UUID) -> Message | None:
        self._store.read("group_messages.get")
        return next((m for m in self._store.group_messages if m.id == message_id), None)

    async def list_for_group(self, group_id: UUID) -> list[Message]:
        self._store.read("group_messages.list")
        rows = [m for m in self._store.group_messages if m.scope.target_id == group_id]
        return sorted(rows, key=_thread_key)


@dataclass
class FakeGroupMessageWriter:
    _store: FakeStore

    async def create(self, message: Message) -> Message:
        self._store.write()
        self._store.group_messages.append(message)
        return message

    async def delete(self, message_id: UUID) -> None:
        self._store.write()
        self._store.group_messages = [m for m in self._store.group_messages if m.id != message_id]


@dataclass
class FakeGroupReader:
    _store: FakeStore

    async def get_by_id(self, group_id: UUID) -> Group | None:
        self._store.read("groups.get")
        return self._store.groups.get(group_id)

    async def list_by_visibility(
        self, visibility: GroupVisibility, *, college: str | None = None,
    ) -> list[Group]:
        self._store.read("groups.list")
        rows = [
            g for g in self._store.groups.values()
            if g.visibility == visibility and (college is None or g.college == college)
        ]
        return sorted(rows, key=lambda g: g.created_at, reverse=True)

    async def list_by_ids(self, group_ids: list[UUID]) -> list[Group]:
        return [self._store.groups[g] for g in group_ids if g in self._store.groups]


@dataclass
class FakeGroupWriter:
    _store: FakeStore

    async def create(self, group: Group) -> Group:
        self._store.write()
        self._store.groups[group.id] = group
        return group

    async def update(self, group_id: UUID, changes: dict[str, Any]) -> None:
        self._store.write()
        self._store.groups[group_id] = replace(self._store.groups[group_id], **changes)

    async def delete(self, group_id: UUID) -> None:
        self._store.write()
        self._store.groups.pop(group_id, None)
        self._store.members = [m for m in self._store.members if m.group_id != group_id]


@dataclass
class FakeMemberReader:
    _store: FakeStore

    async def get_member(self, group_id: UUID, user_id: UUID) -> GroupMember | None:
        self._store.read("members.get")
        return next(
            (m for m in self._store.members if m.group_id == group_id and m.user_id == user_id),
            None,
        )

    async def list_members(self, group_id: UUID) -> list[GroupMember]:
        return [m for m in self._store.members if m.group_id == group_id]

    async def list_group_ids_for_user(self, user_id: UUID) -> list[UUID]:
        return [m.group_id for m in self._store.members if m.user_id == user_id]


@dataclass
class FakeMemberWriter:
    _store: FakeStore

    async def add(self, member: GroupMember) -> None:
        self._store.write()
        self._store.members.append(member)

    async def remove(self, group_id: UUID, user_id: UUID) -> None:
        self._store.write()
        self._store.members = [
            m for m in self._store.members
            if not (m.group_id == group_id and m.user_id == user_id)
        ]


@dataclass
class FakeInteractionReader:
    _store: FakeStore

    async def count(self, kind: InteractionKind, target: EntityTarget) -> int:
        self._store.read(f"{kind}.count")
        return sum(
            1 for column, entity_id, _ in self._store.interactions[kind]
            if column == target.column and entity_id == target.entity_id
        )

    async def has_acted(self, kind: InteractionKind, target: EntityTarget, user_id: UUID) -> bool:
        self._store.read(f"{kind}.has_acted")
        return (target.column, target.entity_id, user_id) in self._store.interactions[kind]

    async def count_comments(self, target: EntityTarget) -> int:
        self._store.read("comments.count")
        return self._store.comments.get((target.column, target.entity_id), 0)


@dataclass
class FakeInteractionWriter:
    _store: FakeStore

    async def add(self, kind: InteractionKind, target: EntityTarget, user_id: UUID) -> None:
        self._store.write()
        self._store.interactions[kind].add((target.column, target.entity_id, user_id))

    async def remove(self, kind: InteractionKind, target: EntityTarget, user_id: UUID) -> None:
        self._store.write()
        self._store.interactions[kind].discard((target.column, target.entity_id, user_id))


@dataclass
class FakeProfileReader:
    _store: FakeStore

    async def get_user(self, user_id: UUID) -> UserProfile | None:
        self._store.read("users.get")
        return self._store.users.get(user_id)

    async def get_users(self, user_ids: list[UUID]) -> dict[UUID, UserProfile]:
        self._store.read("users.get_many")
        return {u: self._store.users[u] for u in user_ids if u in self._store.users}

    async def get_post(self, post_id: UUID) -> PostPreview | None:
        self._store.read("posts.get")
        return self._store.posts.get(post_id)

    async def get_project(self, project_id: UUID) -> ProjectPreview | None:
        self._store.read("projects.get")
        return self._store.projects.get(project_id)


@dataclass
class FakeFollowReader:
    _store: FakeStore

    async def is_following(self, follower_id: UUID, following_id: UUID) -> bool:
        return (follower_id, following_id) in self._store.follows

    async def list_following(self, user_id: UUID) -> list[UUID]:
        return sorted((b for a, b in self._store.follows if a == user_id), key=str)

    async def list_followers(self, user_id: UUID) -> list[UUID]:
        return sorted((a for a, b in self._store.follows if b == user_id), key=str)


@dataclass
class FakeFollowWriter:
    _store: FakeStore

    async def add(self, follower_id: UUID, following_id: UUID) -> None:
        self._store.write()
        self._store.follows.add((follower_id, following_id))

    async def remove(self, follower_id: UUID, following_id: UUID) -> None:
        self._store.write()
        self._store.follows.discard((follower_id, following_id))


@dataclass
class FakeOutboxWriter:
    _store: FakeStore
    _pending: list[OutboxRecord] = field(default_factory=list)
    sent: list[int] = field(default_factory=list)
    failed: list[tuple[int, datetime]] = field(default_factory=list)
    dead: list[int] = field(default_factory=list)
    errors: list[str | None] = field(default_factory=list)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._store.outbox.append({"event_type": event_type, "payload": payload})

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        return self._pending[:batch_size]

    async def mark_sent(self, ids: list[int]) -> None:
        self.sent.extend(ids)

    async def mark_failed(
        self, record_id: int, next_retry_at: datetime, *, error: str | None = None,
    ) -> None:
        self.failed.append((record_id, next_retry_at))
        self.errors.append(error)

    async def mark_dead(self, record_id: int) -> None:
        self.dead.append(record_id)


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""

    store: FakeStore = field(default_factory=FakeStore)
    _committed: bool = False

    def __post_init__(self) -> None:
        s = self.store
        self.messages = FakeMessageReader(s)
        self.messages_w = FakeMessageWriter(s)
        self.group_messages = FakeGroupMessageReader(s)
        self.group_messages_w = FakeGroupMessageWriter(s)
        self.groups = FakeGroupReader(s)
        self.groups_w = FakeGroupWriter(s)
        self.members = FakeMemberReader(s)
        self.members_w = FakeMemberWriter(s)
        self.interactions = FakeInteractionReader(s)
        self.interactions_w = FakeInteractionWriter(s)
        self.profiles = FakeProfileReader(s)
        self.follows = FakeFollowReader(s)
        self.follows_w = FakeFollowWriter(s)
        self.outbox = FakeOutboxWriter(s)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


def uow_factory(store: FakeStore):
    """Per-query unit of work over a shared store, as sessions and channels use it."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeUoW]:
        yield FakeUoW(store)

    return factory


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def feed() -> ChangeRouter:
    return ChangeRouter()


def minutes_ago(minutes: int, now: datetime = T0) -> datetime:
    return now - timedelta(minutes=minutes)


class FixedClock:
    def __init__(self, now: datetime = T0) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now
