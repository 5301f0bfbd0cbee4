from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, update

from campus_chat.domain.entities.group import Group, GroupMember
from campus_chat.domain.value_objects.enums import GroupVisibility
from campus_chat.infrastructure.db.mappers import group as mapper
from campus_chat.infrastructure.db.models.group import GroupMemberModel, GroupModel
from campus_chat.infrastructure.db.repositories._base import BaseRepo


class GroupReaderRepo(BaseRepo):
    async def get_by_id(self, group_id: UUID) -> Group | None:
        result = await self._execute(select(GroupModel).where(GroupModel.id == group_id))
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_by_visibility(
        self, visibility: GroupVisibility, *, college: str | None = None,
    ) -> list[Group]:
        stmt = select(GroupModel).where(GroupModel.type == visibility.value)
        if college is not None:
            stmt = stmt.where(GroupModel.college == college)
        stmt = stmt.order_by(GroupModel.created_at.desc())
        result = await self._execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_by_ids(self, group_ids: list[UUID]) -> list[Group]:
        if not group_ids:
            return []
        stmt = (
            select(GroupModel)
            .where(GroupModel.id.in_(group_ids))
            .order_by(GroupModel.created_at.desc())
        )
        result = await self._execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class GroupWriterRepo(BaseRepo):
    async def create(self, group: Group) -> Group:
        model = mapper.entity_to_model(group)
        self._session.add(model)
        await self._flush()
        return mapper.model_to_entity(model)

    async def update(self, group_id: UUID, changes: dict[str, Any]) -> None:
        await self._execute(update(GroupModel).where(GroupModel.id == group_id).values(**changes))

    async def delete(self, group_id: UUID) -> None:
        await self._execute(delete(GroupModel).where(GroupModel.id == group_id))


class MemberReaderRepo(BaseRepo):
    async def get_member(self, group_id: UUID, user_id: UUID) -> GroupMember | None:
        stmt = select(GroupMemberModel).where(
            GroupMemberModel.group_id == group_id,
            GroupMemberModel.user_id == user_id,
        )
        result = await self._execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.member_to_entity(model) if model else None

    async def list_members(self, group_id: UUID) -> list[GroupMember]:
        stmt = (
            select(GroupMemberModel)
            .where(GroupMemberModel.group_id == group_id)
            .order_by(GroupMemberModel.joined_at.asc())
        )
        result = await self._execute(stmt)
        return [mapper.member_to_entity(m) for m in result.scalars().all()]

    async def list_group_ids_for_user(self, user_id: UUID) -> list[UUID]:
        stmt = select(GroupMemberModel.group_id).where(GroupMemberModel.user_id == user_id)
        result = await self._execute(stmt)
        return list(result.scalars().all())


class MemberWriterRepo(BaseRepo):
    async def add(self, member: GroupMember) -> None:
        self._session.add(
            GroupMemberModel(
                group_id=member.group_id,
                user_id=member.user_id,
                role=member.role.value,
                joined_at=member.joined_at,
            )
        )
        await self._flush()

    async def remove(self, group_id: UUID, user_id: UUID) -> None:
        stmt = delete(GroupMemberModel).where(
            GroupMemberModel.group_id == group_id,
            GroupMemberModel.user_id == user_id,
        )
        await self._execute(stmt)
