from __future__ import annotations

from campus_chat.domain.entities.group import Group, GroupMember
from campus_chat.domain.value_objects.enums import GroupVisibility, MemberRole
from campus_chat.infrastructure.db.models.group import GroupMemberModel, GroupModel


def model_to_entity(model: GroupModel) -> Group:
    return Group(
        id=model.id,
        name=model.name,
        description=model.description,
        visibility=GroupVisibility(model.type),
        college=model.college,
        created_by=model.created_by,
        image_url=model.image_url,
        created_at=model.created_at,
    )


def entity_to_model(entity: Group) -> GroupModel:
    return GroupModel(
        id=entity.id,
        name=entity.name,
        description=entity.description,
        type=entity.visibility.value,
        college=entity.college,
        created_by=entity.created_by,
        image_url=entity.image_url,
        created_at=entity.created_at,
    )


def member_to_entity(model: GroupMemberModel) -> GroupMember:
    return GroupMember(
        group_id=model.group_id,
        user_id=model.user_id,
        role=MemberRole(model.role),
        joined_at=model.joined_at,
    )
