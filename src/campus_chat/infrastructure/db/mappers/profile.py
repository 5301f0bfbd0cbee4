from __future__ import annotations

from campus_chat.domain.entities.profile import PostPreview, ProjectPreview, UserProfile
from campus_chat.infrastructure.db.models.profile import PostModel, ProjectModel, UserModel


def user_to_entity(model: UserModel) -> UserProfile:
    return UserProfile(
        id=model.id,
        name=model.name,
        college=model.college,
        profile_photo=model.profile_photo,
        branch=model.branch,
        verification_status=model.verification_status,
    )


def post_to_entity(model: PostModel) -> PostPreview:
    return PostPreview(
        id=model.id,
        caption=model.caption,
        media_url=model.media_url,
        author=user_to_entity(model.author) if model.author else None,
        created_at=model.created_at,
    )


def project_to_entity(model: ProjectModel) -> ProjectPreview:
    return ProjectPreview(
        id=model.id,
        title=model.title,
        description=model.description,
        zip_file_url=model.zip_file_url,
        author=user_to_entity(model.author) if model.author else None,
        created_at=model.created_at,
    )
