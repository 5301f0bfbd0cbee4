"""Import all models so Alembic can discover them via Base.metadata."""
from campus_chat.infrastructure.db.models.follow import FollowModel
from campus_chat.infrastructure.db.models.group import GroupMemberModel, GroupModel
from campus_chat.infrastructure.db.models.interaction import (
    BookmarkModel,
    CommentModel,
    LikeModel,
)
from campus_chat.infrastructure.db.models.message import GroupMessageModel, MessageModel
from campus_chat.infrastructure.db.models.outbox import OutboxMessageModel
from campus_chat.infrastructure.db.models.profile import PostModel, ProjectModel, UserModel

__all__ = [
    "BookmarkModel",
    "CommentModel",
    "FollowModel",
    "GroupMemberModel",
    "GroupMessageModel",
    "GroupModel",
    "LikeModel",
    "MessageModel",
    "OutboxMessageModel",
    "PostModel",
    "ProjectModel",
    "UserModel",
]
