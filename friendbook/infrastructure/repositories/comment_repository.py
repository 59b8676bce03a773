"""Persistence helpers for comments and comment likes."""

from __future__ import annotations

from sqlalchemy.orm import Session

from friendbook.domain.entities import Comment
from friendbook.infrastructure.models import CommentModel, UserModel
from friendbook.utils import from_storage_datetime


class CommentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, comment_id: str) -> Comment | None:
        model = self.session.get(CommentModel, comment_id)
        return self._to_entity(model) if model else None

    def create(self, comment: Comment) -> Comment:
        model = CommentModel(
            post_id=comment.post_id,
            user_id=comment.user_id,
            content=comment.content,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def toggle_like(self, comment_id: str, user_id: str) -> tuple[Comment, bool]:
        model = self.session.get(CommentModel, comment_id)
        if model is None:
            raise ValueError(f"Comment with id {comment_id} not found")
        existing = next((user for user in model.liked_by if user.id == user_id), None)
        if existing is not None:
            model.liked_by.remove(existing)
            liked = False
        else:
            user = self.session.get(UserModel, user_id)
            if user is None:
                raise ValueError(f"User with id {user_id} not found")
            model.liked_by.append(user)
            liked = True
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model), liked

    @staticmethod
    def _to_entity(model: CommentModel) -> Comment:
        return Comment(
            id=model.id,
            post_id=model.post_id,
            user_id=model.user_id,
            content=model.content,
            liked_by=[user.id for user in model.liked_by],
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["CommentRepository"]
