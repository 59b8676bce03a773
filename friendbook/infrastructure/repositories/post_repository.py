"""Persistence helpers for posts and post likes."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from friendbook.domain.entities import Post
from friendbook.infrastructure.models import PostModel, UserModel
from friendbook.utils import from_storage_datetime


class PostRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, post_id: str) -> Post | None:
        model = self.session.get(PostModel, post_id)
        return self._to_entity(model) if model else None

    def create(self, post: Post) -> Post:
        model = PostModel(user_id=post.user_id, text=post.text)
        if post.tagged_user_ids:
            model.tagged_users = self._load_users(post.tagged_user_ids)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def toggle_like(self, post_id: str, user_id: str) -> tuple[Post, bool]:
        """Add or remove the like of ``user_id``; return the post and whether it is now liked."""

        model = self.session.get(PostModel, post_id)
        if model is None:
            raise ValueError(f"Post with id {post_id} not found")
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

    def _load_users(self, user_ids: Sequence[str]) -> list[UserModel]:
        return self.session.query(UserModel).filter(UserModel.id.in_(set(user_ids))).all()

    @staticmethod
    def _to_entity(model: PostModel) -> Post:
        return Post(
            id=model.id,
            user_id=model.user_id,
            text=model.text,
            liked_by=[user.id for user in model.liked_by],
            tagged_user_ids=[user.id for user in model.tagged_users],
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["PostRepository"]
