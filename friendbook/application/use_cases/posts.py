"""Post publication and likes."""

from __future__ import annotations

from sqlalchemy.orm import Session

from friendbook.application.errors import NotFoundError
from friendbook.application.use_cases.notifications import create_notification
from friendbook.domain.entities import NotificationKind, Post, User
from friendbook.infrastructure.notifications import NotificationDispatcher
from friendbook.infrastructure.repositories import PostRepository, UserRepository


def create_post(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    author: User,
    text: str,
    tagged_user_ids: list[str] | None = None,
) -> Post:
    """Publish a post and notify every tagged user."""

    if not text or not text.strip():
        raise ValueError("Post text is required")

    tagged_ids = list(dict.fromkeys(tagged_user_ids or []))
    if tagged_ids:
        known_users = UserRepository(session).get_map_by_ids(tagged_ids)
        missing = [user_id for user_id in tagged_ids if user_id not in known_users]
        if missing:
            raise NotFoundError(f"Tagged user not found: {missing[0]}")

    post = PostRepository(session).create(
        Post(id=None, user_id=author.id, text=text.strip(), tagged_user_ids=tagged_ids)
    )

    for tagged_id in post.tagged_user_ids:
        create_notification(
            session,
            dispatcher,
            recipient_id=tagged_id,
            sender_id=author.id,
            kind=NotificationKind.USER_TAGGED,
            related_id=post.id,
            message=f"{author.name} tagged you in a post.",
        )
    return post


def get_post(session: Session, post_id: str) -> Post:
    post = PostRepository(session).get(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def like_post(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    post_id: str,
    user: User,
) -> Post:
    """Toggle ``user``'s like on the post; only a new like notifies the author."""

    repository = PostRepository(session)
    if repository.get(post_id) is None:
        raise NotFoundError("Post not found")

    post, liked = repository.toggle_like(post_id, user.id)
    if liked:
        create_notification(
            session,
            dispatcher,
            recipient_id=post.user_id,
            sender_id=user.id,
            kind=NotificationKind.POST_LIKED,
            related_id=post.id,
            message=f"{user.name} liked your post.",
        )
    return post


__all__ = ["create_post", "get_post", "like_post"]
