"""Comments on posts and comment likes."""

from __future__ import annotations

from sqlalchemy.orm import Session

from friendbook.application.errors import NotFoundError
from friendbook.application.use_cases.notifications import create_notification
from friendbook.domain.entities import Comment, NotificationKind, User
from friendbook.infrastructure.notifications import NotificationDispatcher
from friendbook.infrastructure.repositories import CommentRepository, PostRepository


def create_comment(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    post_id: str,
    author: User,
    content: str,
) -> Comment:
    if not content or not content.strip():
        raise ValueError("Comment content is required")

    post = PostRepository(session).get(post_id)
    if post is None:
        raise NotFoundError("Post not found")

    comment = CommentRepository(session).create(
        Comment(id=None, post_id=post.id, user_id=author.id, content=content.strip())
    )
    create_notification(
        session,
        dispatcher,
        recipient_id=post.user_id,
        sender_id=author.id,
        kind=NotificationKind.POST_COMMENTED,
        related_id=post.id,
        message=f"{author.name} commented on your post.",
    )
    return comment


def like_comment(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    comment_id: str,
    user: User,
) -> Comment:
    """Toggle ``user``'s like on a comment.

    The notification points at the post so the client can open the thread the
    comment belongs to.
    """

    repository = CommentRepository(session)
    if repository.get(comment_id) is None:
        raise NotFoundError("Comment not found")

    comment, liked = repository.toggle_like(comment_id, user.id)
    if liked:
        create_notification(
            session,
            dispatcher,
            recipient_id=comment.user_id,
            sender_id=user.id,
            kind=NotificationKind.COMMENT_LIKED,
            related_id=comment.post_id,
            message=f"{user.name} liked your comment.",
        )
    return comment


__all__ = ["create_comment", "like_comment"]
