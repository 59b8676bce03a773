"""Persistence helpers for friend requests and friendships."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from friendbook.domain.entities import FRIEND_REQUEST_PENDING, FriendRequest, Friendship
from friendbook.infrastructure.models import FriendRequestModel, FriendshipModel
from friendbook.utils import from_storage_datetime


class FriendRequestRepository:
    """Provide CRUD operations for friend requests and the friendships they create."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, request_id: str) -> FriendRequest | None:
        model = self.session.get(FriendRequestModel, request_id)
        return self._to_entity(model) if model else None

    def find_between(self, user_id: str, other_user_id: str) -> FriendRequest | None:
        """Return the request exchanged between two users in either direction."""

        model = (
            self.session.query(FriendRequestModel)
            .filter(
                or_(
                    and_(
                        FriendRequestModel.sender_id == user_id,
                        FriendRequestModel.receiver_id == other_user_id,
                    ),
                    and_(
                        FriendRequestModel.sender_id == other_user_id,
                        FriendRequestModel.receiver_id == user_id,
                    ),
                )
            )
            .order_by(FriendRequestModel.created_at.desc())
            .first()
        )
        return self._to_entity(model) if model else None

    def list_pending(
        self, *, sender_id: str | None = None, receiver_id: str | None = None
    ) -> Sequence[FriendRequest]:
        query = self.session.query(FriendRequestModel).filter(
            FriendRequestModel.status == FRIEND_REQUEST_PENDING
        )
        if sender_id is not None:
            query = query.filter(FriendRequestModel.sender_id == sender_id)
        if receiver_id is not None:
            query = query.filter(FriendRequestModel.receiver_id == receiver_id)
        query = query.order_by(FriendRequestModel.created_at.desc())
        return [self._to_entity(model) for model in query.all()]

    def create(self, request: FriendRequest) -> FriendRequest:
        model = FriendRequestModel(
            sender_id=request.sender_id,
            receiver_id=request.receiver_id,
            status=request.status,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, request: FriendRequest) -> FriendRequest:
        if request.id is None:
            raise ValueError("Friend request id is required for updates")
        model = self.session.get(FriendRequestModel, request.id)
        if model is None:
            raise ValueError(f"Friend request with id {request.id} not found")
        model.sender_id = request.sender_id
        model.receiver_id = request.receiver_id
        model.status = request.status
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_friendship(self, user_id: str, other_user_id: str) -> Friendship | None:
        model = (
            self.session.query(FriendshipModel)
            .filter(
                or_(
                    and_(
                        FriendshipModel.user_a_id == user_id,
                        FriendshipModel.user_b_id == other_user_id,
                    ),
                    and_(
                        FriendshipModel.user_a_id == other_user_id,
                        FriendshipModel.user_b_id == user_id,
                    ),
                )
            )
            .first()
        )
        return self._friendship_to_entity(model) if model else None

    def create_friendship(self, user_a_id: str, user_b_id: str) -> Friendship:
        model = FriendshipModel(user_a_id=user_a_id, user_b_id=user_b_id)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._friendship_to_entity(model)

    def list_friendships(self, user_id: str) -> Sequence[Friendship]:
        query = (
            self.session.query(FriendshipModel)
            .filter(
                or_(
                    FriendshipModel.user_a_id == user_id,
                    FriendshipModel.user_b_id == user_id,
                )
            )
            .order_by(FriendshipModel.created_at.desc())
        )
        return [self._friendship_to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: FriendRequestModel) -> FriendRequest:
        return FriendRequest(
            id=model.id,
            sender_id=model.sender_id,
            receiver_id=model.receiver_id,
            status=model.status,
            created_at=from_storage_datetime(model.created_at),
        )

    @staticmethod
    def _friendship_to_entity(model: FriendshipModel) -> Friendship:
        return Friendship(
            id=model.id,
            user_a_id=model.user_a_id,
            user_b_id=model.user_b_id,
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["FriendRequestRepository"]
