import logging
from typing import Any, Generic, Optional

from videotube.db.store import ModelT, ResourceStore
from videotube.errors import NotFound, Unauthorized
from videotube.utils import normalize_id

logger = logging.getLogger("ownership")


def is_owner(owner_id: Any, requester_id: Any) -> bool:
    owner = normalize_id(owner_id)
    requester = normalize_id(requester_id)
    return owner is not None and requester is not None and owner == requester


def authorize(owner_id: Any, requester_id: Any, message: str = "You are not authorized.") -> None:
    """Raise Unauthorized unless the requester owns the resource.

    A missing requester never matches.
    """
    if not is_owner(owner_id, requester_id):
        raise Unauthorized(message)


class OwnedResource(Generic[ModelT]):
    """Authorize-then-mutate operations shared by every owner-guarded resource."""

    def __init__(self, store: ResourceStore[ModelT], label: str, owner_field: str = "owner_id"):
        self.store = store
        self.label = label
        self.owner_field = owner_field

    def get_or_404(self, resource_id: str) -> ModelT:
        obj = self.store.find_by_id(resource_id)
        if obj is None:
            logger.warning(f"{self.label.capitalize()} not found: {resource_id}")
            raise NotFound(f"{self.label.capitalize()} not found.")
        return obj

    def get_owned(self, resource_id: str, requester_id: Optional[str], action: str) -> ModelT:
        obj = self.get_or_404(resource_id)
        try:
            authorize(getattr(obj, self.owner_field), requester_id, f"You are not authorized to {action} this {self.label}.")
        except Unauthorized:
            logger.warning(f"User {requester_id} tried to {action} {self.label} {resource_id}")
            raise
        return obj

    def update_owned(self, resource_id: str, requester_id: Optional[str], patch: dict, action: str = "update") -> ModelT:
        self.get_owned(resource_id, requester_id, action)
        updated = self.store.update(resource_id, patch)
        if updated is None:
            raise NotFound(f"{self.label.capitalize()} not found.")
        return updated

    def delete_owned(self, resource_id: str, requester_id: Optional[str]) -> ModelT:
        obj = self.get_owned(resource_id, requester_id, "delete")
        self.store.delete(resource_id)
        return obj
