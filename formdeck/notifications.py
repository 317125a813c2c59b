from typing import Literal

from pydantic import BaseModel


class Notification(BaseModel):
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class Notifier:
    """Collects transient toasts raised while a view handles an action."""

    def __init__(self):
        self._pending: list[Notification] = []

    def toast(self, title: str, description: str, variant: str = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self._pending.append(notification)
        return notification

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def drain(self) -> list[Notification]:
        drained, self._pending = self._pending, []
        return drained
