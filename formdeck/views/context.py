from dataclasses import dataclass, field

from formdeck.auth import IdentityProvider
from formdeck.notifications import Notifier


class Navigator:
    """Records client-side navigation requested by a view."""

    def __init__(self):
        self.history: list[str] = []

    def push(self, path: str) -> None:
        self.history.append(path)

    @property
    def location(self) -> str | None:
        return self.history[-1] if self.history else None


@dataclass
class ViewContext:
    identity: IdentityProvider
    notifier: Notifier = field(default_factory=Notifier)
    navigator: Navigator = field(default_factory=Navigator)
