from dataclasses import dataclass
from typing import Literal, Protocol


Outcome = Literal[
    "answered",
    "unparseable",
    "provider_error",
    "transport_error",
    "not_configured",
    "no_session",
    "recovered",
]


@dataclass(frozen=True)
class GenerationResult:
    """Answer text plus the reason it looks the way it does.

    Callers outside the service layer only ever render ``text``; ``outcome``
    lets tests and logs tell a real model answer from a degraded one.
    """

    text: str
    outcome: Outcome = "answered"
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == "answered"


class AIClient(Protocol):
    async def generate(self, prompt: str) -> GenerationResult: ...
