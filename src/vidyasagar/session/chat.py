"""Conversation history for the tutor, owned by the caller."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from vidyasagar.core.errors import InvocationError
from vidyasagar.core.invoker import ModelInvoker
from vidyasagar.flows.base import Flow
from vidyasagar.flows.tutor import TUTOR_FLOW
from vidyasagar.utils.logging import get_logger

LOG = get_logger(__name__)


class ChatTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class ChatHistory:
    """Ordered, in-memory list of turns. Never persisted."""

    def __init__(self, turns: Optional[List[ChatTurn]] = None) -> None:
        self._turns: List[ChatTurn] = list(turns or [])

    def __len__(self) -> int:
        return len(self._turns)

    def append(self, turn: ChatTurn) -> None:
        self._turns.append(turn)

    def truncate(self, length: int) -> None:
        del self._turns[length:]

    @property
    def turns(self) -> List[ChatTurn]:
        return list(self._turns)


class TutorSession:
    """Drives the tutor flow and keeps the history consistent.

    A failed model call rolls the history back to where it was before the
    message was sent. A rejected message never touches it.
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        history: Optional[ChatHistory] = None,
        flow: Flow = TUTOR_FLOW,
    ) -> None:
        self.invoker = invoker
        self.history = history if history is not None else ChatHistory()
        self.flow = flow

    async def send(self, message: str) -> ChatTurn:
        request = self.flow.validate({"message": message})
        checkpoint = len(self.history)
        self.history.append(ChatTurn(role="user", content=request.message))
        try:
            result = await self.flow.run(request, self.invoker)
        except InvocationError:
            self.history.truncate(checkpoint)
            LOG.info("Rolled back chat history", extra={"turns": checkpoint})
            raise
        reply = ChatTurn(role="assistant", content=result.response)
        self.history.append(reply)
        return reply
