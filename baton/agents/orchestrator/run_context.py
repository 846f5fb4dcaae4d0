"""
Run context.

The run context is the state shared by every agent taking part in one run:
the conversation, the registered observers, the provider client and the
streaming flag.
"""

import logging
from typing import Any, List, Optional, Type, Union

from ..config import SDKConfig
from ..core.enums import MessageRole
from ..core.interfaces import TransportClient
from ..core.models import Message, Payload
from ..transporters.client import OpenAITransportClient
from .observers import AgentObserver, ObserverInvoker, ToolObserver

logger = logging.getLogger(__name__)


class RunContext:
    """Mutable state of one orchestrated run.

    The conversation is append-only except for the system message, which
    :meth:`with_system_message` keeps unique and first.
    """

    def __init__(
        self,
        client: Optional[TransportClient] = None,
        config: Optional[SDKConfig] = None,
        observer_invoker: Optional[ObserverInvoker] = None,
    ):
        self.config = config or SDKConfig()
        self._client = client
        self._observer_invoker = observer_invoker or ObserverInvoker()
        self._conversation: List[Message] = []
        self._agent_observers: List[AgentObserver] = []
        self._tool_observers: List[ToolObserver] = []
        self._is_streamed = False
        self._previous_response_id: Optional[str] = None

    # Client

    @property
    def client(self) -> TransportClient:
        """Provider client, created from the configuration on first use."""
        if self._client is None:
            self._client = OpenAITransportClient.from_config(self.config)
        return self._client

    def with_client(self, client: TransportClient) -> "RunContext":
        self._client = client
        return self

    # Streaming and continuation

    def streamed(self, is_streamed: bool = True) -> "RunContext":
        self._is_streamed = is_streamed
        return self

    @property
    def is_streamed(self) -> bool:
        return self._is_streamed

    @property
    def previous_response_id(self) -> Optional[str]:
        return self._previous_response_id

    def with_previous_response_id(self, response_id: Optional[str]) -> "RunContext":
        self._previous_response_id = response_id
        return self

    # Conversation

    def add_message(self, message: Message, owner: Optional[Any] = None) -> "RunContext":
        if owner is not None:
            message.with_owner(owner)
        self._conversation.append(message)
        return self

    def add_user_message(self, content: str) -> "RunContext":
        return self.add_message(Message(role=MessageRole.USER, content=content))

    def add_developer_message(self, content: str) -> "RunContext":
        return self.add_message(Message(role=MessageRole.DEVELOPER, content=content))

    def add_agent_message(self, message: Union[str, Payload], owner: Optional[Any] = None) -> Message:
        """Append an assistant message built from text or a response payload."""
        if isinstance(message, Payload):
            agent_message = Message(
                role=MessageRole.ASSISTANT,
                content=message.content,
                input_tokens=message.input_tokens,
                output_tokens=message.output_tokens,
            )
        else:
            agent_message = Message(role=MessageRole.ASSISTANT, content=message)
        self.add_message(agent_message, owner)
        return agent_message

    def with_system_message(self, content: str) -> "RunContext":
        """Replace every system message with one at the start of the conversation."""
        self._conversation = [m for m in self._conversation if m.role != MessageRole.SYSTEM]
        self._conversation.insert(0, Message(role=MessageRole.SYSTEM, content=content))
        return self

    def conversation(self) -> List[Message]:
        return list(self._conversation)

    def last_message(self) -> Optional[Message]:
        return self._conversation[-1] if self._conversation else None

    # Observers

    @property
    def observer_invoker(self) -> ObserverInvoker:
        return self._observer_invoker

    def with_observer_invoker(self, invoker: ObserverInvoker) -> "RunContext":
        self._observer_invoker = invoker
        return self

    def with_agent_observer(self, *observers: AgentObserver) -> "RunContext":
        self._agent_observers.extend(observers)
        return self

    def with_tool_observer(self, *observers: ToolObserver) -> "RunContext":
        self._tool_observers.extend(observers)
        return self

    def remove_agent_observer(self, observer_type: Type[AgentObserver]) -> "RunContext":
        """Drop every agent observer that is an instance of ``observer_type``."""
        self._agent_observers = [o for o in self._agent_observers if not isinstance(o, observer_type)]
        return self

    def remove_tool_observer(self, observer_type: Type[ToolObserver]) -> "RunContext":
        self._tool_observers = [o for o in self._tool_observers if not isinstance(o, observer_type)]
        return self

    def agent_observers(self) -> List[AgentObserver]:
        return list(self._agent_observers)

    def tool_observers(self) -> List[ToolObserver]:
        return list(self._tool_observers)
