"""
Conversation serializer.

Converts a run context's conversation to plain data and back so a
conversation can be stored and continued later. Message owners are not
serialized; resumed messages have no owner.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from ..core.exceptions import SerializationError, UnparsableToolCallError
from ..core.models import Message, ToolCall, ToolOutput
from ..orchestrator.run_context import RunContext

if TYPE_CHECKING:
    from ..orchestrator.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

SERIALIZATION_VERSION = "1.0"


class ConversationSerializer:

    @staticmethod
    def serialize(context: RunContext) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {
            "serialized_at": int(time.time()),
            "version": SERIALIZATION_VERSION,
        }
        if context.previous_response_id is not None:
            metadata["previous_response_id"] = context.previous_response_id

        return {
            "conversation": [
                {
                    "role": message.role.value,
                    "content": message.content,
                    "parameters": dict(message.parameters),
                    "usage": message.usage(),
                }
                for message in context.conversation()
            ],
            "metadata": metadata,
        }

    @classmethod
    def serialize_from_orchestrator(cls, orchestrator: "Orchestrator") -> Dict[str, Any]:
        return cls.serialize(orchestrator.context)

    @classmethod
    def deserialize(cls, data: Mapping[str, Any], into: Optional[RunContext] = None) -> RunContext:
        """Append the serialized conversation to ``into`` (or a new context).

        Raises:
            SerializationError: If an entry is malformed
        """
        context = into if into is not None else RunContext()
        entries = data.get("conversation")
        if not isinstance(entries, list):
            raise SerializationError("Serialized data has no conversation list")

        for index, entry in enumerate(entries):
            context.add_message(cls._restore_message(index, entry))

        response_id = (data.get("metadata") or {}).get("previous_response_id")
        if response_id is not None:
            context.with_previous_response_id(response_id)

        logger.debug(f"Restored {len(entries)} messages")
        return context

    @staticmethod
    def _restore_message(index: int, entry: Mapping[str, Any]) -> Message:
        parameters = entry.get("parameters") or {}
        if not isinstance(parameters, Mapping):
            raise SerializationError(
                f"Parameters of conversation entry {index} must be a mapping",
                context={"index": index}
            )
        usage = entry.get("usage") or {}
        tokens = {"input_tokens": usage.get("input_tokens"), "output_tokens": usage.get("output_tokens")}

        if parameters.get("type") == "function_call":
            call = {
                "tool": parameters.get("name") or "",
                "id": parameters.get("call_id") or "",
                "arguments_payload": parameters.get("arguments"),
                "parameters": dict(parameters),
                **tokens,
            }
            try:
                return ToolCall(**call)
            except UnparsableToolCallError:
                return ToolCall(arguments={}, **call)

        if "tool_call_id" in parameters:
            return ToolOutput(
                content=entry.get("content") or "",
                tool_call_id=parameters["tool_call_id"],
                parameters=dict(parameters),
                **tokens,
            )

        try:
            return Message(
                role=entry["role"],
                content=entry.get("content"),
                parameters=dict(parameters),
                **tokens,
            )
        except (KeyError, ValueError) as e:
            raise SerializationError(f"Conversation entry {index} is malformed: {e}", context={"index": index}) from e
