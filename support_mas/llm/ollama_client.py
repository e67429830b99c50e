"""
Ollama chat client - LangChain ChatOllama behind the chat(messages, tools) contract
"""
import json
import logging
from typing import Any, Dict, List, Optional

from langchain_community.chat_models import ChatOllama
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from ..config import settings
from ..models.runtime import ToolDefinition

logger = logging.getLogger(__name__)


class OllamaChatClient:
    """
    Talks to a local Ollama model through LangChain.
    Tools are described to the model in a system note; the model answers in text.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None
    ):
        self.model_name = model or settings.OLLAMA_TEXT_MODEL
        self.llm = ChatOllama(
            model=self.model_name,
            base_url=base_url or settings.OLLAMA_HOST,
            temperature=settings.LLM_TEMPERATURE if temperature is None else temperature
        )

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[ToolDefinition]] = None
    ) -> Dict[str, Any]:
        lc_messages = self._to_langchain(messages)
        if tools:
            lc_messages.insert(1 if lc_messages and isinstance(lc_messages[0], SystemMessage) else 0,
                               SystemMessage(content=self._describe_tools(tools)))

        response = await self.llm.ainvoke(lc_messages)
        logger.debug(f"Ollama {self.model_name} replied with {len(response.content)} chars")
        return {"content": response.content}

    def _to_langchain(self, messages: List[Dict[str, Any]]) -> List[BaseMessage]:
        converted: List[BaseMessage] = []
        for message in messages:
            role = message.get("role")
            content = str(message.get("content") or "")
            if role == "system":
                converted.append(SystemMessage(content=content))
            elif role == "assistant":
                converted.append(AIMessage(content=content))
            elif role == "tool":
                # ChatOllama has no tool role; feed results back as user-visible context
                converted.append(HumanMessage(content=f"[tool {message.get('name')}] {content}"))
            else:
                converted.append(HumanMessage(content=content))
        return converted

    def _describe_tools(self, tools: List[ToolDefinition]) -> str:
        lines = ["Tools available to you (describe which you would use):"]
        for tool in tools:
            lines.append(f"- {tool.name}: {tool.description} {json.dumps(tool.parameters)}")
        return "\n".join(lines)
