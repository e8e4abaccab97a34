"""
Single entry point for model calls.

Every flow hands a rendered prompt and an output schema to :class:`ModelInvoker`.
The invoker owns the tool-calling loop and the recovery of a JSON object from
the model's final answer, so flows never see raw model text.
"""

from __future__ import annotations

import ast
import json
import re
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)
from pydantic import BaseModel, ValidationError

from ..domain import ChatRole
from ..errors import InvocationError, OutputParseError, ToolExecutionError
from ..infra.config import get_config
from ..infra.llm import get_chat_model
from ..observability.logging_utils import log_event, summarize_text
from ..prompts.fragments import RenderedPrompt
from ..schemas import ChatTurn
from .tools import execute_tool, get_tool


T = TypeVar("T", bound=BaseModel)

OUTPUT_CONTRACT = (
    "Answer with a single JSON object and nothing else. "
    "The object must conform to this JSON Schema:\n{schema}"
)


class ModelInvoker:
    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        *,
        max_tool_rounds: Optional[int] = None,
    ) -> None:
        self._llm = llm
        self._max_tool_rounds = (
            max_tool_rounds
            if max_tool_rounds is not None
            else get_config().max_tool_rounds
        )

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            try:
                self._llm = get_chat_model()
            except ValueError as exc:
                raise InvocationError(f"model backend unavailable: {exc}") from exc
        return self._llm

    async def invoke_structured(
        self,
        prompt: RenderedPrompt,
        schema: Type[T],
        *,
        tools: Sequence[str] = (),
        history: Sequence[ChatTurn] = (),
    ) -> T:
        messages: List[BaseMessage] = [SystemMessage(content=self._output_contract(schema))]
        messages.extend(self._history_messages(history))
        messages.append(self._human_message(prompt))
        reply = await self._run(messages, tools)
        text = self._extract_llm_text(reply)
        payload = self._load_json_payload(text)
        if payload is None:
            log_event("model_output_unparsable", text=summarize_text(text))
            raise OutputParseError("model answer is not a JSON object")
        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            log_event(
                "model_output_invalid",
                schema=schema.__name__,
                errors=[f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()],
            )
            raise OutputParseError(f"model answer does not match {schema.__name__}") from exc

    async def _run(self, messages: List[BaseMessage], tools: Sequence[str]) -> AIMessage:
        model: Any = self.llm
        if tools:
            model = model.bind_tools([get_tool(name) for name in tools])
        rounds = 0
        while True:
            reply = await self._call(model, messages)
            tool_calls = getattr(reply, "tool_calls", None) or []
            if not tool_calls:
                return reply
            if rounds >= self._max_tool_rounds:
                raise InvocationError(f"model kept calling tools after {rounds} rounds")
            rounds += 1
            messages.append(reply)
            for call in tool_calls:
                messages.append(await self._run_tool_call(call, tools))

    async def _call(self, model: Any, messages: List[BaseMessage]) -> AIMessage:
        try:
            return await model.ainvoke(messages)
        except InvocationError:
            raise
        except Exception as exc:
            log_event("model_call_failed", error=repr(exc))
            raise InvocationError(f"model call failed: {exc}") from exc

    @staticmethod
    async def _run_tool_call(call: Dict[str, Any], allowed: Sequence[str]) -> ToolMessage:
        name = call.get("name") or ""
        log_event("tool_call", tool=name, args=call.get("args"))
        if name not in allowed:
            raise ToolExecutionError(f"tool {name} is not bound to this flow")
        result = await execute_tool(name, call.get("args") or {})
        return ToolMessage(
            content=json.dumps(result, ensure_ascii=False, default=str),
            tool_call_id=call.get("id") or name,
            name=name,
        )

    @staticmethod
    def _output_contract(schema: Type[BaseModel]) -> str:
        spec = json.dumps(
            schema.model_json_schema(by_alias=True), ensure_ascii=False, indent=2
        )
        return OUTPUT_CONTRACT.format(schema=spec)

    @staticmethod
    def _history_messages(history: Sequence[ChatTurn]) -> List[BaseMessage]:
        messages: List[BaseMessage] = []
        for turn in history or ():
            if turn.role == ChatRole.ASSISTANT:
                messages.append(AIMessage(content=turn.text))
            else:
                messages.append(HumanMessage(content=turn.text))
        return messages

    @staticmethod
    def _human_message(prompt: RenderedPrompt) -> HumanMessage:
        if prompt.media:
            return HumanMessage(content=prompt.content_blocks())
        return HumanMessage(content=prompt.text)

    @staticmethod
    def _extract_llm_text(result: object) -> str:
        content = getattr(result, "content", result)
        if isinstance(content, list):
            parts = []
            for item in content:
                if isinstance(item, dict):
                    parts.append(str(item.get("text") or item.get("content") or ""))
                else:
                    parts.append(str(item))
            return "".join(parts).strip()
        if content is None:
            return ""
        return str(content).strip()

    @staticmethod
    def _strip_code_fence(text: str) -> str:
        cleaned = text.strip()
        if cleaned.startswith("```"):
            cleaned = re.sub(r"^```(?:json)?", "", cleaned, flags=re.IGNORECASE).strip()
            if cleaned.endswith("```"):
                cleaned = cleaned[:-3].strip()
        return cleaned

    @staticmethod
    def _extract_json_block(text: str) -> Optional[str]:
        if not text:
            return None
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end == -1 or end <= start:
            return None
        return text[start : end + 1]

    @classmethod
    def _load_json_payload(cls, text: str) -> Optional[dict]:
        if not text:
            return None
        cleaned = cls._strip_code_fence(text)
        for candidate in (cleaned, cls._extract_json_block(cleaned)):
            if not candidate:
                continue
            try:
                data = json.loads(candidate)
            except json.JSONDecodeError:
                try:
                    data = ast.literal_eval(candidate)
                except (ValueError, SyntaxError, MemoryError, RecursionError):
                    continue
            if isinstance(data, dict):
                return data
        return None


@lru_cache(maxsize=1)
def get_invoker() -> ModelInvoker:
    return ModelInvoker()
