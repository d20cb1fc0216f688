"""
Agent feature: LangGraph tool-calling loop shared by every workflow.

Architecture:
  System + Human → Agent (LLM) → Tool Decision → Execute Tools → Agent → ... → Response

Constraints:
  - Graph and tool wiring are built once per workflow; every run starts from
    a fresh message list
  - At most `max_tool_cycles` tool rounds per run (ToolCycleLimitExceeded)
  - Invalid tool arguments (including arguments that are not even JSON) are
    returned to the model as tool results so it can retry; any other tool
    error propagates to the caller
"""

from typing import Annotated, TypedDict
import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langgraph.graph import StateGraph, END, START
from langgraph.graph.message import add_messages

from study_companion.core.exceptions import ToolCycleLimitExceeded, ToolInputInvalid
from study_companion.core.llm_provider import LLMProvider
from study_companion.features.agent.messages import message_text
from study_companion.features.agent.tools import TOOL_SPECS, ToolName, Toolbox

logger = logging.getLogger(__name__)


# ── State Definition ─────────────────────────────────────
class WorkflowState(TypedDict):
    """State passed through the LangGraph graph."""
    messages: Annotated[list[BaseMessage], add_messages]
    tool_cycles: int


def should_continue(state: WorkflowState) -> str:
    """Route based on whether the LLM wants to call tools."""
    last_message = state["messages"][-1]
    if isinstance(last_message, AIMessage) and (last_message.tool_calls or last_message.invalid_tool_calls):
        return "tools"
    return END


class AgentWorkflow:
    """One configured instance of the tool-calling loop."""

    def __init__(
        self,
        name: str,
        llm_provider: LLMProvider,
        toolbox: Toolbox,
        tools: tuple[ToolName, ...],
        temperature: float = 0.0,
        max_tool_cycles: int = 10,
    ):
        self.name = name
        self.llm_provider = llm_provider
        self.toolbox = toolbox
        self.tools = tools
        self.temperature = temperature
        self.max_tool_cycles = max_tool_cycles
        self._tool_schemas = [TOOL_SPECS[t].openai_schema() for t in tools]
        self._bound_model = None
        self._bound_revision = -1
        self.graph = self._build_graph()

    # ── Model binding ────────────────────────────────────

    def _model(self):
        """Tool-bound chat model, rebuilt only when credentials change."""
        revision = self.llm_provider.revision
        if self._bound_model is None or self._bound_revision != revision:
            model: BaseChatModel = self.llm_provider.create_chat_model(temperature=self.temperature)
            self._bound_model = model.bind_tools(self._tool_schemas)
            self._bound_revision = revision
        return self._bound_model

    # ── Graph ────────────────────────────────────────────

    def _build_graph(self):
        async def agent_node(state: WorkflowState) -> dict:
            """LLM processes messages and decides: respond or call tool."""
            response = await self._model().ainvoke(state["messages"])
            return {"messages": [response]}

        async def tool_node(state: WorkflowState) -> dict:
            """Execute every requested tool call and append one result per call."""
            cycles = state.get("tool_cycles", 0) + 1
            if cycles > self.max_tool_cycles:
                raise ToolCycleLimitExceeded(self.name, self.max_tool_cycles)

            last_message = state["messages"][-1]
            results = []

            # Calls whose arguments could not even be parsed as JSON
            for itc in last_message.invalid_tool_calls:
                tool_name = itc.get("name") or "unknown"
                error = ToolInputInvalid(tool_name, f"Arguments are not valid JSON: {itc.get('args')!r}")
                results.append(ToolMessage(
                    content=self._render_invalid(error),
                    tool_call_id=itc.get("id") or "",
                    name=tool_name,
                ))

            for tc in last_message.tool_calls:
                content = await self._run_tool(tc["name"], tc.get("args") or {})
                results.append(ToolMessage(
                    content=content,
                    tool_call_id=tc["id"],
                    name=tc["name"],
                ))

            return {"messages": results, "tool_cycles": cycles}

        graph = StateGraph(WorkflowState)

        graph.add_node("agent", agent_node)
        graph.add_node("tools", tool_node)

        graph.add_edge(START, "agent")
        graph.add_conditional_edges("agent", should_continue, {"tools": "tools", END: END})
        graph.add_edge("tools", "agent")  # After tool → back to agent

        return graph.compile()

    async def _run_tool(self, raw_name: str, args: dict) -> str:
        try:
            name = ToolName(raw_name)
        except ValueError:
            name = None
        if name is None or name not in self.tools:
            logger.warning(f"[{self.name}] Model requested unknown tool '{raw_name}'")
            return f"Tool '{raw_name}' does not exist. Available tools: {', '.join(t.value for t in self.tools)}"

        logger.info(f"[{self.name}] Calling tool: {raw_name} with args: {list(args)}")
        try:
            result = await self.toolbox.dispatch(name, args)
        except ToolInputInvalid as e:
            return self._render_invalid(e)

        logger.info(f"[{self.name}] Tool {raw_name} returned ({len(result)} chars)")
        return result

    def _render_invalid(self, error: ToolInputInvalid) -> str:
        logger.warning(f"[{self.name}] {error.message}: {error.detail}")
        return f"Error: {error.message}. {error.detail}\nPlease call the tool again with corrected arguments."

    # ── Entry point ──────────────────────────────────────

    async def run(self, system_prompt: str, request: str) -> str:
        """Run the loop from a fresh conversation and return the final answer text."""
        state = {
            "messages": [SystemMessage(content=system_prompt), HumanMessage(content=request)],
            "tool_cycles": 0,
        }
        result = await self.graph.ainvoke(
            state,
            config={"recursion_limit": 2 * self.max_tool_cycles + 5},
        )
        return message_text(result["messages"][-1])
