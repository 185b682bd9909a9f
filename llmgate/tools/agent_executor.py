"""Tool that lets the model create agents, run tasks on them and leave feedback."""
from typing import Any, Dict

from .registry import ToolDescriptor
from ..agents.manager import AgentManager
from ..errors import LLMGatewayError


def _manager_from(context: Any) -> AgentManager:
    """Fetch the AgentManager kept in the tool context, creating it on first use."""
    if not isinstance(context, dict) or context.get("service") is None:
        raise RuntimeError("LLM service not available in context")
    manager = context.get("agent_manager")
    if manager is None:
        manager = AgentManager(context["service"])
        context["agent_manager"] = manager
    return manager


async def agent_executor(args: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    action = args.get("action")
    agent_name = args.get("agentName")
    manager = _manager_from(context)

    if action == "create":
        if not args.get("agentRole"):
            raise ValueError("agentRole is required for create action")
        try:
            agent = manager.create_agent(
                name=agent_name,
                role=args["agentRole"],
                tools=args.get("tools") or [],
                output_schema=args.get("outputSchema"),
            )
            await agent.initialize()
        except LLMGatewayError as exc:
            raise RuntimeError(f"Failed to create agent: {exc}") from exc
        return {
            "success": True,
            "message": f"Agent {agent_name} created successfully",
            "agent": {"name": agent.name, "role": agent.role, "tools": list(agent.tools)},
        }

    if action == "execute":
        if not args.get("task"):
            raise ValueError("task is required for execute action")
        try:
            result = await manager.execute_task(agent_name, args["task"])
        except LLMGatewayError as exc:
            raise RuntimeError(f"Failed to execute task: {exc}") from exc
        if isinstance(result, dict) and "raw" in result:
            result = {key: value for key, value in result.items() if key != "raw"}
        return {"success": True, "result": result}

    if action == "feedback":
        if not args.get("feedback"):
            raise ValueError("feedback is required for feedback action")
        try:
            manager.add_feedback(agent_name, args["feedback"])
        except LLMGatewayError as exc:
            raise RuntimeError(f"Failed to add feedback: {exc}") from exc
        return {"success": True, "message": f"Feedback added for agent {agent_name}"}

    raise ValueError(f"Unknown action: {action}")


agent_executor_tool = ToolDescriptor(
    name="agent_executor",
    description=(
        "Execute a task with a specific agent. This tool allows you to:\n"
        "1. Create a new agent with a specific role and tools\n"
        "2. Execute a task with an existing agent\n"
        "3. Provide feedback to an agent"
    ),
    progress_text="Working with agent...",
    parameters={
        "type": "object",
        "properties": {
            "action": {
                "type": "string",
                "enum": ["create", "execute", "feedback"],
                "description": "The action to perform: create a new agent, execute a task with an agent, or provide feedback",
            },
            "agentName": {
                "type": "string",
                "description": "The name of the agent to create or use",
            },
            "agentRole": {
                "type": "string",
                "description": "For create action: The role description for the agent",
            },
            "tools": {
                "type": "array",
                "items": {"type": "string"},
                "description": "For create action: Array of tool names to assign to the agent",
            },
            "outputSchema": {
                "type": "object",
                "description": "For create action: JSON Schema for structured output (optional)",
            },
            "task": {
                "type": "string",
                "description": "For execute action: The task description to execute with the agent",
            },
            "feedback": {
                "type": "string",
                "description": "For feedback action: Feedback text for the agent",
            },
        },
        "required": ["action", "agentName"],
    },
    execute=agent_executor,
)
