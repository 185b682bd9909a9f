import logging
from typing import Optional

from .agent import Agent, parse_structured_output
from .manager import AgentManager
from ..config import settings
from ..errors import LLMGatewayError

logger = logging.getLogger(__name__)

DEFAULT_AGENT_ROLE = (
    "I am an AI assistant that helps users with their tasks. "
    "I can use various tools to accomplish complex tasks."
)


def create_agent_manager(service, enabled: Optional[bool] = None) -> Optional[AgentManager]:
    """
    Create an agent manager for ``service``.

    Returns None when agents are disabled (ENABLE_AGENTS setting, unless
    ``enabled`` is given).
    """
    if enabled is None:
        enabled = settings.enable_agents
    if not enabled:
        logger.info("Agents are disabled via ENABLE_AGENTS")
        return None
    return AgentManager(service)


async def initialize_default_agent(manager: Optional[AgentManager], name: Optional[str] = None) -> Optional[Agent]:
    """
    Return the default agent, creating it with every registered tool if needed.

    Returns None when there is no manager or set-up fails.
    """
    if manager is None:
        return None

    agent_name = name or settings.default_agent
    if agent_name in manager.agents:
        return manager.get_agent(agent_name)

    tool_names = [tool.name for tool in manager.service.get_tools()]
    try:
        agent = manager.create_agent(name=agent_name, role=DEFAULT_AGENT_ROLE, tools=tool_names)
        await agent.initialize()
    except LLMGatewayError as exc:
        logger.error("Error initializing agent %s: %s", agent_name, exc)
        return None

    logger.info("Agent %s initialized with tools: %s", agent_name, ", ".join(tool_names))
    return agent


__all__ = [
    "Agent",
    "AgentManager",
    "create_agent_manager",
    "initialize_default_agent",
    "parse_structured_output",
]
