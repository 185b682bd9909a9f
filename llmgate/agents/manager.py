import logging
from typing import Any, Dict, Optional, Sequence

from .agent import Agent
from ..errors import AgentNotFoundError, DuplicateAgentError, LLMGatewayError, MissingNameError

logger = logging.getLogger(__name__)


class AgentManager:
    """
    Owns the agents bound to one gateway service.
    """

    def __init__(self, service):
        self.service = service
        self.agents: Dict[str, Agent] = {}

    def create_agent(
        self,
        name: Optional[str] = None,
        role: str = "",
        tools: Optional[Sequence[str]] = None,
        output_schema: Optional[Dict[str, Any]] = None,
    ) -> Agent:
        """
        Create and store an agent bound to this manager's service.

        Raises:
            MissingNameError: If no name is given.
            DuplicateAgentError: If the name is taken.
        """
        if not name:
            raise MissingNameError()
        if name in self.agents:
            raise DuplicateAgentError(name)

        agent = Agent(
            name=name,
            role=role,
            service=self.service,
            tools=tools,
            output_schema=output_schema,
        )
        self.agents[name] = agent
        logger.debug("Created agent: %s", name)
        return agent

    def get_agent(self, name: str) -> Agent:
        agent = self.agents.get(name)
        if agent is None:
            raise AgentNotFoundError(name)
        return agent

    def get_agents(self) -> Dict[str, Agent]:
        return dict(self.agents)

    def remove_agent(self, name: str) -> None:
        if name not in self.agents:
            raise AgentNotFoundError(name)
        del self.agents[name]
        logger.debug("Removed agent: %s", name)

    async def initialize_agents(self) -> Dict[str, Optional[str]]:
        """
        Initialize every agent.

        One agent failing does not stop the others.

        Returns:
            Dict[str, Optional[str]]: Agent name -> error message, or None on success.
        """
        results: Dict[str, Optional[str]] = {}
        for name, agent in list(self.agents.items()):
            try:
                await agent.initialize()
            except (LLMGatewayError, ValueError) as exc:
                logger.error("Failed to initialize agent %s: %s", name, exc)
                results[name] = str(exc)
            else:
                logger.debug("Initialized agent: %s", name)
                results[name] = None
        return results

    async def execute_task(
        self,
        agent_name: str,
        task: str,
        options: Optional[Dict[str, Any]] = None,
        on_progress=None,
    ) -> Any:
        """
        Run a task on the named agent. Errors propagate unchanged.

        Raises:
            AgentNotFoundError: If no agent has that name.
        """
        agent = self.get_agent(agent_name)
        logger.debug("Executing task with agent %s: %s", agent_name, task)
        try:
            result = await agent.execute_task(task, options, on_progress)
        except Exception as exc:
            logger.error("Error executing task with agent %s: %s", agent_name, exc)
            raise
        logger.debug("Task completed by agent %s", agent_name)
        return result

    def add_feedback(self, agent_name: str, feedback: str) -> None:
        self.get_agent(agent_name).add_feedback(feedback)
        logger.debug("Added feedback for agent %s", agent_name)
