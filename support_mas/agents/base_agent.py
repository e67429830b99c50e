"""
Base Agent - common base for the router, the agent executor and the judge team
"""
from abc import ABC, abstractmethod
from typing import Any, Dict
import logging


class BaseAgent(ABC):
    """
    Abstract base class for all agents.
    Gives every agent a name and a prefixed `agent.<name>` logger.
    """

    def __init__(self, name: str, description: str = ""):
        """
        Initialize the base agent.

        Args:
            name: Unique name for the agent
            description: Description of the agent's purpose
        """
        self.name = name
        self.description = description
        self.logger = logging.getLogger(f"agent.{name}")

    @abstractmethod
    async def execute(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run the agent's main task from a context dictionary.

        Args:
            context: Everything the agent needs for this call

        Returns:
            Dictionary with the agent's results
        """

    def log_info(self, message: str):
        self.logger.info(f"[{self.name}] {message}")

    def log_warning(self, message: str):
        self.logger.warning(f"[{self.name}] {message}")

    def log_error(self, message: str):
        self.logger.error(f"[{self.name}] {message}")

    def log_debug(self, message: str):
        self.logger.debug(f"[{self.name}] {message}")

    def __repr__(self):
        return f"<{self.__class__.__name__}(name='{self.name}')>"
