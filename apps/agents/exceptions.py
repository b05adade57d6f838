"""Domain-specific exceptions for the agents app."""


class AgentServiceError(Exception):
    """Base exception for agent services."""
    pass


class AgentNotFoundError(AgentServiceError):
    """Raised when agent does not exist."""
    pass
