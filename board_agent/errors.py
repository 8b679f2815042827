"""Exceptions raised by the planner and the agent orchestrator."""


class BoardAgentError(Exception):
    """Base class for board agent failures."""


class NotFound(BoardAgentError):
    """A board, object or container referenced by a command does not exist."""


class InvalidPlan(BoardAgentError):
    """A plan or tool call is structurally invalid (unknown action, too few ids, ...)."""


class ProviderError(BoardAgentError):
    """The chat-completion provider failed on both attempts of a round."""
