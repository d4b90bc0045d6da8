"""Agent backend adapters."""

from agent_relay.adapters.agent.letta import AgentBackendError, LettaAgentClient

__all__ = ["AgentBackendError", "LettaAgentClient"]
