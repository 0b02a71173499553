"""
Outbound clients for Azure DevOps and Azure OpenAI.
"""

from ado_assistant.clients.devops_client import AzureDevOpsClient
from ado_assistant.clients.generation_client import GenerationClient

__all__ = ["AzureDevOpsClient", "GenerationClient"]
