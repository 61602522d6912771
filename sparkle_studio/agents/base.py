"""Shared plumbing for the Azure OpenAI text agents."""

from azure.identity import AzureCliCredential
from agent_framework.azure import AzureOpenAIResponsesClient


class TextAgent:
    """Lazily builds one Agent Framework agent with fixed instructions.

    Subclasses set NAME and INSTRUCTIONS. Tests may assign `_agent` directly
    to skip the Azure client entirely.
    """

    NAME = "TextAgent"
    INSTRUCTIONS = ""

    def __init__(
        self,
        endpoint: str | None = None,
        deployment: str | None = None,
    ):
        self.endpoint = endpoint
        self.deployment = deployment
        self._client: AzureOpenAIResponsesClient | None = None
        self._agent = None

    def _get_client(self) -> AzureOpenAIResponsesClient:
        """Lazy initialization of the Azure OpenAI client."""
        if self._client is None:
            kwargs = {}
            if self.endpoint:
                kwargs["endpoint"] = self.endpoint
            if self.deployment:
                kwargs["deployment_name"] = self.deployment
            self._client = AzureOpenAIResponsesClient(
                credential=AzureCliCredential(),
                **kwargs,
            )
        return self._client

    def _get_agent(self):
        """Lazy initialization of the agent."""
        if self._agent is None:
            self._agent = self._get_client().as_agent(
                name=self.NAME,
                instructions=self.INSTRUCTIONS,
            )
        return self._agent

    async def _run(self, messages) -> str:
        """Run the agent and concatenate every text content in the reply."""
        response = await self._get_agent().run(messages)

        text = ""
        for msg in response.messages:
            for content in msg.contents:
                if getattr(content, "text", None):
                    text += content.text
        return text.strip()
