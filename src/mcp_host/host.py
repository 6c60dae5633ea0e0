"""Process-wide runtime shared by every conversation.

A ToolHost is built once at startup: it connects the tool provider, discovers
the tool catalog and wires the orchestrator. All of its collaborators are
read-only afterwards, so concurrent conversations can share one instance.
"""

import logging

from mcp_host.completion.types import CompletionClient
from mcp_host.core.catalog import Catalog, build_catalog
from mcp_host.core.executor import ToolExecutor
from mcp_host.core.loop import Orchestrator
from mcp_host.core.types import Conversation
from mcp_host.tools.types import ToolProvider

logger = logging.getLogger(__name__)


class ToolHost:
    """Completion client, tool provider, catalog and orchestrator for one process.

    Attributes:
        completion_client: Shared completion client
        tool_provider: Connected tool provider
        catalog: Tool catalog discovered at startup
        orchestrator: Orchestrator wired to the collaborators above
        system_prompt: Prompt seeding every new conversation
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        tool_provider: ToolProvider,
        catalog: Catalog,
        max_tool_rounds: int,
        system_prompt: str | None = None,
    ) -> None:
        self.completion_client = completion_client
        self.tool_provider = tool_provider
        self.catalog = catalog
        self.system_prompt = system_prompt
        self.orchestrator = Orchestrator(
            completion_client=completion_client,
            executor=ToolExecutor(tool_provider),
            catalog=catalog,
            max_tool_rounds=max_tool_rounds,
        )

    @classmethod
    async def start(
        cls,
        completion_client: CompletionClient,
        tool_provider: ToolProvider,
        max_tool_rounds: int = 10,
        system_prompt: str | None = None,
    ) -> "ToolHost":
        """Connect the tool provider and discover the catalog.

        Both clients are closed again if startup fails.

        Raises:
            TransportFailure: If the tool provider cannot be reached
        """
        try:
            await tool_provider.connect()
            descriptors = await tool_provider.list_tools()
            catalog = build_catalog(descriptors)
        except BaseException:
            await tool_provider.close()
            await completion_client.close()
            raise

        logger.info(f"Tool provider connected. Tools available: {len(catalog)}")
        for entry in catalog:
            logger.info(f"Tool: {entry.name} - {entry.description}")

        return cls(
            completion_client=completion_client,
            tool_provider=tool_provider,
            catalog=catalog,
            max_tool_rounds=max_tool_rounds,
            system_prompt=system_prompt,
        )

    def new_conversation(self) -> Conversation:
        return Conversation.with_system_prompt(self.system_prompt)

    async def close(self) -> None:
        await self.tool_provider.close()
        await self.completion_client.close()
        logger.info("Tool host closed")
