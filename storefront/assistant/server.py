"""Storefront assistant MCP server.

Exposes catalog search as MCP tools for the shopping assistant.

MCP Tools:
1. search_products - Search with filters
2. get_product - Product details by slug
3. check_availability - Stock for product IDs
"""

import asyncio
import json

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import BaseModel, Field

from storefront.infrastructure.config import settings
from storefront.infrastructure.logging import configure_logging

logger = structlog.get_logger()


# ============================================================================
# Tool Input Schemas
# ============================================================================


class SearchProductsInput(BaseModel):
    """Input schema for search_products tool."""

    query: str = Field(
        default="",
        description="Words to look for in product names, descriptions and category titles. "
        "Example: 'oak table'",
    )
    category_slug: str = Field(default="", description="Only this category (slug).")
    material: str = Field(default="", description="Exact material, e.g. 'wood'.")
    color: str = Field(default="", description="Exact color, e.g. 'black'.")
    min_price: float = Field(default=0, description="Minimum price; 0 means no minimum.")
    max_price: float = Field(default=0, description="Maximum price; 0 means no maximum.")
    in_stock: bool = Field(default=False, description="Only products currently in stock.")


class GetProductInput(BaseModel):
    """Input schema for get_product tool."""

    slug: str = Field(..., description="Product slug returned by search_products.")


class CheckAvailabilityInput(BaseModel):
    """Input schema for check_availability tool."""

    product_ids: list[str] = Field(..., description="Product IDs to check.")


# ============================================================================
# MCP Server Implementation
# ============================================================================


def create_mcp_server() -> Server:
    """Create and configure the MCP server with all tools."""
    server = Server("storefront-assistant")

    _tools_instance = None

    async def get_tools():
        """Get or create the AssistantTools instance."""
        nonlocal _tools_instance
        if _tools_instance is None:
            from storefront.assistant.tools import AssistantTools
            from storefront.catalog.service import CatalogService
            from storefront.infrastructure.content_store import get_content_store

            _tools_instance = AssistantTools(
                CatalogService(
                    get_content_store(),
                    low_stock_threshold=settings.low_stock_threshold,
                )
            )
        return _tools_instance

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available MCP tools."""
        return [
            Tool(
                name="search_products",
                description=(
                    "Search the furniture catalog. Matches names, descriptions and "
                    "category titles, with optional category, material, color, price "
                    "and stock filters. Returns at most 20 products ordered by name."
                ),
                inputSchema=SearchProductsInput.model_json_schema(),
            ),
            Tool(
                name="get_product",
                description=(
                    "Get full details for one product, including description, "
                    "dimensions and all image URLs."
                ),
                inputSchema=GetProductInput.model_json_schema(),
            ),
            Tool(
                name="check_availability",
                description=(
                    "Check current stock and price for a list of product IDs, "
                    "for example the items in the customer's cart."
                ),
                inputSchema=CheckAvailabilityInput.model_json_schema(),
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Handle tool invocation."""
        tools = await get_tools()

        logger.info("Tool called", tool=name, arguments=arguments)

        try:
            if name == "search_products":
                input_data = SearchProductsInput(**arguments)
                result = await tools.search_products(**input_data.model_dump())
            elif name == "get_product":
                input_data = GetProductInput(**arguments)
                result = await tools.get_product(slug=input_data.slug)
            elif name == "check_availability":
                input_data = CheckAvailabilityInput(**arguments)
                result = await tools.check_availability(product_ids=input_data.product_ids)
            else:
                result = {
                    "success": False,
                    "error": f"Unknown tool: {name}",
                }

            logger.info("Tool completed", tool=name, success=result.get("success"))

            return [
                TextContent(
                    type="text",
                    text=json.dumps(result, indent=2, default=str),
                )
            ]

        except Exception as e:
            logger.exception("Tool execution failed", tool=name)
            return [
                TextContent(
                    type="text",
                    text=json.dumps(
                        {
                            "success": False,
                            "error": f"Tool execution failed: {str(e)}",
                        },
                        indent=2,
                    ),
                )
            ]

    return server


async def run_server() -> None:
    """Run the MCP server using stdio transport."""
    logger.info(
        "Starting Storefront Assistant MCP Server",
        content_backend=settings.content_backend,
    )

    server = create_mcp_server()

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Run the MCP server.

    Entry point for the assistant server. Uses stdio transport for
    communication with AI agents.
    """
    configure_logging(settings.log_level)
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
