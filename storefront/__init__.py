"""Storefront product query layer.

Typed GROQ queries over a Sanity content store, served over FastAPI and
exposed to the shopping assistant as MCP tools.
"""

__version__ = "0.1.0"
