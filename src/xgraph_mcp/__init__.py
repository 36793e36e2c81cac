"""XGraph MCP Server package.

Provides MCP (Model Context Protocol) server implementation exposing
label graph export of CAD documents as tools.
"""

from .tools import XGraphSession

__version__ = "0.1.0"
__all__ = ["XGraphSession"]
