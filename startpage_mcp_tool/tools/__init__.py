from startpage_mcp_tool.tools.startpage import register_startpage_tools

__all__ = ["register_startpage_tools"]
