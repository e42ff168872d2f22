# Postman API tools package
# Concrete tools subclass BasePostmanTool, implement get_tool_definitions() and call the
# Postman API through self.request()/self.get()/... so failures surface as McpError.
from tools.base import REQUEST_TIMEOUT, BasePostmanTool, PostmanToolOptions, ToolMapping, build_client

__all__ = ["BasePostmanTool", "PostmanToolOptions", "ToolMapping", "build_client", "REQUEST_TIMEOUT"]
