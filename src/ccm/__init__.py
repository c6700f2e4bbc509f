"""ccm: manage Claude Code agents, skills, commands and MCP servers from Git repositories.

Import from submodules:
- version: __version__
- context: CcmContext, create_context
- sources: clone_source, register_local_source, refresh_source, remove_source
- linking: LinkManager
- staging: McpStager
"""

from ccm.version import __version__ as __version__
