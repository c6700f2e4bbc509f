"""I/O operations for ccm.

Import from submodules:
- store: RegistryStore, FilesystemRegistryStore, InMemoryRegistryStore
- migration: normalize_raw_state, migrate_legacy_aliases
- frontmatter: read_frontmatter, has_agent_frontmatter
"""
