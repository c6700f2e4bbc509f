"""Data models for ccm.

Import from submodules:
- asset: Asset, AssetType, DetectionResult
- source: GitHubSource, LocalSource, Source
- state: RegistryState, Selection, StagedMcpServer
- health: Diagnosis, LinkHealth, CureResult
- results: BatchResult, ItemOutcome
"""
