"""Exception hierarchy for ccm operations.

Absence of an optional record (selection, staged entry) is reported through return
values; these exceptions cover the cases a caller cannot proceed from.
"""


class CcmError(Exception):
    """Base class for expected ccm failures shown to the user without a traceback."""


class NotFoundError(CcmError):
    """A referenced source or asset does not exist."""


class SourceNotFoundError(NotFoundError):
    def __init__(self, alias: str) -> None:
        super().__init__(f"Source not found: {alias}")
        self.alias = alias


class AssetNotFoundError(NotFoundError):
    def __init__(self, alias: str, asset_path: str) -> None:
        super().__init__(f"Asset not found in {alias}: {asset_path}")
        self.alias = alias
        self.asset_path = asset_path


class InvalidInputError(CcmError, ValueError):
    """Malformed identity or path argument."""


class InvalidGitHubUrlError(InvalidInputError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid GitHub URL: {url}")
        self.url = url


class InvalidAssetTypeError(InvalidInputError):
    """Operation does not apply to the given asset type."""


class ConflictError(CcmError):
    """Registration would break alias or identity uniqueness."""


class DuplicateSourceError(ConflictError):
    def __init__(self, existing_alias: str, identity: str) -> None:
        super().__init__(f'Source already registered as "{existing_alias}" ({identity})')
        self.existing_alias = existing_alias
        self.identity = identity
