"""Git operations interface.

ccm only needs two things from git: materialize a remote repository into a
local directory, and bring that directory up to date later.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def clone(self, url: str, destination: Path) -> None:
        """Shallow-clone url into destination.

        Raises:
            RuntimeError: If the clone fails
        """
        ...

    @abstractmethod
    def refresh(self, repo_dir: Path) -> None:
        """Fetch origin and hard-reset the current branch to its remote state.

        Raises:
            RuntimeError: If any git command fails
        """
        ...
