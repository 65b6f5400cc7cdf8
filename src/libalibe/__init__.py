"""libalibe - local npm library workflow.

Keeps a set of locally developed npm libraries in sync:
- Dependency ordering with cycle detection
- Version actuality checks between libraries and their consumers
- Link, install, build and lint across libraries in dependency order
- Commit, bump, push and publish chains
"""

from libalibe.config import LibalibeConfig, load_config
from libalibe.errors import (
    BranchError,
    ConfigurationError,
    DuplicateSymbolicNameError,
    ExecutionError,
    GitError,
    LibalibeError,
    ManifestUnreadableError,
    NoPackagesFoundError,
    PackageNotFoundError,
    PublishError,
    RangeNotFoundError,
    WorkingTreeError,
)
from libalibe.execution import (
    BatchResult,
    ExecutionResult,
    ExecutionStatus,
    ParallelExecutor,
)
from libalibe.workspace import (
    DependencyGraph,
    ManifestSnapshot,
    OrderedGraph,
    PackageNode,
    Workspace,
    build_ordered_graph,
    check_actuality,
    is_actual,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Workspace",
    "PackageNode",
    "ManifestSnapshot",
    "DependencyGraph",
    "OrderedGraph",
    "build_ordered_graph",
    "check_actuality",
    "is_actual",
    "LibalibeConfig",
    "load_config",
    # Execution
    "ExecutionResult",
    "ExecutionStatus",
    "BatchResult",
    "ParallelExecutor",
    # Errors
    "LibalibeError",
    "ConfigurationError",
    "PackageNotFoundError",
    "NoPackagesFoundError",
    "ManifestUnreadableError",
    "DuplicateSymbolicNameError",
    "RangeNotFoundError",
    "ExecutionError",
    "GitError",
    "BranchError",
    "WorkingTreeError",
    "PublishError",
]
