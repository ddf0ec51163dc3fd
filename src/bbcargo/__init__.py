"""Public package entrypoint for the Cargo to BitBake recipe generator."""

__version__ = "0.1.0"

from .accumulate import accumulate
from .classify import classify
from .errors import (
    AmbiguousRepoLocationError,
    BbcargoError,
    BbcargoWarning,
    LockfileError,
    ManifestError,
    MissingLicenseWarning,
    MissingMetadataError,
    MissingMetadataWarning,
    MutableRefWarning,
    OutputError,
    PolicyError,
    RepositoryInfoWarning,
    ResolutionError,
    UnresolvablePinError,
)
from .license import build_license_descriptor, select_license
from .models import (
    AUTOREV,
    BranchRef,
    DefaultBranchRef,
    GitOrigin,
    PathOrigin,
    ProjectMetadata,
    RecipeDescriptor,
    RegistryOrigin,
    RemoteOrigin,
    RepoFacts,
    ResolvedDependency,
    RevRef,
    TagRef,
)
from .policy import Policy
from .recipe import GenerateResult, generate_recipe
from .revision import resolve_revision
from .synthesize import synthesize
from .version_pin import compute_version_pin

__all__ = [
    "AUTOREV",
    "AmbiguousRepoLocationError",
    "BbcargoError",
    "BbcargoWarning",
    "BranchRef",
    "DefaultBranchRef",
    "GenerateResult",
    "GitOrigin",
    "LockfileError",
    "ManifestError",
    "MissingLicenseWarning",
    "MissingMetadataError",
    "MissingMetadataWarning",
    "MutableRefWarning",
    "OutputError",
    "PathOrigin",
    "Policy",
    "PolicyError",
    "ProjectMetadata",
    "RecipeDescriptor",
    "RegistryOrigin",
    "RemoteOrigin",
    "RepoFacts",
    "RepositoryInfoWarning",
    "ResolutionError",
    "ResolvedDependency",
    "RevRef",
    "TagRef",
    "UnresolvablePinError",
    "accumulate",
    "build_license_descriptor",
    "classify",
    "compute_version_pin",
    "generate_recipe",
    "resolve_revision",
    "select_license",
    "synthesize",
]
