"""Turn a loose Java source into a project the build environment can compile."""

from .descriptor import DescriptorFactory, ProjectDescriptor, render_descriptor
from .errors import DescriptorWriteError, SynthesisError, UnitLocationError, UnsupportedSourceError
from .project import ProjectSynthesizer, SynthesisStateMachine
from .registry import ArtifactIdRegistry, artifact_prefix
from .session import SynthesisSession
from .unit_name import SourceUnit, extract_unit_from_file, extract_unit_name

__all__ = [
    "ArtifactIdRegistry",
    "DescriptorFactory",
    "DescriptorWriteError",
    "ProjectDescriptor",
    "ProjectSynthesizer",
    "SourceUnit",
    "SynthesisError",
    "SynthesisSession",
    "SynthesisStateMachine",
    "UnitLocationError",
    "UnsupportedSourceError",
    "artifact_prefix",
    "extract_unit_from_file",
    "extract_unit_name",
    "render_descriptor",
]
