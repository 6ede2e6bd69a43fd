from .assertions import Assertion
from .capture import NoCapture, OutputCapture, capture_output
from .context import StepContext, StepFailed, StepSkipped
from .hooks import Hook, Hooks
from .matcher import BoundCall, MatchKind, MatchOutcome, StepMatcher
from .outcome import DocumentOutcome, RunReport, ScenarioOutcome, StepOutcome
from .runner import Runner
from .step_registry import StepImplementation, StepRegistrationError, StepRegistry
from .transforms import TransformEntry, TransformRegistrationError, TransformRegistry
from .type_tags import TypeTag, UnsupportedAnnotationError, type_tag

# Kernel exports are minimal and runtime-focused.
__all__ = [
    "Assertion",
    "BoundCall",
    "DocumentOutcome",
    "Hook",
    "Hooks",
    "MatchKind",
    "MatchOutcome",
    "NoCapture",
    "OutputCapture",
    "RunReport",
    "Runner",
    "ScenarioOutcome",
    "StepContext",
    "StepFailed",
    "StepImplementation",
    "StepMatcher",
    "StepOutcome",
    "StepRegistrationError",
    "StepRegistry",
    "StepSkipped",
    "TransformEntry",
    "TransformRegistrationError",
    "TransformRegistry",
    "TypeTag",
    "UnsupportedAnnotationError",
    "capture_output",
    "type_tag",
]
