from .artifact import ArtifactRef, Conflict, ALLOWED_ARTIFACT_TYPES, render_class_name
from .errors import ClassDupError, ArchiveIoError, EntryNotFound, IndexBuildError, MissingEntryError
from .result import RunResult, Ok, DuplicateClassesFailure, FatalFailure
from .commands.check import CheckArgs
from .rule import DuplicateClassRule, run
from .utils.processor import Processor
