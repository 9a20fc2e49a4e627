from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from racktrack.runner.models import ProcessResult
from racktrack.sessions.models import Identity
from racktrack.storage.models import Report
from racktrack.uploads.models import IncomingFile, PlacedUpload, Upload, UploadRule


class PipelineStage(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    PLACED = "placed"
    PROCESSED = "processed"
    ASSOCIATED = "associated"
    ASSOCIATION_SKIPPED = "association_skipped"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class PipelineContext:
    upload_type: str | None
    files: list[IncomingFile]
    identity: Identity | None = None
    stage: PipelineStage = PipelineStage.RECEIVED
    rule: UploadRule | None = None
    placed: list[PlacedUpload] = field(default_factory=list)
    targets: list[Path] = field(default_factory=list)
    process_results: list[ProcessResult] = field(default_factory=list)
    reports: list[Report] = field(default_factory=list)
    error_message: str = ""

    @property
    def uploads(self) -> list[Upload]:
        return [p.upload for p in self.placed]


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
