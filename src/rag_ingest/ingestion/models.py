"""Per-document ingestion outcomes and batch reports."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from rag_ingest.extraction.models import ExtractedDocument


class IngestionSuccess(BaseModel):
    """Text extracted and every chunk embedded.

    ``chunks`` and ``vectors`` are empty when the document had nothing to
    embed (unknown extension, legacy ``.doc``, blank file).
    """

    status: Literal["success"] = "success"
    source: str
    document: ExtractedDocument
    chunks: list[str] = Field(default_factory=list)
    vectors: list[list[float]] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return self.document.text


class IngestionPartialFailure(BaseModel):
    """Text extracted but embedding (or hand-off to the store) failed.

    The text is kept so embedding can be retried without re-parsing.
    """

    status: Literal["partial_failure"] = "partial_failure"
    source: str
    document: ExtractedDocument
    chunks: list[str] = Field(default_factory=list)
    error: str
    error_type: str

    @property
    def text(self) -> str:
        return self.document.text


class IngestionFailure(BaseModel):
    """Nothing recovered: extraction itself failed."""

    status: Literal["failure"] = "failure"
    source: str
    error: str
    error_type: str


IngestionOutcome = Annotated[
    Union[IngestionSuccess, IngestionPartialFailure, IngestionFailure],
    Field(discriminator="status"),
]


class IngestionReport(BaseModel):
    """Per-file outcomes of a batch run, in input order."""

    outcomes: list[IngestionOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[IngestionSuccess]:
        return [o for o in self.outcomes if isinstance(o, IngestionSuccess)]

    @property
    def partially_failed(self) -> list[IngestionPartialFailure]:
        return [o for o in self.outcomes if isinstance(o, IngestionPartialFailure)]

    @property
    def failed(self) -> list[IngestionFailure]:
        return [o for o in self.outcomes if isinstance(o, IngestionFailure)]

    def summary(self) -> str:
        return (
            f"Ingested {len(self.outcomes)} documents: {len(self.succeeded)} succeeded, "
            f"{len(self.partially_failed)} partially failed, {len(self.failed)} failed"
        )


def error_fields(exc: BaseException) -> dict[str, str]:
    return {"error": str(exc), "error_type": type(exc).__name__}
