"""
Task and result models for batch document conversion.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class DocumentTask(BaseModel):
    """
    One document to convert.

    Folder listings carry extra fields (parent_token, created_time, ...);
    they are kept and handed to the completion callback as metadata.
    """
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Document id used to fetch blocks")
    url: str = Field("", description="Source URL shown to the task predicate")
    name: str = Field("", description="Document title")
    type: str = Field("docx", description="Drive file type")
    token: str = Field("", description="Drive file token")

    @property
    def metadata(self) -> Dict[str, Any]:
        """Task fields other than id and url"""
        return self.model_dump(exclude={"id", "url"})


class DocumentMetadata(BaseModel):
    """Document info returned by the docx metadata endpoint"""
    id: str
    token: str
    name: str = ""
    url: str = ""
    revision_id: Optional[int] = None

    def to_task(self, url: Optional[str] = None) -> DocumentTask:
        return DocumentTask(
            id=self.id,
            url=url or self.url,
            name=self.name,
            type="docx",
            token=self.token,
            revision_id=self.revision_id,
        )


class BatchResult(BaseModel):
    """Final counters of a batch run"""
    total: int = 0
    done: int = 0
    errors: int = 0
    skipped: int = 0

    @property
    def succeeded(self) -> bool:
        return self.errors == 0
