"""Request and response models for the grep tool."""

from typing import Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """A single pattern search, optionally scoped and filtered."""

    pattern: str = Field(
        ..., min_length=1, description="case-insensitive regular expression to search for"
    )
    scope_path: Optional[str] = Field(
        None, description="file or directory to search; all workspace roots when omitted"
    )
    include_glob: Optional[str] = Field(
        None, description="glob restricting which files are searched in a directory"
    )


class ToolError(BaseModel):
    """Error details attached to a failed tool result."""

    message: str = Field(..., description="human readable error message")
    kind: str = Field(..., description="machine readable error kind")


class ToolResult(BaseModel):
    """Outcome of a grep tool invocation."""

    report: str = Field(..., description="full report handed to the caller")
    status: str = Field(..., description="short status summary")
    error: Optional[ToolError] = Field(None, description="set when the search failed")
    cancelled: bool = Field(False, description="the search was aborted before finishing")
