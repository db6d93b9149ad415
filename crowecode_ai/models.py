"""
Pydantic models for the CroweCode Intelligence API.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """A single message in a conversation, forwarded to the vendor as given."""
    model_config = ConfigDict(extra="allow")

    role: str  # "system", "user", or "assistant" - not validated
    content: Any  # plain text or a list of content parts


class ChatRequest(BaseModel):
    """Request body for POST /api/ai."""
    model_config = ConfigDict(populate_by_name=True)

    messages: list[Message] = Field(default_factory=list)
    temperature: Optional[float] = None
    action: Optional[str] = None  # "analyze" switches to analysis mode
    code: Optional[str] = None
    language: Optional[str] = None
    file_path: Optional[str] = Field(default=None, alias="filePath")

    @property
    def is_analysis(self) -> bool:
        return self.action == "analyze" and bool(self.code)


class ChatMetadata(BaseModel):
    model: str
    provider: str
    capabilities: str


class ChatResponse(BaseModel):
    """Chat-mode response body."""
    content: str
    role: str = "assistant"
    metadata: ChatMetadata


class Fix(BaseModel):
    title: str = ""
    description: str = ""
    code: str = ""
    explanation: str = ""
    confidence: Optional[float] = None


class AnalysisResponse(BaseModel):
    """Analysis-mode response body (the raw-text fallback shape)."""
    completion: str = ""
    refactoring: str = ""
    fixes: list[Fix] = Field(default_factory=list)
    optimization: str = ""
    documentation: str = ""


class ErrorResponse(BaseModel):
    error: str


class ServiceInfo(BaseModel):
    """Response body for GET /api/ai."""
    service: str
    status: str  # "operational" or "not_configured"
    version: str
    features: list[str]


class Capabilities(BaseModel):
    """Response body for GET /api/ai/capabilities."""
    name: str
    version: str
    features: list[str]
    powered_by: str


class SwitchRequest(BaseModel):
    key: str


class SwitchResponse(BaseModel):
    switched: bool
    active: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
