from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


@dataclass(frozen=True)
class SuccessResult(Generic[T]):
    data: T
    success: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class ErrorResult:
    error_message: str
    message_type: str
    success: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error_message": self.error_message, "message_type": self.message_type}


@dataclass(frozen=True)
class SessionExpired(ErrorResult):
    """401 outcome. The side effects the pipeline must apply travel with it."""
    clear_token: bool = True
    navigate_to: str = "/"


class ParamsModel(BaseModel):
    """Request payloads; unset optional fields are left out of the JSON body."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class LoginParams(ParamsModel):
    email: str
    password: str


class SignupParams(ParamsModel):
    name: str
    email: str
    password: str


class CreateUserParams(ParamsModel):
    name: str
    email: str
    role: Optional[str] = None


class UpdateUserParams(ParamsModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class GetConversationListParams(ParamsModel):
    page: Optional[int] = Field(None, ge=1)
    limit: Optional[int] = Field(None, ge=1)
    archived: Optional[bool] = None


class UpdateConversationParams(ParamsModel):
    id: str
    name: str


class SetPasswordParams(ParamsModel):
    password: str
    short_lived_token: str = Field(alias="shortLivedToken")


class ChatsParams(ParamsModel):
    question: str
    conv_id: Optional[str] = None


@dataclass
class UploadFile:
    filename: str
    content: bytes
    content_type: str = "application/pdf"


@dataclass
class UploadForm:
    """Multipart body: files under ``files`` plus optional plain form fields."""
    files: List[UploadFile]
    fields: Dict[str, str] = field(default_factory=dict)
    field_name: str = "files"

    def httpx_files(self) -> List[Any]:
        return [(self.field_name, (f.filename, f.content, f.content_type)) for f in self.files]
