from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .config import Settings
from .credentials import USER_ID_KEY, CredentialStore, FileCredentialStore
from .models import (
    ChatsParams,
    CreateUserParams,
    GetConversationListParams,
    LoginParams,
    SetPasswordParams,
    SignupParams,
    SuccessResult,
    UpdateConversationParams,
    UpdateUserParams,
    UploadFile,
    UploadForm,
)
from .navigation import NavigationSignal
from .pipeline import MULTIPART_CONTENT_TYPE, ApiService


class ChatBotClient:
    def __init__(self, service: ApiService):
        self.service = service

    @staticmethod
    def from_env(settings: Optional[Settings] = None, *, navigation: Optional[NavigationSignal] = None) -> "ChatBotClient":
        settings = settings or Settings()
        store = FileCredentialStore(settings.config_dir)
        return ChatBotClient(ApiService(settings.api_url, store=store, navigation=navigation, timeout=settings.timeout_seconds))

    @property
    def store(self) -> CredentialStore:
        return self.service.store

    def _user_id(self) -> Optional[str]:
        # a missing id is sent as-is; the server answers with an error result
        return self.store.get(USER_ID_KEY)

    async def login(self, params: LoginParams) -> SuccessResult:
        return await self.service.request("POST", "api/public/login", params.payload())

    async def signup(self, params: SignupParams) -> SuccessResult:
        return await self.service.request("POST", "api/public/signup", params.payload(), False)

    async def set_user_password(self, params: SetPasswordParams) -> SuccessResult:
        """Set the password with the short-lived token from the invite link."""
        return await self.service.request(
            "POST",
            "api/public/set-password",
            {"password": params.password},
            token=params.short_lived_token,
        )

    async def chats(self, params: ChatsParams) -> SuccessResult:
        return await self.service.request("POST", f"api/public/users/{self._user_id()}/pdf-chats", params.payload())

    async def get_user_details_by_id(self, user_id: str) -> SuccessResult:
        return await self.service.request("GET", f"api/public/user/{user_id}")

    async def get_users(self) -> SuccessResult:
        return await self.service.request("GET", "api/public/users")

    async def create_users(self, params: CreateUserParams) -> SuccessResult:
        return await self.service.request("POST", "api/public/users", params.payload())

    async def update_user(self, params: UpdateUserParams) -> SuccessResult:
        return await self.service.request("PATCH", f"api/users/{self._user_id()}", params.payload())

    async def create_new_conversation(self) -> SuccessResult:
        return await self.service.request("POST", "api/public/conversations", {})

    async def get_conversations(self, params: Optional[GetConversationListParams] = None) -> SuccessResult:
        query = params.payload() if params else None
        return await self.service.request("GET", f"api/public/users/{self._user_id()}/conversations", params=query)

    async def get_chats_by_conversation_id(self, conversation_id: str) -> SuccessResult:
        return await self.service.request("GET", f"api/public/conversations/{conversation_id}/chats")

    async def update_conversation(self, params: UpdateConversationParams) -> SuccessResult:
        path = f"api/public/users/{self._user_id()}/conversations/{params.id}"
        return await self.service.request("PATCH", path, {"name": params.name})

    async def archive_conversation(self, conversation_id: str) -> SuccessResult:
        path = f"api/public/users/{self._user_id()}/conversations/{conversation_id}/archive"
        return await self.service.request("PATCH", path, {})

    async def get_file_id(self) -> SuccessResult:
        return await self.service.request("GET", f"api/public/users/{self._user_id()}/get-file-id")

    async def pdf_upload(self, files: Sequence[UploadFile], **fields: str) -> SuccessResult:
        form = UploadForm(files=list(files), fields=dict(fields))
        path = f"api/public/users/{self._user_id()}/pdf-upload"
        return await self.service.request("POST", path, form, True, MULTIPART_CONTENT_TYPE)

    async def pdf_upload_update_file(self, files: Sequence[UploadFile], **fields: str) -> SuccessResult:
        form = UploadForm(files=list(files), fields=dict(fields))
        path = f"api/public/users/{self._user_id()}/pdf-upload"
        return await self.service.request("PATCH", path, form, True, MULTIPART_CONTENT_TYPE)

    async def pdf_list(self) -> SuccessResult:
        return await self.service.request("GET", f"api/public/users/{self._user_id()}/get-pdfs")

    async def pdf_delete(self, pdf_ids: List[str]) -> SuccessResult:
        data: Any = {"pdf_ids": list(pdf_ids)}
        return await self.service.request("DELETE", f"api/public/users/{self._user_id()}/delete-pdfs", data)

    async def aclose(self) -> None:
        await self.service.aclose()

    async def __aenter__(self) -> "ChatBotClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
