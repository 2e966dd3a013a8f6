"""
Input context models.

Read-only request view consumed by the binding engine, and the snapshot
model that implements it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field
from starlette.datastructures import UploadFile


def is_file_type(declared_type: Any) -> bool:
    """Whether a declared field type is an uploaded-file handle."""
    return isinstance(declared_type, type) and issubclass(declared_type, UploadFile)


class RequestContext(ABC):
    """
    Read-only accessors over the eight request namespaces.

    Namespaces are independent: the same key in two namespaces refers to
    unrelated values.
    """

    @abstractmethod
    def get_header(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def get_param(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def get_path_variables(self) -> Optional[Mapping[str, str]]:
        pass

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[Any]:
        pass

    @abstractmethod
    def get_cookies(self) -> Sequence[Tuple[str, str]]:
        pass

    @abstractmethod
    def has_session(self) -> bool:
        pass

    @abstractmethod
    def get_session_attribute(self, name: str) -> Optional[Any]:
        pass

    @abstractmethod
    def is_multipart(self) -> bool:
        pass

    @abstractmethod
    def get_multipart_param(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def get_multipart_file(self, name: str) -> Optional[UploadFile]:
        pass

    @abstractmethod
    def read_body_as_text(self) -> str:
        """
        Return the request body decoded as UTF-8.

        Callers must treat the body as consumable once.
        """
        pass


class InputContext(BaseModel, RequestContext):
    """
    Snapshot of an incoming request.

    This model decouples the binding engine from Starlette's Request object.
    Header names are stored lower-cased.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    method: str = "GET"
    path: str = "/"
    headers: Dict[str, str] = Field(default_factory=dict)
    multi_query_params: Dict[str, List[str]] = Field(default_factory=dict)
    path_params: Optional[Dict[str, str]] = None
    cookies: List[Tuple[str, str]] = Field(default_factory=list)
    attributes: Dict[str, Any] = Field(default_factory=dict)
    session: Optional[Dict[str, Any]] = None
    body: bytes = b""
    multipart: bool = False
    form_params: Dict[str, List[str]] = Field(default_factory=dict)
    files: Dict[str, Any] = Field(default_factory=dict)

    def model_post_init(self, context: Any) -> None:
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def get_param(self, name: str) -> Optional[str]:
        values = self.multi_query_params.get(name) or self.form_params.get(name)
        return values[0] if values else None

    def get_path_variables(self) -> Optional[Mapping[str, str]]:
        return self.path_params

    def get_attribute(self, name: str) -> Optional[Any]:
        return self.attributes.get(name)

    def get_cookies(self) -> Sequence[Tuple[str, str]]:
        return self.cookies

    def has_session(self) -> bool:
        return self.session is not None

    def get_session_attribute(self, name: str) -> Optional[Any]:
        if self.session is None:
            return None
        return self.session.get(name)

    def is_multipart(self) -> bool:
        return self.multipart

    def get_multipart_param(self, name: str) -> Optional[str]:
        if not self.multipart:
            return None
        values = self.form_params.get(name)
        return values[0] if values else None

    def get_multipart_file(self, name: str) -> Optional[UploadFile]:
        if not self.multipart:
            return None
        return self.files.get(name)

    def read_body_as_text(self) -> str:
        return self.body.decode("utf-8")
