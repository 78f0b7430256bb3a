from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Session(Protocol):
    """Login state consulted while building requests.

    Storage and refresh of the session are owned by the caller.
    """

    def is_authenticated(self) -> bool: ...

    def csrf_token(self) -> str: ...

    def device_uuid(self) -> str: ...


@dataclass
class StaticSession:
    authenticated: bool = False
    token: str = ""
    uuid: str = ""

    def is_authenticated(self) -> bool:
        return self.authenticated

    def csrf_token(self) -> str:
        return self.token

    def device_uuid(self) -> str:
        return self.uuid
