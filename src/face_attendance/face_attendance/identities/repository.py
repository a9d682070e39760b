from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Identity


class IdentityRepository(Protocol):
    """Giao diện repository cho Identity.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp kho lưu trữ cụ thể.
    """

    def list_identities(self) -> Sequence[Identity]:
        raise NotImplementedError

    def find_identity(self, identity_id: str) -> Optional[Identity]:
        raise NotImplementedError

    def get_identity(self, identity_id: str) -> Identity:
        raise NotImplementedError

    def upsert_identity(self, identity: Identity) -> Identity:
        raise NotImplementedError

    def delete_identity(self, identity_id: str) -> Identity:
        raise NotImplementedError
