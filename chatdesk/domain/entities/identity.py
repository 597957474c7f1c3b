"""Identity entities: users, companies and integration credentials."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class UserRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    COMPANY_ADMIN = "COMPANY_ADMIN"
    AGENT = "AGENT"


@dataclass(frozen=True)
class MetaConfig:
    """Integration credentials for a company's messaging account (opaque strings)."""

    phone_number_id: str = ""
    waba_id: str = ""
    access_token: str = ""
    webhook_verify_token: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phoneNumberId": self.phone_number_id,
            "wabaId": self.waba_id,
            "accessToken": self.access_token,
            "webhookVerifyToken": self.webhook_verify_token,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetaConfig":
        return cls(
            phone_number_id=data.get("phoneNumberId", ""),
            waba_id=data.get("wabaId", ""),
            access_token=data.get("accessToken", ""),
            webhook_verify_token=data.get("webhookVerifyToken", ""),
        )


@dataclass(frozen=True)
class User:
    """
    Console user (super admin, company admin or agent).

    Immutable once created; password and avatar are replaced through the
    identity store, which swaps in a new instance.
    """

    id: str
    name: str
    email: str
    role: UserRole
    password: Optional[str] = None
    company_id: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    age: Optional[int] = None
    profession: Optional[str] = None

    def __post_init__(self):
        """Validate tenant membership."""
        if self.role != UserRole.SUPER_ADMIN and not self.company_id:
            raise ValueError(f"{self.role.value} users must belong to a company")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }
        optional = {
            "password": self.password,
            "companyId": self.company_id,
            "avatarUrl": self.avatar_url,
            "phone": self.phone,
            "birthDate": self.birth_date,
            "age": self.age,
            "profession": self.profession,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data

    def to_public_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        data.pop("password", None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            role=UserRole(data["role"]),
            password=data.get("password"),
            company_id=data.get("companyId"),
            avatar_url=data.get("avatarUrl"),
            phone=data.get("phone"),
            birth_date=data.get("birthDate"),
            age=data.get("age"),
            profession=data.get("profession"),
        )


@dataclass(frozen=True)
class Company:
    """Tenant owning a team of operators."""

    id: str
    name: str
    max_users: int
    created_at: str
    meta_config: Optional[MetaConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "maxUsers": self.max_users,
            "createdAt": self.created_at,
        }
        if self.meta_config is not None:
            data["metaConfig"] = self.meta_config.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Company":
        meta = data.get("metaConfig")
        return cls(
            id=data["id"],
            name=data["name"],
            max_users=data["maxUsers"],
            created_at=data["createdAt"],
            meta_config=MetaConfig.from_dict(meta) if meta is not None else None,
        )
