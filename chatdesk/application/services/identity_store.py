"""Identity store: users and companies (tenants)."""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from threading import RLock
from typing import Callable, Iterable, List, Optional, Tuple

from chatdesk.domain.entities.identity import Company, MetaConfig, User, UserRole
from chatdesk.domain.exceptions import CompanyCapacityExceeded, CompanyNotFound, UserNotFound
from chatdesk.utils.id_generator import generate_id

UsersListener = Callable[[List[User]], None]
CompaniesListener = Callable[[List[Company]], None]

DEFAULT_MAX_USERS = 15


class IdentityStore:
    """
    Holds users and companies.

    The conversation engine only reads from it (operator lookups); tenant
    management mutates it and every mutation publishes the touched collection.
    """

    def __init__(
        self,
        users: Iterable[User] = (),
        companies: Iterable[Company] = (),
        on_users_change: Optional[UsersListener] = None,
        on_companies_change: Optional[CompaniesListener] = None,
        max_users: int = DEFAULT_MAX_USERS,
        default_password: str = "123",
        id_factory: Callable[[], str] = generate_id,
    ):
        self._lock = RLock()
        self._users: Tuple[User, ...] = tuple(users)
        self._companies: Tuple[Company, ...] = tuple(companies)
        self._on_users_change = on_users_change
        self._on_companies_change = on_companies_change
        self._max_users = max_users
        self._default_password = default_password
        self._new_id = id_factory
        self._logger = logging.getLogger(__name__)

    @property
    def users(self) -> List[User]:
        return list(self._users)

    @property
    def companies(self) -> List[Company]:
        return list(self._companies)

    def find_user(self, user_id: str) -> Optional[User]:
        return next((user for user in self._users if user.id == user_id), None)

    def get_user(self, user_id: str) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def get_company(self, company_id: str) -> Company:
        company = next((c for c in self._companies if c.id == company_id), None)
        if company is None:
            raise CompanyNotFound(company_id)
        return company

    def list_users(self, company_id: Optional[str] = None) -> List[User]:
        if company_id is None:
            return self.users
        return [user for user in self._users if user.company_id == company_id]

    def register_tenant(
        self,
        company_name: str,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        birth_date: Optional[str] = None,
        age: Optional[int] = None,
        profession: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Tuple[Company, User]:
        """
        Create a company together with its first administrator.

        Returns:
            Tuple of (company, admin user)
        """
        with self._lock:
            company = self._new_company(company_name)
            admin = User(
                id=self._new_id(),
                name=name,
                email=email,
                password=password,
                role=UserRole.COMPANY_ADMIN,
                company_id=company.id,
                avatar_url=avatar_url or "",
                phone=phone,
                birth_date=birth_date,
                age=age,
                profession=profession,
            )
            self._commit_companies(self._companies + (company,))
            self._commit_users(self._users + (admin,))

        self._logger.info(f"Registered tenant {company.id} ({company_name}) with admin {admin.id}")
        return company, admin

    def add_company(self, name: str) -> Company:
        with self._lock:
            company = self._new_company(name)
            self._commit_companies(self._companies + (company,))

        self._logger.info(f"Created company {company.id} ({name})")
        return company

    def delete_company(self, company_id: str) -> None:
        """Remove a company and every user that belongs to it."""
        with self._lock:
            self.get_company(company_id)
            self._commit_companies(tuple(c for c in self._companies if c.id != company_id))
            self._commit_users(tuple(u for u in self._users if u.company_id != company_id))

        self._logger.info(f"Deleted company {company_id} and its users")

    def add_agent(
        self,
        company_id: str,
        name: str,
        email: str,
        phone: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        """
        Add an agent to a company.

        Raises:
            CompanyNotFound: If the company does not exist
            CompanyCapacityExceeded: If the company is at its user limit
        """
        with self._lock:
            company = self.get_company(company_id)
            if len(self.list_users(company_id)) >= company.max_users:
                raise CompanyCapacityExceeded(company_id, company.max_users)

            agent = User(
                id=self._new_id(),
                name=name,
                email=email,
                phone=phone,
                password=self._default_password,
                role=UserRole.AGENT,
                company_id=company_id,
                avatar_url=avatar_url or "",
            )
            self._commit_users(self._users + (agent,))

        self._logger.info(f"Added agent {agent.id} to company {company_id}")
        return agent

    def remove_user(self, user_id: str) -> None:
        with self._lock:
            self.get_user(user_id)
            self._commit_users(tuple(u for u in self._users if u.id != user_id))

        self._logger.info(f"Removed user {user_id}")

    def change_password(self, user_id: str, new_password: str) -> User:
        if not new_password:
            raise ValueError("Password cannot be empty")
        return self._update_user(user_id, password=new_password)

    def update_avatar(self, user_id: str, avatar_url: str) -> User:
        return self._update_user(user_id, avatar_url=avatar_url)

    def update_meta_config(self, company_id: str, meta_config: MetaConfig) -> Company:
        with self._lock:
            company = replace(self.get_company(company_id), meta_config=meta_config)
            self._commit_companies(
                tuple(company if c.id == company_id else c for c in self._companies)
            )

        self._logger.info(f"Updated integration settings for company {company_id}")
        return company

    def _update_user(self, user_id: str, **changes) -> User:
        with self._lock:
            user = replace(self.get_user(user_id), **changes)
            self._commit_users(tuple(user if u.id == user_id else u for u in self._users))

        self._logger.info(f"Updated {', '.join(changes)} for user {user_id}")
        return user

    def _new_company(self, name: str) -> Company:
        if not name or not name.strip():
            raise ValueError("Company name cannot be empty")
        return Company(
            id=self._new_id(),
            name=name.strip(),
            max_users=self._max_users,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

    def _commit_users(self, users: Tuple[User, ...]) -> None:
        self._users = users
        if self._on_users_change is not None:
            self._on_users_change(list(users))

    def _commit_companies(self, companies: Tuple[Company, ...]) -> None:
        self._companies = companies
        if self._on_companies_change is not None:
            self._on_companies_change(list(companies))
