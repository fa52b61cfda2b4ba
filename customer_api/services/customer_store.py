"""Customer persistence abstraction with in-memory and SQL backends.

Both backends satisfy the same contract:
- lookups of a missing id return None rather than raising
- inserts do not re-check email uniqueness (the service does that)
- updates replace the whole record; patch logic stays in the service

The backend is picked once at composition time from ``settings.customer_store``.
"""
from abc import ABC, abstractmethod
from itertools import count
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from customer_api.lib.exceptions import ConflictException
from customer_api.lib.logging import get_logger
from customer_api.lib.passwords import PasswordHasher, password_hasher
from customer_api.lib.settings import Settings
from customer_api.models.customers import Customer, Gender, DEFAULT_ROLES

logger = get_logger(__name__)


class CustomerStore(ABC):
    """Abstract base class for customer persistence."""

    @abstractmethod
    def select_all_customers(self) -> List[Customer]:
        """Return stored customers, bounded by the configured page size."""

    @abstractmethod
    def select_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        """Return the customer or None when no such id exists."""

    @abstractmethod
    def insert_customer(self, customer: Customer) -> None:
        """Persist a new customer and assign its id."""

    @abstractmethod
    def exists_customer_with_email(self, email: str) -> bool:
        pass

    @abstractmethod
    def exists_customer_by_id(self, customer_id: int) -> bool:
        pass

    @abstractmethod
    def delete_customer_by_id(self, customer_id: int) -> None:
        pass

    @abstractmethod
    def update_customer(self, customer: Customer) -> None:
        """Replace the stored record carrying the same id."""

    @abstractmethod
    def select_customer_by_email(self, email: str) -> Optional[Customer]:
        pass

    @abstractmethod
    def update_customer_profile_image_id(self, profile_image_id: str, customer_id: int) -> None:
        pass


class InMemoryCustomerStore(CustomerStore):
    """Transient list-backed store for development.

    Starts with two seed customers and forgets everything on restart.
    Not synchronized: unsafe with concurrent writers, and it does not
    enforce email uniqueness on its own.
    """

    def __init__(
        self,
        page_size: int = 1000,
        hasher: PasswordHasher = password_hasher,
        seed: bool = True,
    ):
        self.page_size = page_size
        self._customers: List[Customer] = []
        self._ids = count(1)
        if seed:
            self._seed(hasher)

    def _seed(self, hasher: PasswordHasher) -> None:
        for name, email, age, gender in (
            ("Alex", "alex@gmail.com", 21, Gender.MALE),
            ("Jamila", "jamila@gmail.com", 19, Gender.FEMALE),
        ):
            self.insert_customer(Customer(
                name=name,
                email=email,
                password=hasher.hash("password"),
                age=age,
                gender=gender,
                roles=list(DEFAULT_ROLES),
            ))

    def _find(self, customer_id: int) -> Optional[Customer]:
        return next((c for c in self._customers if c.id == customer_id), None)

    def select_all_customers(self) -> List[Customer]:
        return [c.copy() for c in self._customers[:self.page_size]]

    def select_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        customer = self._find(customer_id)
        return customer.copy() if customer else None

    def insert_customer(self, customer: Customer) -> None:
        customer.id = next(self._ids)
        self._customers.append(customer.copy())

    def exists_customer_with_email(self, email: str) -> bool:
        return any(c.email == email for c in self._customers)

    def exists_customer_by_id(self, customer_id: int) -> bool:
        return self._find(customer_id) is not None

    def delete_customer_by_id(self, customer_id: int) -> None:
        self._customers = [c for c in self._customers if c.id != customer_id]

    def update_customer(self, customer: Customer) -> None:
        for index, stored in enumerate(self._customers):
            if stored.id == customer.id:
                self._customers[index] = customer.copy()
                return

    def select_customer_by_email(self, email: str) -> Optional[Customer]:
        customer = next((c for c in self._customers if c.email == email), None)
        return customer.copy() if customer else None

    def update_customer_profile_image_id(self, profile_image_id: str, customer_id: int) -> None:
        customer = self._find(customer_id)
        if customer:
            customer.profile_image_id = profile_image_id


class SQLCustomerStore(CustomerStore):
    """Relational store over a SQLAlchemy session.

    Every write commits. The unique index on ``customers.email`` is the
    only guard against two concurrent registrations racing past the
    service's check; its violation surfaces as a conflict.
    """

    def __init__(self, session: Session, page_size: int = 1000):
        self.session = session
        self.page_size = page_size

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Integrity error on customer write: {e.orig}")
            raise ConflictException("email already taken") from e

    def select_all_customers(self) -> List[Customer]:
        stmt = select(Customer).order_by(Customer.id).limit(self.page_size)
        return list(self.session.execute(stmt).scalars().all())

    def select_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return self.session.get(Customer, customer_id)

    def insert_customer(self, customer: Customer) -> None:
        self.session.add(customer)
        self._commit()

    def exists_customer_with_email(self, email: str) -> bool:
        stmt = select(Customer.id).where(Customer.email == email).limit(1)
        return self.session.execute(stmt).first() is not None

    def exists_customer_by_id(self, customer_id: int) -> bool:
        stmt = select(Customer.id).where(Customer.id == customer_id).limit(1)
        return self.session.execute(stmt).first() is not None

    def delete_customer_by_id(self, customer_id: int) -> None:
        self.session.execute(delete(Customer).where(Customer.id == customer_id))
        self._commit()

    def update_customer(self, customer: Customer) -> None:
        self.session.merge(customer)
        self._commit()

    def select_customer_by_email(self, email: str) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.email == email)
        return self.session.execute(stmt).scalar_one_or_none()

    def update_customer_profile_image_id(self, profile_image_id: str, customer_id: int) -> None:
        self.session.execute(
            update(Customer)
            .where(Customer.id == customer_id)
            .values(profile_image_id=profile_image_id)
        )
        self._commit()


def build_customer_store(
    settings: Settings,
    session: Optional[Session] = None,
    memory_store: Optional[InMemoryCustomerStore] = None,
) -> CustomerStore:
    """Pick the configured backend.

    The in-memory store must be created once per process by the caller and
    passed in, so its state survives across requests.
    """
    backend = settings.customer_store.strip().lower()
    if backend == "memory":
        if memory_store is None:
            raise ValueError("memory customer store requested but none was created")
        return memory_store
    if backend == "sql":
        if session is None:
            raise ValueError("sql customer store requires a database session")
        return SQLCustomerStore(session, page_size=settings.customer_page_size)
    raise ValueError(
        f"Unknown customer store: {settings.customer_store}. "
        f"Valid options: sql, memory"
    )
