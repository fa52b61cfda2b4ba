"""Customer service: registration, lookup, update, deletion and profile images.

Validation and delegation only:
1. Check existence / duplicate email against the store
2. Build or patch the entity in memory
3. Issue a single store write
4. Map results to CustomerDTO

Uniqueness checks are check-then-act and not atomic with the write; the
SQL store's unique index turns a lost race into a conflict.
"""
from typing import BinaryIO, List, Optional
from uuid import uuid4

from customer_api.lib.exceptions import (
    ConflictException,
    NotFoundException,
    ProfileImageUploadException,
    ValidationException,
)
from customer_api.lib.logging import get_logger, log_with_context
from customer_api.lib.metrics import MetricsCollector, get_metrics_collector
from customer_api.lib.passwords import PasswordHasher, password_hasher
from customer_api.models.customers import Customer, DEFAULT_ROLES
from customer_api.services.customer_dto import (
    CustomerDTO,
    CustomerRegistrationRequest,
    CustomerUpdateRequest,
    to_customer_dto,
)
from customer_api.services.customer_store import CustomerStore
from customer_api.services.object_store import (
    ObjectNotFoundError,
    ObjectStore,
    ObjectStoreError,
)

logger = get_logger(__name__)

PROFILE_IMAGE_KEY = "profile-images/{customer_id}/{profile_image_id}"


def profile_image_key(customer_id: int, profile_image_id: str) -> str:
    return PROFILE_IMAGE_KEY.format(
        customer_id=customer_id,
        profile_image_id=profile_image_id,
    )


def _customer_not_found(customer_id: int) -> NotFoundException:
    return NotFoundException(
        f"customer with id [{customer_id}] not found",
        details={"resource": "customer", "resource_id": customer_id},
    )


def _profile_image_not_found(customer_id: int) -> NotFoundException:
    return NotFoundException(
        f"customer with id [{customer_id}] profile image not found",
        details={"resource": "profile_image", "resource_id": customer_id},
    )


class CustomerService:
    """Orchestrates customer operations over a store and an object store."""

    def __init__(
        self,
        store: CustomerStore,
        object_store: ObjectStore,
        bucket: str,
        hasher: PasswordHasher = password_hasher,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.store = store
        self.object_store = object_store
        self.bucket = bucket
        self.hasher = hasher
        self.metrics = metrics or get_metrics_collector()

    def get_all_customers(self) -> List[CustomerDTO]:
        return [to_customer_dto(c) for c in self.store.select_all_customers()]

    def get_customer(self, customer_id: int) -> CustomerDTO:
        customer = self.store.select_customer_by_id(customer_id)
        if customer is None:
            raise _customer_not_found(customer_id)
        return to_customer_dto(customer)

    def add_customer(self, request: CustomerRegistrationRequest) -> None:
        """Register a new customer.

        Raises:
            ConflictException: If the email is already registered
        """
        if self.store.exists_customer_with_email(request.email):
            raise ConflictException("email already taken")

        customer = Customer(
            name=request.name,
            email=request.email,
            password=self.hasher.hash(request.password),
            age=request.age,
            gender=request.gender,
            roles=list(DEFAULT_ROLES),
        )
        self.store.insert_customer(customer)

        self.metrics.increment_registrations()
        log_with_context(logger, "info", "Customer registered", customer_id=customer.id)

    def delete_customer_by_id(self, customer_id: int) -> None:
        if not self.store.exists_customer_by_id(customer_id):
            raise _customer_not_found(customer_id)

        self.store.delete_customer_by_id(customer_id)

        self.metrics.increment_deletions()
        log_with_context(logger, "info", "Customer deleted", customer_id=customer_id)

    def update_customer(self, customer_id: int, request: CustomerUpdateRequest) -> None:
        """Apply the fields of ``request`` that differ from the stored record.

        Raises:
            NotFoundException: If the customer does not exist
            ConflictException: If the new email belongs to another customer
            ValidationException: If no field actually changes
        """
        customer = self.store.select_customer_by_id(customer_id)
        if customer is None:
            raise _customer_not_found(customer_id)

        changes = {}

        if request.name is not None and request.name != customer.name:
            changes["name"] = request.name

        if request.email is not None and request.email != customer.email:
            if self.store.exists_customer_with_email(request.email):
                raise ConflictException("email already taken")
            changes["email"] = request.email

        if request.age is not None and request.age != customer.age:
            changes["age"] = request.age

        if not changes:
            raise ValidationException("no data changes found")

        for field, value in changes.items():
            setattr(customer, field, value)
        self.store.update_customer(customer)

        self.metrics.increment_updates()
        log_with_context(
            logger, "info", "Customer updated",
            customer_id=customer_id, fields=sorted(changes),
        )

    def upload_customer_profile_image(self, customer_id: int, file: BinaryIO) -> None:
        """Store an image for the customer and remember its id.

        Nothing is written to the customer record unless the blob was stored.

        Raises:
            NotFoundException: If the customer does not exist
            ProfileImageUploadException: If reading or storing the bytes fails
        """
        if not self.store.exists_customer_by_id(customer_id):
            raise _customer_not_found(customer_id)

        profile_image_id = str(uuid4())
        key = profile_image_key(customer_id, profile_image_id)
        try:
            data = file.read()
            self.object_store.put_object(self.bucket, key, data)
        except (OSError, ObjectStoreError) as e:
            self.metrics.increment_upload_failures()
            logger.error(
                f"Profile image upload failed for customer {customer_id}: {e}",
                exc_info=True,
            )
            raise ProfileImageUploadException() from e

        self.store.update_customer_profile_image_id(profile_image_id, customer_id)

        self.metrics.increment_uploads()
        log_with_context(
            logger, "info", "Profile image uploaded",
            customer_id=customer_id, profile_image_id=profile_image_id,
        )

    def get_customer_profile_image(self, customer_id: int) -> bytes:
        """Return the raw bytes of the customer's profile image.

        Raises:
            NotFoundException: If the customer or its image does not exist
        """
        customer = self.store.select_customer_by_id(customer_id)
        if customer is None:
            raise _customer_not_found(customer_id)

        if not customer.profile_image_id:
            raise _profile_image_not_found(customer_id)

        key = profile_image_key(customer_id, customer.profile_image_id)
        try:
            return self.object_store.get_object(self.bucket, key)
        except ObjectNotFoundError as e:
            raise _profile_image_not_found(customer_id) from e
