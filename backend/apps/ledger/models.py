"""
Society ledger models: services offered, members and member transactions.

Every row belongs to a society and is removed with it. Transactions keep
their history when the member or service they point at is deleted.
"""

import uuid
from decimal import Decimal
from django.db import models


class ServiceType(models.TextChoices):
    SAVINGS = "savings"
    SHARE_CAPITAL = "share_capital"
    MONTHLY_DEDUCTION = "monthly_deduction"
    LOAN = "loan"
    OTHER = "other"


class ServiceStatus(models.TextChoices):
    ACTIVE = "active"
    INACTIVE = "inactive"


class MemberStatus(models.TextChoices):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class TransactionType(models.TextChoices):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"
    FEE = "fee"
    INTEREST = "interest"


class TransactionStatus(models.TextChoices):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Service(models.Model):
    """Financial service a society offers its members."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    society = models.ForeignKey(
        "societies.Society", on_delete=models.CASCADE, related_name="services"
    )
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=ServiceType.choices)
    description = models.TextField(null=True, blank=True)
    interest_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    minimum_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    maximum_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=20, choices=ServiceStatus.choices, default=ServiceStatus.ACTIVE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "services"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(type__in=ServiceType.values),
                name="valid_service_type",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=ServiceStatus.values),
                name="valid_service_status",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.type})"


class Member(models.Model):
    """Member of a society."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    society = models.ForeignKey(
        "societies.Society", on_delete=models.CASCADE, related_name="members"
    )
    member_number = models.CharField(max_length=50, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255, null=True, blank=True)
    phone = models.CharField(max_length=20, null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    join_date = models.DateField()
    status = models.CharField(
        max_length=20, choices=MemberStatus.choices, default=MemberStatus.ACTIVE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "members"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=MemberStatus.values),
                name="valid_member_status",
            ),
        ]

    def __str__(self):
        return f"{self.member_number}: {self.first_name} {self.last_name}"


class Transaction(models.Model):
    """Money movement on a member's account."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    society = models.ForeignKey(
        "societies.Society", on_delete=models.CASCADE, related_name="transactions"
    )
    member = models.ForeignKey(
        Member,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    service = models.ForeignKey(
        Service,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    transaction_type = models.CharField(max_length=20, choices=TransactionType.choices)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    balance_before = models.DecimalField(max_digits=10, decimal_places=2)
    balance_after = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.TextField(null=True, blank=True)
    reference_number = models.CharField(max_length=100, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "transactions"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(transaction_type__in=TransactionType.values),
                name="valid_transaction_type",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=TransactionStatus.values),
                name="valid_transaction_status",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.amount} ({self.status})"
