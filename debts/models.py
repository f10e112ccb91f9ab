import uuid

from django.db import models
from django.db.models import Q
from django.contrib.auth.models import User

from .ledger import DebtState


class Debt(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='debts')
    order = models.OneToOneField('orders.Order', on_delete=models.SET_NULL, null=True, blank=True,
                                 related_name='debt')
    total_debt = models.DecimalField("Total Piutang", max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField("Sudah Dibayar", max_digits=14, decimal_places=2, default=0)
    remaining_debt = models.DecimalField("Sisa Piutang", max_digits=14, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Piutang"
        verbose_name_plural = "Piutang"
        constraints = [
            models.CheckConstraint(condition=Q(remaining_debt__gte=0), name='debt_remaining_not_negative'),
            models.CheckConstraint(condition=Q(paid_amount__gte=0), name='debt_paid_not_negative'),
        ]

    def __str__(self):
        return f"{self.user.username} - sisa Rp {self.remaining_debt}"

    def to_state(self):
        return DebtState(
            id=str(self.id),
            user_id=self.user_id,
            total_debt=self.total_debt,
            paid_amount=self.paid_amount,
            remaining_debt=self.remaining_debt,
        )

    def to_dict(self, payments=None):
        data = {
            'id': str(self.id),
            'user_id': self.user_id,
            'order_id': str(self.order_id) if self.order_id else None,
            'total_debt': self.total_debt,
            'paid_amount': self.paid_amount,
            'remaining_debt': self.remaining_debt,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
        if payments is not None:
            data['payments'] = [payment.to_dict() for payment in payments]
        return data


class DebtPayment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    debt = models.ForeignKey(Debt, on_delete=models.CASCADE, related_name='payments')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='debt_payments')
    amount = models.DecimalField("Jumlah", max_digits=14, decimal_places=2)
    payment_proof = models.FileField("Bukti Bayar", upload_to='debt_payments/', blank=True, null=True)
    notes = models.TextField("Catatan", blank=True)
    created_at = models.DateTimeField()

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Pembayaran Piutang"
        verbose_name_plural = "Pembayaran Piutang"
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name='debt_payment_amount_positive'),
        ]

    def save(self, *args, **kwargs):
        # Ledger entries are append-only
        if not self._state.adding:
            raise ValueError("Debt payments cannot be modified once recorded.")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"Rp {self.amount} ({self.created_at:%d/%m/%Y})"

    def to_dict(self):
        return {
            'id': str(self.id),
            'debt_id': str(self.debt_id),
            'user_id': self.user_id,
            'amount': self.amount,
            'payment_proof': self.payment_proof.name if self.payment_proof else None,
            'notes': self.notes,
            'created_at': self.created_at,
        }
