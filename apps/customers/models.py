from django.db import models


class Customer(models.Model):
    """Walk-in or repeat customer identified by name and phone."""

    customer_code = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'customers'
        constraints = [
            models.UniqueConstraint(
                fields=['name', 'phone'],
                name='unique_customer_name_phone'
            ),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.customer_code} - {self.name}"
