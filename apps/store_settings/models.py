from django.db import models


class Setting(models.Model):
    """Single key/value configuration entry."""

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'settings'
        ordering = ['key']

    def __str__(self):
        return f"{self.key}={self.value}"
