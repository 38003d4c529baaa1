"""Guest model."""

from __future__ import annotations

from django.db import models  # type: ignore


class Guest(models.Model):
    full_name = models.CharField(max_length=200)
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=32)
    address = models.CharField(max_length=255, blank=True)
    id_number = models.CharField(max_length=64, blank=True)
    nationality = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["full_name"]

    def __str__(self) -> str:
        return f"{self.full_name} <{self.email}>"
