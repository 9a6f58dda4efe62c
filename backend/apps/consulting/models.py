# backend/apps/consulting/models.py
"""
Consulting models for paid requests and the canned answer knowledge base
"""
import uuid

from django.db import models


class ConsultingRequest(models.Model):
    """A paid consulting request and its answer"""

    TIER_CHOICES = [
        ("instant", "Basic Consult"),
        ("ai_assisted", "AI Analyst"),
        ("human_expert", "Expert Review"),
    ]

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("processing", "Processing"),
        ("completed", "Completed"),
        ("rejected", "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tier = models.CharField(max_length=20, choices=TIER_CHOICES)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default="pending", db_index=True
    )
    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField()
    description = models.TextField(blank=True)
    response = models.TextField(null=True, blank=True)
    amount = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.get_tier_display()} request from {self.customer_name} ({self.status})"


class CannedAnswer(models.Model):
    """Admin-curated answer for an instant-tier topic"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    topic = models.CharField(max_length=255, unique=True)
    answer = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["topic"]

    def __str__(self):
        return self.topic


class AdminCredential(models.Model):
    """Operator login for the admin portal (password is hashed)"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    password = models.CharField(max_length=128)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.username
