# backend/apps/consulting/admin.py
"""
Admin configuration for consulting models
"""
from django.contrib import admin
from django.utils.html import format_html

from .models import CannedAnswer, ConsultingRequest


@admin.register(ConsultingRequest)
class ConsultingRequestAdmin(admin.ModelAdmin):
    list_display = [
        "created_at",
        "customer_name",
        "customer_email",
        "tier",
        "status_display",
        "amount_display",
        "has_response",
    ]
    list_filter = ["tier", "status", "created_at"]
    search_fields = ["customer_name", "customer_email", "description"]
    readonly_fields = ["id", "tier", "amount", "created_at", "updated_at"]
    date_hierarchy = "created_at"

    fieldsets = (
        ("Customer", {"fields": ("customer_name", "customer_email")}),
        ("Request", {"fields": ("id", "tier", "amount", "description")}),
        ("Answer", {"fields": ("status", "response")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def status_display(self, obj):
        colors = {
            "pending": "orange",
            "processing": "blue",
            "completed": "green",
            "rejected": "red",
        }
        return format_html(
            '<span style="color: {};">{}</span>',
            colors.get(obj.status, "black"),
            obj.get_status_display(),
        )

    status_display.short_description = "Status"

    def amount_display(self, obj):
        return f"${obj.amount}"

    amount_display.short_description = "Amount"

    def has_response(self, obj):
        return bool(obj.response)

    has_response.boolean = True
    has_response.short_description = "Answered"


@admin.register(CannedAnswer)
class CannedAnswerAdmin(admin.ModelAdmin):
    list_display = ["topic", "answer_preview", "updated_at"]
    search_fields = ["topic", "answer"]
    readonly_fields = ["id", "created_at", "updated_at"]

    def answer_preview(self, obj):
        return obj.answer[:80] + "..." if len(obj.answer) > 80 else obj.answer

    answer_preview.short_description = "Answer"
