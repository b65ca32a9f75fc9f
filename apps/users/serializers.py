"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Профиль пользователя: владелец и арендатор в одном лице."""

    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "phone",
            "date_joined",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "date_joined",
            "updated_at",
        ]

    def validate_phone(self, value: str) -> str:
        phone = User.objects.normalize_phone(value)
        if phone:
            PHONE_VALIDATOR(phone)
        return phone
