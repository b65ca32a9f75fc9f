"""User API views."""

from __future__ import annotations

from rest_framework import generics, permissions  # type: ignore

from .serializers import UserSerializer


class MeView(generics.RetrieveUpdateAPIView):
    """Профиль текущего пользователя (чтение и частичное обновление)."""

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_object(self):  # type: ignore
        return self.request.user
