"""Authentication backed by identity provider tokens.

Tokens are verified by ``rest_framework_simplejwt`` with the signing key
shared with the identity provider. The subject claim identifies the
user; a local profile is created the first time a subject is seen.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore
from rest_framework_simplejwt.authentication import JWTAuthentication  # type: ignore
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken  # type: ignore
from rest_framework_simplejwt.settings import api_settings  # type: ignore

logger = logging.getLogger(__name__)

User = get_user_model()


def placeholder_email(subject: str) -> str:
    return f"{subject}@identity.invalid"


class IdentityProviderAuthentication(JWTAuthentication):

    def get_user(self, validated_token):  # type: ignore
        subject = validated_token.get(api_settings.USER_ID_CLAIM)
        if not subject:
            raise InvalidToken(_("Token contained no recognizable user identification"))
        subject = str(subject)

        user = User.objects.filter(external_uid=subject).first()
        if user is None:
            user = self._provision(subject, validated_token)

        if not user.is_active:
            raise AuthenticationFailed(_("User is inactive"), code="user_inactive")
        return user

    def _create(self, subject: str, email: str, validated_token):
        try:
            with transaction.atomic():
                return User.objects.create_user(
                    email=email,
                    external_uid=subject,
                    name=validated_token.get("name", "") or "",
                    phone=validated_token.get("phone_number", "") or "",
                )
        except IntegrityError:
            return None

    def _provision(self, subject: str, validated_token):
        """
        Create or link the local profile for a new subject

        The token email may already belong to a local account. An account
        without a subject (created by an admin) is linked; an account bound
        to another subject keeps its email and the newcomer gets the
        placeholder address instead.
        """
        email = User.objects.normalize_email(validated_token.get("email") or placeholder_email(subject))

        user = self._create(subject, email, validated_token)
        if user is not None:
            logger.info(f"Provisioned user {user.id} for identity subject {subject}")
            return user

        # Lost a race with a concurrent first request for the same subject.
        user = User.objects.filter(external_uid=subject).first()
        if user is not None:
            return user

        unbound = Q(external_uid__isnull=True) | Q(external_uid="")
        linked = User.objects.filter(unbound, email=email).update(external_uid=subject)
        if linked:
            logger.info(f"Linked existing account {email} to identity subject {subject}")
            return User.objects.get(external_uid=subject)

        fallback = placeholder_email(subject)
        if email != fallback:
            user = self._create(subject, fallback, validated_token)
            if user is not None:
                logger.warning(
                    f"Email {email} belongs to another subject; provisioned {user.id} "
                    f"for subject {subject} with a placeholder address"
                )
                return user

        logger.error(f"Could not provision a user for identity subject {subject}")
        raise AuthenticationFailed(_("User account could not be provisioned"), code="user_not_provisioned")
