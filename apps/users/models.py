"""User domain models.

Роли пользователей платформы образуют закрытое перечисление: значение
проверяется на границе (модель, сериализаторы), а не доверяется строке
из хранилища.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone format. Use the international format without spaces."),
)


class CustomUserManager(BaseUserManager):
    """Менеджер пользователей, использующий email в качестве логина."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = self.normalize_phone(phone)

        role = extra_fields.get("role")
        if role not in CustomUser.RoleChoices.values:
            raise ValueError(f"Unknown role: {role!r}")

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.PLAYER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Удаляем пробелы и дефисы для унификации хранения телефона."""
        return phone.replace(" ", "").replace("-", "")


class CustomUser(AbstractUser):
    """Пользователь платформы с ролью из закрытого перечисления."""

    class RoleChoices(models.TextChoices):
        ADMIN = "admin", _("Administrator")
        FACILITY_OWNER = "facility_owner", _("Facility owner")
        STAFF_MEMBER = "staff_member", _("Staff member")
        PLAYER = "player", _("Player")
        TOURNAMENT_ORGANIZER = "tournament_organizer", _("Tournament organizer")

    username = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
    )
    email = models.EmailField(_("Email"), unique=True)
    full_name = models.CharField(_("Full name"), max_length=255, blank=True)
    phone = models.CharField(
        _("Phone"),
        max_length=20,
        null=True,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    role = models.CharField(
        _("Role"),
        max_length=32,
        choices=RoleChoices.choices,
        default=RoleChoices.PLAYER,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    role__in=[
                        "admin",
                        "facility_owner",
                        "staff_member",
                        "player",
                        "tournament_organizer",
                    ]
                ),
                name="user_role_known",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.email

    def is_facility_owner(self) -> bool:
        return self.role == self.RoleChoices.FACILITY_OWNER

    def is_player(self) -> bool:
        return self.role == self.RoleChoices.PLAYER

    def is_platform_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_superuser


# Backwards compatibility alias used in tests
User = CustomUser
