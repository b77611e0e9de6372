from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class UserRole(models.TextChoices):
    SUPERADMIN = 'superadmin', 'Super administrator'
    ADMIN = 'admin', 'Administrator'
    SELLER = 'seller', 'Seller'


ADMIN_ROLES = {UserRole.SUPERADMIN, UserRole.ADMIN}


class UserManager(BaseUserManager):
    """Manager for username-based station staff accounts."""

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError('Username is required')

        username = self.model.normalize_username(username)
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.SUPERADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Station staff member who records sales and payments."""

    username = models.CharField(unique=True, max_length=150, db_index=True)
    full_name = models.CharField(max_length=150, blank=True)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.SELLER
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        ordering = ['username']

    def __str__(self):
        return self.username

    def get_display_name(self):
        """Return full name or username."""
        return self.full_name or self.username

    @property
    def is_ledger_admin(self):
        """Admins may edit or delete credits and manage payment methods."""
        return self.is_superuser or self.role in ADMIN_ROLES
