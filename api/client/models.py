import uuid

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models


class Role(models.TextChoices):
    USER = 'USER', 'User'
    ADMIN = 'ADMIN', 'Administrator'


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', Role.USER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields['role'] = Role.ADMIN
        return self._create_user(email, password, **extra_fields)


class User(AbstractBaseUser):
    """
    A platform account. Customers and administrators share the table and
    differ by ``role``; the email is the login identifier.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)

    last_name = models.CharField(max_length=255, blank=True, default='')
    first_name = models.CharField(max_length=255, blank=True, default='')
    middle_name = models.CharField(max_length=255, blank=True, default='')

    driver_license_series = models.CharField(max_length=4, blank=True, null=True)
    driver_license_number = models.CharField(max_length=6, blank=True, null=True)
    passport_series = models.CharField(max_length=4, blank=True, null=True)
    passport_number = models.CharField(max_length=6, blank=True, null=True)

    phone = models.CharField(max_length=20, unique=True, blank=True, null=True)
    birth_date = models.DateField(blank=True, null=True)

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    is_active = models.BooleanField(default=True)
    date_joined = models.DateTimeField(auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['driver_license_series', 'driver_license_number'],
                name='unique_driver_license',
            ),
            models.UniqueConstraint(
                fields=['passport_series', 'passport_number'],
                name='unique_passport',
            ),
        ]

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    # Django admin access is granted by role.
    @property
    def is_staff(self):
        return self.is_active and self.is_admin

    @property
    def is_superuser(self):
        return self.is_staff

    def has_perm(self, perm, obj=None):
        return self.is_staff

    def has_perms(self, perm_list, obj=None):
        return self.is_staff

    def has_module_perms(self, app_label):
        return self.is_staff

    def get_full_name(self):
        return " ".join(p for p in (self.last_name, self.first_name, self.middle_name) if p)

    def get_short_name(self):
        return self.first_name or self.email

    def __str__(self):
        return self.email
