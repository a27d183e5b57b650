# ABOUTME: Input validation for query parameters and form fields received by the forum API
# ABOUTME: Collects every problem into a ValidationResult instead of failing on the first one

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationIssue:
    """A single invalid field."""

    field: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating a group of parameters."""

    errors: list[ValidationIssue] = field(default_factory=list)
    sanitized_values: dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.append(ValidationIssue(field_name, message))

    def get_error_messages(self) -> list[str]:
        return [issue.message for issue in self.errors]

    def first_error(self) -> str | None:
        return self.errors[0].message if self.errors else None


class InputValidator:
    """Validates pagination parameters, sort keys and credential/form fields."""

    MIN_PAGE = 1
    MAX_PAGE = 100_000
    MIN_LIMIT = 1
    MAX_LIMIT = 100

    USERNAME_MIN_LENGTH = 3
    USERNAME_MAX_LENGTH = 31
    PASSWORD_MIN_LENGTH = 3

    def _parse_int(self, raw: Any, name: str, minimum: int, maximum: int, result: ValidationResult) -> int | None:
        if isinstance(raw, int) and not isinstance(raw, bool):
            value = raw
        else:
            try:
                value = int(str(raw).strip())
            except (TypeError, ValueError):
                result.add_error(name, f"{name} must be an integer")
                return None
        if value < minimum or value > maximum:
            result.add_error(name, f"{name} must be between {minimum} and {maximum}")
            return None
        return value

    def validate_all(
        self,
        page: Any = None,
        limit: Any = None,
        sort_by: str | None = None,
        order: str | None = None,
        sortable: Mapping[str, str] | None = None,
        default_page: int = 1,
        default_limit: int = 10,
        default_sort: str = "created_at",
        default_order: str = "desc",
    ) -> ValidationResult:
        """Validate list parameters.

        Args:
            page: Raw page number (1-indexed)
            limit: Raw page size
            sort_by: Raw sort key, resolved through ``sortable`` (key or alias -> column)
            order: 'asc' or 'desc' (case-insensitive)
            sortable: Allow-list of accepted sort keys mapped to their column names

        Returns:
            ValidationResult whose sanitized_values hold page, limit, sort_by and order
        """
        result = ValidationResult()

        page_value = default_page
        if page not in (None, ""):
            page_value = self._parse_int(page, "page", self.MIN_PAGE, self.MAX_PAGE, result)

        limit_value = default_limit
        if limit not in (None, ""):
            limit_value = self._parse_int(limit, "limit", self.MIN_LIMIT, self.MAX_LIMIT, result)

        sort_value = default_sort
        if sort_by not in (None, ""):
            allowed = sortable or {}
            sort_value = allowed.get(sort_by.strip())
            if sort_value is None:
                choices = ", ".join(sorted(set(allowed.values())))
                result.add_error("sortBy", f"Invalid sortBy parameter. Must be one of: {choices}")

        order_value = default_order
        if order not in (None, ""):
            order_value = order.strip().lower()
            if order_value not in ("asc", "desc"):
                result.add_error("order", "Invalid order parameter. Must be one of: asc, desc")

        if result.is_valid:
            result.sanitized_values = {
                "page": page_value,
                "limit": limit_value,
                "sort_by": sort_value,
                "order": order_value,
            }
        return result

    def validate_form(self, form: Mapping[str, Any], required: list[str]) -> ValidationResult:
        """Require every field in ``required`` to be present as a string."""
        result = ValidationResult()
        for name in required:
            value = form.get(name)
            if value is None:
                result.add_error(name, f"{name} is required")
            elif not isinstance(value, str):
                result.add_error(name, f"{name} must be a string")
            else:
                result.sanitized_values[name] = value
        return result

    def validate_credentials(self, username: Any, password: Any) -> ValidationResult:
        """Check signup/login credentials: username 3-31 chars, password at least 3."""
        result = ValidationResult()
        if not username or not password or not isinstance(username, str) or not isinstance(password, str):
            result.add_error("credentials", "Username and password are required")
            return result

        if not self.USERNAME_MIN_LENGTH <= len(username) <= self.USERNAME_MAX_LENGTH:
            result.add_error(
                "username",
                f"Username must be between {self.USERNAME_MIN_LENGTH} and {self.USERNAME_MAX_LENGTH} characters",
            )
        if len(password) < self.PASSWORD_MIN_LENGTH:
            result.add_error("password", f"Password must be at least {self.PASSWORD_MIN_LENGTH} characters")

        if result.is_valid:
            result.sanitized_values = {"username": username, "password": password}
        return result


validator = InputValidator()
