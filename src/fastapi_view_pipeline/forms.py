"""Form binding and validation.

Forms are pydantic models whose fields carry a :class:`FormField` marker::

    class Login(BaseModel):
        email: Annotated[str, FormField("email", rules=("required", "email"))] = ""
        password: Annotated[
            str, FormField("password", rules=("required",), secret=True)
        ] = ""

:func:`bind_form` decodes the posted body into the model (type conversion
only). :meth:`BoundForm.validate` then applies the declared rules and
collects every failing field, with messages localized from the client's
accepted languages.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from fastapi_view_pipeline.exceptions import DecodeError
from fastapi_view_pipeline.i18n import MessageCatalog, default_catalog

F = TypeVar("F", bound=BaseModel)

FORM_MEDIA_TYPES = frozenset(
    {"application/x-www-form-urlencoded", "multipart/form-data"}
)


@dataclass(frozen=True)
class FormField:
    """Declares how a model field is bound and validated."""

    name: str | None = None
    rules: tuple[str, ...] = ()
    secret: bool = False
    label: str | None = None


@dataclass(frozen=True)
class _BoundField:
    attr: str
    key: str
    label: str
    rules: tuple[str, ...]
    secret: bool


def _form_fields(model: type[BaseModel]) -> Iterator[_BoundField]:
    """Yield the model's fields in declaration order with their form metadata."""
    for attr, info in model.model_fields.items():
        marker = next(
            (m for m in info.metadata if isinstance(m, FormField)), FormField()
        )
        yield _BoundField(
            attr=attr,
            key=marker.name or attr,
            label=marker.label or attr.replace("_", " ").capitalize(),
            rules=marker.rules,
            secret=marker.secret,
        )


# -- Rules --

RuleCheck = Callable[[Any, str | None], bool]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def _required(value: Any, param: str | None) -> bool:
    return not _is_blank(value)


def _email(value: Any, param: str | None) -> bool:
    if _is_blank(value):
        return True
    try:
        validate_email(str(value), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _size(value: Any) -> int | float:
    if isinstance(value, (int, float)):
        return value
    return len(value)


def _min(value: Any, param: str | None) -> bool:
    if _is_blank(value) or param is None:
        return True
    return _size(value) >= float(param)


def _max(value: Any, param: str | None) -> bool:
    if _is_blank(value) or param is None:
        return True
    return _size(value) <= float(param)


RULES: dict[str, RuleCheck] = {
    "required": _required,
    "email": _email,
    "min": _min,
    "max": _max,
}


def _split_rule(rule: str) -> tuple[str, str | None]:
    name, sep, param = rule.partition("=")
    return name.strip(), (param.strip() if sep else None)


# -- Bound form --


@dataclass
class FieldError:
    """A single validation failure. ``field`` is None for form-level errors."""

    field: str | None
    message: str
    rule: str | None = None


@dataclass
class BoundForm(Generic[F]):
    """Typed form data plus its validation outcome and re-render values."""

    data: F
    raw: dict[str, str] = field(default_factory=dict)
    errors: list[FieldError] = field(default_factory=list)
    catalog: MessageCatalog = field(default=default_catalog, repr=False)

    @classmethod
    def empty(
        cls, model: type[F], catalog: MessageCatalog | None = None
    ) -> BoundForm[F]:
        """A blank form, used to render the initial GET view."""
        return cls(data=model.model_construct(), catalog=catalog or default_catalog)

    @property
    def valid(self) -> bool:
        return not self.errors

    def validate(self, *languages: str) -> bool:
        """Run every field's rules and collect the failures.

        Each field reports its first failing rule; all fields are checked.
        Messages are localized by trying ``languages`` in order and then
        the catalog's default locale. Returns True when nothing failed.
        """
        self.errors = []
        for bound in _form_fields(type(self.data)):
            value = getattr(self.data, bound.attr, None)
            for rule in bound.rules:
                name, param = _split_rule(rule)
                check = RULES.get(name)
                if check is None:
                    raise ValueError(f"Unknown validation rule: {name!r}")
                if check(value, param):
                    continue
                message = self.catalog.message(
                    name, languages, {"field": bound.label, "param": param}
                )
                self.errors.append(FieldError(bound.key, message, rule=name))
                break
        return self.valid

    def add_error(self, message: str, field: str | None = None) -> None:
        self.errors.append(FieldError(field, message))

    def errors_for(self, name: str) -> list[str]:
        return [e.message for e in self.errors if e.field == name]

    @property
    def non_field_errors(self) -> list[str]:
        return [e.message for e in self.errors if e.field is None]

    def value(self, name: str) -> str:
        """Submitted value for re-rendering. Secret fields are never kept."""
        return self.raw.get(name, "")


async def bind_form(
    request: Request,
    model: type[F],
    *,
    catalog: MessageCatalog | None = None,
) -> BoundForm[F]:
    """Decode the posted form body into ``model``.

    Raises DecodeError when the body is not form-encoded, cannot be
    parsed, or a value fails type conversion.
    """
    media_type = request.headers.get("content-type", "").split(";", 1)[0]
    media_type = media_type.strip().lower()
    if media_type not in FORM_MEDIA_TYPES:
        if await request.body():
            raise DecodeError("Unsupported form content type")
        form_items: dict[str, str] = {}
    else:
        try:
            form = await request.form()
        except (MultiPartException, StarletteHTTPException, ValueError) as exc:
            raise DecodeError() from exc
        form_items = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                raise DecodeError("Unexpected file upload", field=key)
            form_items.setdefault(key, value)

    values: dict[str, str] = {}
    raw: dict[str, str] = {}
    for bound in _form_fields(model):
        if bound.key not in form_items:
            continue
        value = form_items[bound.key]
        if not bound.secret:
            raw[bound.key] = value
        if value == "" and model.model_fields[bound.attr].annotation is not str:
            continue
        values[bound.attr] = value

    try:
        data = model.model_validate(values)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = first["loc"][0] if first["loc"] else None
        raise DecodeError(
            f"Invalid value for {loc}" if loc else "Malformed form data",
            field=str(loc) if loc else None,
        ) from exc

    return BoundForm(data=data, raw=raw, catalog=catalog or default_catalog)
