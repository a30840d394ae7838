"""
Loader configuration: path conventions, manifest location and handle naming
for one asset loader instance.
"""
from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, field_validator

DEFAULT_SCRIPT_PATH = "/assets/dist/js/"
DEFAULT_STATIC_PATH = "/assets/dist/static/"
DEFAULT_STYLE_PATH = "/assets/dist/css/"
DEFAULT_PREFIX = "kanopi-pack-"


def check_string(value: Any, default: Optional[str]) -> Optional[str]:
    """Trim a string value, collapsing blank or missing values to the default."""
    if value is None:
        return default
    text = str(value).strip()
    return text if text else default


class LoaderConfiguration(BaseModel):
    """
    Immutable loader settings.

    Every field is optional; blank strings fall back to the defaults above.
    Use `with_overrides` to derive a changed copy.
    """

    version: Optional[str] = None
    production_domains: FrozenSet[str] = frozenset()
    manifest_path: str = ""
    handle_prefix: str = DEFAULT_PREFIX
    script_path: str = DEFAULT_SCRIPT_PATH
    style_path: str = DEFAULT_STYLE_PATH
    static_path: str = DEFAULT_STATIC_PATH
    production_file_path: str = ""
    development_styles_in_head: bool = False

    class Config:
        frozen = True

    @field_validator("version", mode="before")
    @classmethod
    def _check_version(cls, value: Any) -> Optional[str]:
        return check_string(value, None)

    @field_validator("manifest_path", "production_file_path", mode="before")
    @classmethod
    def _check_optional_path(cls, value: Any) -> str:
        return check_string(value, "")

    @field_validator("handle_prefix", mode="before")
    @classmethod
    def _check_prefix(cls, value: Any) -> str:
        return check_string(value, DEFAULT_PREFIX)

    @field_validator("script_path", mode="before")
    @classmethod
    def _check_script_path(cls, value: Any) -> str:
        return check_string(value, DEFAULT_SCRIPT_PATH)

    @field_validator("style_path", mode="before")
    @classmethod
    def _check_style_path(cls, value: Any) -> str:
        return check_string(value, DEFAULT_STYLE_PATH)

    @field_validator("static_path", mode="before")
    @classmethod
    def _check_static_path(cls, value: Any) -> str:
        return check_string(value, DEFAULT_STATIC_PATH)

    @field_validator("production_domains", mode="before")
    @classmethod
    def _check_domains(cls, value: Any) -> FrozenSet[str]:
        # Anything other than a collection of names means "no production domains"
        if not isinstance(value, (list, tuple, set, frozenset)):
            return frozenset()
        return frozenset(
            domain.strip().lower()
            for domain in value
            if isinstance(domain, str) and domain.strip()
        )

    @field_validator("development_styles_in_head", mode="before")
    @classmethod
    def _check_styles_in_head(cls, value: Any) -> bool:
        return bool(value) if value is not None else False

    def with_overrides(self, **changes: Any) -> "LoaderConfiguration":
        """
        Return a copy with the named fields replaced.

        The replacement values go through the same normalization as the
        constructor; this instance is left untouched.

        Raises:
            TypeError: If a change names an unknown field
        """
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise TypeError(
                f"Unknown configuration field(s): {', '.join(sorted(unknown))}"
            )

        data = self.model_dump()
        data.update(changes)
        return type(self)(**data)
