"""
Structured schemas for static-analysis findings.

These Pydantic models describe the issues handed over by the analysis
engine. They are immutable: the publisher only reads them.
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    """Finding severity levels, least severe first."""
    INFO = "INFO"
    MINOR = "MINOR"
    MAJOR = "MAJOR"
    CRITICAL = "CRITICAL"
    BLOCKER = "BLOCKER"

    @property
    def rank(self) -> int:
        """Position in impact order (INFO=0 ... BLOCKER=4)."""
        return list(Severity).index(self)

    @property
    def is_blocking(self) -> bool:
        return self in (Severity.BLOCKER, Severity.CRITICAL)


class FileComponent(BaseModel):
    """A file of the analysed project, identified by its repository path."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: str = Field(..., min_length=1)

    @field_validator("path")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        """Paths are compared against GitHub's forward-slash paths."""
        return v.replace("\\", "/").lstrip("/")

    @property
    def display_key(self) -> str:
        return self.path


class OtherComponent(BaseModel):
    """A non-file component (module, directory or the whole project)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["other"] = "other"
    key: str = Field(..., min_length=1)

    @property
    def display_key(self) -> str:
        return self.key


Component = Union[FileComponent, OtherComponent]


class Finding(BaseModel):
    """Individual static-analysis finding."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Identity of the finding in the analysis engine")
    severity: Severity
    message: str
    rule_key: str = Field(..., description="Rule identifier, e.g. squid:S1234")
    component: Optional[Component] = None
    line: Optional[int] = Field(default=None, ge=1)
    is_new: bool = Field(default=True, description="Introduced by the reviewed change")

    @field_validator("severity", mode="before")
    @classmethod
    def parse_severity(cls, v):
        """Accept severities in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def file(self) -> Optional[FileComponent]:
        """The file component, or None for project/module level findings."""
        if isinstance(self.component, FileComponent):
            return self.component
        return None

    @property
    def component_key(self) -> Optional[str]:
        if self.component is None:
            return None
        return self.component.display_key

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Finding":
        """
        Build a finding from a plain mapping.

        The component is decided here, once: ``path`` (or ``file``) makes a
        file finding, ``component`` a non-file one.

        Args:
            data: Raw finding data from the analysis engine

        Returns:
            Finding: Validated finding
        """
        payload = dict(data)
        path = payload.pop("path", None) or payload.pop("file", None)
        component_key = payload.pop("component", None)

        if path:
            payload["component"] = FileComponent(path=path)
        elif isinstance(component_key, str) and component_key:
            payload["component"] = OtherComponent(key=component_key)
        elif isinstance(component_key, (FileComponent, OtherComponent, dict)):
            payload["component"] = component_key

        return cls.model_validate(payload)
