from __future__ import annotations

import logging
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .interfaces import DocumentCodec

logger = logging.getLogger(__name__)


class DumperOptions(BaseModel):
    """
    Output conventions for documents written by this package:

      - block style collections, never inline flow
      - 4-space indentation
      - Unix line endings
      - keys kept in insertion order
    """

    model_config = ConfigDict(frozen=True)

    default_flow_style: bool = False
    indent: int = Field(default=4, ge=2, le=9)
    width: int = Field(default=80, gt=0)
    line_break: Literal["\n", "\r", "\r\n"] = "\n"
    canonical: bool = False
    allow_unicode: bool = True
    sort_keys: bool = False
    explicit_start: bool = False

    def dump_kwargs(self) -> dict[str, Any]:
        return self.model_dump()


class YamlCodec(DocumentCodec):
    """
    PyYAML-backed codec. Parsing uses the safe loader; serialization uses the
    safe dumper with the configured DumperOptions.
    """

    def __init__(self, options: DumperOptions | None = None):
        self._options = options or DumperOptions()

    @property
    def options(self) -> DumperOptions:
        return self._options

    def parse(self, text: str) -> dict[str, Any] | None:
        if not text.strip():
            return None
        try:
            doc = yaml.safe_load(text)
        except yaml.YAMLError as e:
            logger.warning("YAML PARSE: discarding unparseable document: %s", e)
            return None
        if not isinstance(doc, dict):
            logger.warning("YAML PARSE: root is %s, not a mapping; discarding", type(doc).__name__)
            return None
        return doc

    def serialize(self, doc: Mapping[str, Any]) -> str:
        return yaml.dump(dict(doc), Dumper=yaml.SafeDumper, **self._options.dump_kwargs())
