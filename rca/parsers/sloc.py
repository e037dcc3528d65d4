"""Parse tokei JSON output into a :class:`Sloc`."""

from __future__ import annotations

import json
from typing import Any

import structlog
from pydantic import ValidationError

from rca.exceptions import SlocParseError
from rca.models.quality import LanguageInfo, Sloc
from rca.models.tokei import TokeiLanguage, TokeiTotal

log = structlog.get_logger("rca.parser")

TOTAL_KEY = "Total"


def parse_sloc(payload: dict[str, Any] | str | bytes) -> Sloc:
    """Build a :class:`Sloc` from tokei's per-language mapping.

    Every key except ``Total`` becomes a :class:`LanguageInfo`; ``Total``
    fills the aggregate fields instead. A single malformed entry fails the
    whole parse.

    Raises:
        SlocParseError: payload is not a JSON object, an entry is malformed,
            or the ``Total`` entry is missing.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise SlocParseError(f"Invalid tokei JSON: {e}") from e

    if not isinstance(payload, dict):
        raise SlocParseError(
            f"Expected a JSON object keyed by language, got {type(payload).__name__}"
        )

    if TOTAL_KEY not in payload:
        raise SlocParseError(f"Missing '{TOTAL_KEY}' entry in tokei output")

    languages: list[LanguageInfo] = []
    for name, entry in payload.items():
        if name == TOTAL_KEY:
            continue
        counts = _validate(name, entry, TokeiLanguage)
        languages.append(
            LanguageInfo(
                language=name,
                blanks=counts.blanks,
                code=counts.code,
                comments=counts.comments,
            )
        )

    total = _validate(TOTAL_KEY, payload[TOTAL_KEY], TokeiTotal)

    log.debug("sloc.parsed", languages=len(languages), code=total.code)
    return Sloc(
        languages=languages,
        code=total.code,
        comments=total.comments,
        blanks=total.blanks,
        inaccurate=total.inaccurate,
    )


def _validate(name: str, entry: Any, schema: type[TokeiLanguage]) -> Any:
    try:
        return schema.model_validate(entry)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<entry>" for err in e.errors())
        raise SlocParseError(f"Malformed tokei entry '{name}': bad field(s) {fields}") from e
