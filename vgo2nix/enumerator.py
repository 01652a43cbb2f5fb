# File: vgo2nix/enumerator.py
"""vgo2nix.enumerator: Lists the resolved module set via `go list -json -m all`.

The lister prints concatenated JSON objects, one per module. They are decoded
as soon as each object is complete, so memory stays proportional to a single
record rather than to the whole module graph.
"""

from __future__ import annotations

import asyncio
import codecs
import json
import os
import re
from typing import AsyncIterator, Dict, List, Optional

from pydantic import ValidationError

from vgo2nix.config import GeneratorConfig
from vgo2nix.errors import EnumerationError
from vgo2nix.logger import logger
from vgo2nix.models import ModuleRecord, ResolvedModule
from vgo2nix.revision import RevisionNormalizer, normalize

__all__ = ["enumerate_modules", "decode_records", "resolve_records", "lister_environment"]

_CHUNK_SIZE = 64 * 1024
_decoder = json.JSONDecoder()
# Unfinished literal or number at the end of the buffer.
_PARTIAL_TOKEN = re.compile(r"(?:t(?:ru?)?|f(?:a(?:ls?)?)?|n(?:ul?)?|-|[.eE][-+]?)")


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        pass


def _may_be_truncated(exc: json.JSONDecodeError, buffer: str) -> bool:
    """True when *buffer* can still become valid JSON once more data arrives."""
    if exc.pos >= len(buffer):
        return True
    if exc.msg.startswith(("Unterminated string", "Invalid \\uXXXX escape")):
        return True
    return _PARTIAL_TOKEN.fullmatch(buffer, exc.pos) is not None


def lister_environment(config: GeneratorConfig) -> Dict[str, str]:
    """Environment for the lister: process env, module mode forced on, then config overlay."""
    env = dict(os.environ)
    env["GO111MODULE"] = "on"
    env.update(config.env)
    return env


async def decode_records(stream: asyncio.StreamReader) -> AsyncIterator[ModuleRecord]:
    """Yields ModuleRecord objects from a stream of concatenated JSON objects."""
    text = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    eof = False
    while True:
        buffer = buffer.lstrip()
        if buffer:
            try:
                obj, end = _decoder.raw_decode(buffer)
            except json.JSONDecodeError as exc:
                if eof or not _may_be_truncated(exc, buffer):
                    raise EnumerationError(f"failed to decode module record: {exc}") from exc
                obj = None
            else:
                buffer = buffer[end:]
                if not isinstance(obj, dict):
                    raise EnumerationError(
                        f"expected a JSON object per module, got {type(obj).__name__}"
                    )
                try:
                    yield ModuleRecord.model_validate(obj)
                except ValidationError as exc:
                    raise EnumerationError(f"invalid module record: {exc}") from exc
                continue
        elif eof:
            return
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            eof = True
            buffer += text.decode(b"", final=True)
        else:
            buffer += text.decode(chunk)


def resolve_records(
    records: List[ModuleRecord],
    normalizer: RevisionNormalizer = normalize,
) -> List[ResolvedModule]:
    """Drops the main module, applies replacements and normalizes revisions."""
    modules: List[ResolvedModule] = []
    for record in records:
        if record.main:
            continue
        if record.replace is not None and not record.replace.version:
            logger.warning(
                "Skipping %s: replaced by local directory %s, nothing to fetch",
                record.path,
                record.replace.path,
            )
            continue
        rev = normalizer(record.path, record.effective_version)
        logger.info("goPackagePath %s has rev %s", record.path, rev)
        modules.append(ResolvedModule(import_path=record.path, rev=rev))
    return modules


async def enumerate_modules(
    config: GeneratorConfig,
    normalizer: RevisionNormalizer = normalize,
) -> List[ResolvedModule]:
    """Runs the module lister in ``config.project_dir`` and returns resolved modules.

    Raises :class:`EnumerationError` when the lister cannot start, exits non-zero
    (stderr attached) or emits a record that cannot be decoded.
    """
    command = list(config.list_command)
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(config.project_dir),
            env=lister_environment(config),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise EnumerationError(f"could not start '{' '.join(command)}': {exc}") from exc

    assert proc.stdout is not None and proc.stderr is not None
    stderr_task = asyncio.create_task(proc.stderr.read())
    records: List[ModuleRecord] = []
    decode_error: Optional[EnumerationError] = None
    try:
        async for record in decode_records(proc.stdout):
            records.append(record)
    except EnumerationError as exc:
        decode_error = exc
        _kill(proc)
    except UnicodeDecodeError as exc:
        decode_error = EnumerationError(f"lister output is not valid UTF-8: {exc}")
        _kill(proc)

    stderr = (await stderr_task).decode("utf-8", errors="replace")
    returncode = await proc.wait()

    if decode_error is not None:
        decode_error.stderr = decode_error.stderr or stderr or None
        raise decode_error
    if returncode != 0:
        raise EnumerationError(
            f"'{' '.join(command)}' failed with exit status {returncode}",
            stderr=stderr,
        )

    return resolve_records(records, normalizer)
