"""Delta decoding for framed Ollama stream records."""

import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from pydantic import ValidationError

from assistant_chat.models.schemas import StreamRecord

logger = logging.getLogger(__name__)


class MalformedRecordError(ValueError):
    """Raised when a framed line is not a valid stream event."""

    pass


def parse_record(line: str) -> StreamRecord:
    """Parse one framed line into a stream record.

    Args:
        line: A single NDJSON record.

    Returns:
        The validated StreamRecord.

    Raises:
        MalformedRecordError: If the line is not JSON or not a record object.
    """
    try:
        return StreamRecord.model_validate_json(line)
    except ValidationError as e:
        raise MalformedRecordError(f"Malformed stream record: {line[:80]!r}") from e


def decode_record(line: str) -> str:
    """Return the text delta of a record, or an empty string if it has none.

    Raises:
        MalformedRecordError: If the line cannot be parsed.
    """
    record = parse_record(line)
    if isinstance(record.error, str) and record.error:
        logger.warning(f"Backend reported error mid-stream: {record.error}")
    return record.delta


def _delta_or_empty(line: str) -> str:
    try:
        return decode_record(line)
    except MalformedRecordError as e:
        logger.debug(f"Dropping record: {e}")
        return ""


def decode_lines(lines: Iterable[str]) -> Iterator[str]:
    """Synchronously decode records, skipping malformed ones.

    Yields:
        Non-empty text fragments in record order.
    """
    for line in lines:
        if delta := _delta_or_empty(line):
            yield delta


async def iter_deltas(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Decode a stream of framed records into text fragments.

    A malformed record is dropped and the stream continues.

    Args:
        lines: Framed records, e.g. from ``iter_lines``.

    Yields:
        Non-empty text fragments in record order.
    """
    async for line in lines:
        if delta := _delta_or_empty(line):
            yield delta
