"""
Quote ID Service - issues human-readable quote numbers.

IDs look like ``C-101``: an event-type prefix plus a sequence number that
is persisted to ``sequence.json`` so numbering survives restarts.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

# Last number assumed when no sequence file exists, so the first quote is 100
INITIAL_SEQUENCE = 99


def event_prefix(event_type: Optional[str]) -> str:
    """C for corporate events, S for social events, O for anything else."""
    text = str(event_type or '').lower()
    if 'corpor' in text:
        return 'C'
    if 'social' in text:
        return 'S'
    return 'O'


class QuoteIdGenerator:
    """Monotonic quote number generator backed by a JSON file."""

    def __init__(self, sequence_file: Path, initial: int = INITIAL_SEQUENCE):
        self.sequence_file = Path(sequence_file)
        self.initial = initial
        self._lock = threading.Lock()

    def _read_last(self) -> int:
        try:
            with open(self.sequence_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return int(data.get('last', self.initial))
        except FileNotFoundError:
            return self.initial
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Unreadable sequence file %s (%s), restarting at %d",
                           self.sequence_file, e, self.initial)
            return self.initial

    def _write_last(self, value: int):
        self.sequence_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.sequence_file.with_suffix('.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump({'last': value}, f, indent=2)
        tmp_path.replace(self.sequence_file)

    def peek(self) -> int:
        """Last number issued (or the initial value)."""
        with self._lock:
            return self._read_last()

    def next_sequence(self) -> int:
        with self._lock:
            value = self._read_last() + 1
            self._write_last(value)
            return value

    def next_id(self, event_type: Optional[str] = None) -> str:
        """Issue the next quote ID for an event type, e.g. ``S-104``."""
        quote_id = f"{event_prefix(event_type)}-{self.next_sequence()}"
        logger.info("Issued quote ID %s", quote_id)
        return quote_id
