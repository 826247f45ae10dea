"""Short code generation, validation and reservation

Short codes are unique across the whole history of the store: every code that
was ever handed out keeps a reservation record ('codes:<code>') that survives
link deletion, so a retired code can never be reassigned to a new destination.

Reservation is an atomic put-if-absent, which doubles as the collision check
for generated codes. Two concurrent callers can never obtain the same code.

Classes:
    CodeGenerator:
        Generates, validates and reserves short codes against a link store.

Example:
    >>> import random
    >>> from shortlinks.dao import MemoryLinkStoreDAO
    >>> from shortlinks.engine import CodeGenerator, LinkKeySchema

    >>> store = MemoryLinkStoreDAO().open()
    >>> generator = CodeGenerator(store, LinkKeySchema(), rng=random.Random(42))
    >>> code = generator.generate()
    >>> len(code)
    6
    >>> generator.reserve(code)
    Traceback (most recent call last):
        ...
    shortlinks.exceptions.CodeTakenError: Short code '...' is already taken.
"""

import logging
import random
from datetime import datetime, UTC
from typing import Optional

from beartype import beartype

from shortlinks.constants import Defaults
from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.engine.key_schema import LinkKeySchema
from shortlinks.exceptions import CodeSpaceExhaustedError, CodeTakenError, CodeValidationError
from shortlinks.utils.shortener import generate_shortcode, is_valid_custom_code


logger = logging.getLogger(__name__)


class CodeGenerator:
    """Produce unique short codes and claim custom ones.

    Attributes:
        store (LinkStoreBaseDAO):
            Store holding the code reservations.
        keys (LinkKeySchema):
            Key schema used to name reservation records.
        rng (random.Random):
            Injected source of randomness (seed it for deterministic tests).
        length (int):
            Default generated code length.
        max_attempts (int):
            Collisions tolerated before raising CodeSpaceExhaustedError.
    """

    def __init__(
        self,
        store: LinkStoreBaseDAO,
        keys: LinkKeySchema,
        rng: Optional[random.Random] = None,
        length: int = Defaults.CODE_LENGTH,
        max_attempts: int = Defaults.MAX_GENERATION_ATTEMPTS,
    ):
        self.store = store
        self.keys = keys
        self.rng = random.SystemRandom() if rng is None else rng
        self.length = length
        self.max_attempts = max_attempts

    @beartype
    def generate(self, length: Optional[int] = None, link_id: Optional[str] = None) -> str:
        """Generate and reserve a fresh short code.

        Args:
            length (Optional[int]):
                Code length. Defaults to the generator's configured length.
            link_id (Optional[str]):
                Id of the link the code is generated for (stored with the reservation).

        Returns:
            str: the reserved short code.

        Raises:
            CodeSpaceExhaustedError:
                If every attempt collided with a previously used code.
            DataStoreError:
                If the store fails.
        """
        length = self.length if length is None else length

        for attempt in range(1, self.max_attempts + 1):
            candidate = generate_shortcode(length, rng=self.rng)
            try:
                self.reserve(candidate, link_id=link_id)
            except CodeTakenError:
                logger.debug('Generated short code collided with a used code.', extra={'attempt': attempt, 'length': length})
                continue
            return candidate

        logger.warning('Short code generation exhausted its attempts.', extra={'attempts': self.max_attempts, 'length': length})
        raise CodeSpaceExhaustedError(f'Could not generate an unused {length}-character short code in {self.max_attempts} attempts.')

    @beartype
    def validate_custom_code(self, code: str) -> None:
        """Raise CodeValidationError unless code is 3+ letters, digits or hyphens."""
        if not is_valid_custom_code(code):
            raise CodeValidationError(
                f"Custom short code '{code}' is invalid: use at least {Defaults.MIN_CUSTOM_CODE_LENGTH} letters, digits or hyphens."
            )

    @beartype
    def reserve(self, code: str, link_id: Optional[str] = None) -> None:
        """Atomically claim a short code in the historical code space.

        Raises:
            CodeTakenError:
                If the code was ever reserved before (active, expired or deleted link).
            DataStoreError:
                If the store fails.
        """
        reservation = {'link_id': link_id, 'reserved_at': datetime.now(UTC).isoformat()}
        if not self.store.put_if_absent(self.keys.code_key(code), reservation):
            raise CodeTakenError(f"Short code '{code}' is already taken.")
