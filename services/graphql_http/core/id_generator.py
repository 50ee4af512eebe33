"""
Request id generators.

Ids are opaque, random and only used for correlation; they are never
persisted and carry no ordering.
"""

import random
import secrets
import uuid
from abc import ABC, abstractmethod


class IdGenerator(ABC):
    @abstractmethod
    def generate_id(self) -> uuid.UUID:
        """
        Generate a new identifier.
        """
        pass


class RandomUuidIdGenerator(IdGenerator):
    """Draws every id from the OS CSPRNG via :func:`uuid.uuid4`."""

    def generate_id(self) -> uuid.UUID:
        return uuid.uuid4()


class AlternativeIdGenerator(IdGenerator):
    """
    Seeds a fast PRNG once from the OS CSPRNG and derives version 4 UUIDs from it.

    Cheaper per call than :class:`RandomUuidIdGenerator` while keeping ids
    unpredictable across processes.
    """

    def __init__(self):
        self._random = random.Random(secrets.token_bytes(16))

    def generate_id(self) -> uuid.UUID:
        return uuid.UUID(int=self._random.getrandbits(128), version=4)


def create_id_generator(strategy: str) -> IdGenerator:
    if strategy == "alternative":
        return AlternativeIdGenerator()
    if strategy == "uuid4":
        return RandomUuidIdGenerator()
    raise ValueError(f"Unknown id generator strategy: {strategy}")
