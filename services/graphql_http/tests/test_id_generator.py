import uuid

import pytest

from services.graphql_http.core.id_generator import (
    AlternativeIdGenerator,
    RandomUuidIdGenerator,
    create_id_generator,
)


@pytest.mark.parametrize("generator_cls", [AlternativeIdGenerator, RandomUuidIdGenerator])
def test_generates_distinct_version_4_uuids(generator_cls):
    generator = generator_cls()

    ids = {generator.generate_id() for _ in range(1000)}

    assert len(ids) == 1000
    assert all(isinstance(i, uuid.UUID) and i.version == 4 for i in ids)


def test_alternative_generators_are_independently_seeded():
    assert AlternativeIdGenerator().generate_id() != AlternativeIdGenerator().generate_id()


def test_create_id_generator():
    assert isinstance(create_id_generator("alternative"), AlternativeIdGenerator)
    assert isinstance(create_id_generator("uuid4"), RandomUuidIdGenerator)
    with pytest.raises(ValueError):
        create_id_generator("sequential")
