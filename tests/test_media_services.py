import pytest

from iiifdims.actions.media_attributes import JP2_FILE, ORIGINAL_FILE
from iiifdims.models import Media, MediaBundle, Node, TaxonomyTerm, UnknownFieldError
from iiifdims.services.media import (
    EntityNotFoundError,
    MediaSourceError,
    get_media_referencing_node_and_term,
    get_source_file,
    get_term_for_uri,
    load_media,
    load_node,
    save_media,
)
from tests.conftest import Seed


@pytest.mark.asyncio
async def test_get_term_for_uri(seed: Seed) -> None:
    async with seed.session_factory() as session:
        term = await get_term_for_uri(session, JP2_FILE.term_uri)
        missing = await get_term_for_uri(session, "http://pcdm.org/use#ServiceFile")

    assert term is not None
    assert term.id == seed.terms[JP2_FILE.term_uri]
    assert missing is None


@pytest.mark.asyncio
async def test_media_referencing_node_and_term(seed: Seed) -> None:
    first, _ = await seed.add_media()
    both, _ = await seed.add_media(uses=[ORIGINAL_FILE.term_uri, JP2_FILE.term_uri])
    await seed.add_media(uses=[JP2_FILE.term_uri])
    other_node = await seed.add_node()
    await seed.add_media(node_id=other_node)

    async with seed.session_factory() as session:
        node = await session.get(Node, seed.node_id)
        term = await session.get(TaxonomyTerm, seed.terms[ORIGINAL_FILE.term_uri])
        media_ids = await get_media_referencing_node_and_term(session, node, term)
        none_ids = await get_media_referencing_node_and_term(session, node, None)

    assert media_ids == [first, both]
    assert none_ids == []


@pytest.mark.asyncio
async def test_get_source_file(seed: Seed) -> None:
    media_id, filename = await seed.add_media(mime_type="image/jp2")
    orphan_id, _ = await seed.add_media(mime_type=None)

    async with seed.session_factory() as session:
        source = await get_source_file(session, await load_media(session, media_id))
        assert source.filename == filename
        assert source.mime_type == "image/jp2"

        with pytest.raises(MediaSourceError):
            await get_source_file(session, await load_media(session, orphan_id))


@pytest.mark.asyncio
async def test_load_missing_entities_raise(seed: Seed) -> None:
    async with seed.session_factory() as session:
        with pytest.raises(EntityNotFoundError) as media_error:
            await load_media(session, 9999)
        with pytest.raises(EntityNotFoundError) as node_error:
            await load_node(session, 9999)

    assert media_error.value.entity_type == "media"
    assert node_error.value.entity_id == 9999


@pytest.mark.asyncio
async def test_save_media_commits_and_touches_changed_time(seed: Seed) -> None:
    media_id, _ = await seed.add_media()
    before = await seed.get_media(media_id)

    async with seed.session_factory() as session:
        media = await load_media(session, media_id)
        media.set("width", 321)
        await save_media(session, media)

    after = await seed.get_media(media_id)
    assert after.width == 321
    assert after.changed_at >= before.changed_at


def test_bundle_fields() -> None:
    image = Media(name="a", bundle=MediaBundle.IMAGE.value)
    document = Media(name="b", bundle=MediaBundle.DOCUMENT.value)
    unknown = Media(name="c", bundle="remote_video")

    assert image.has_field("width") and image.has_field("height")
    assert not document.has_field("width")
    assert unknown.field_names() == frozenset()


def test_set_rejects_fields_the_bundle_lacks() -> None:
    document = Media(name="b", bundle=MediaBundle.DOCUMENT.value)

    with pytest.raises(UnknownFieldError) as excinfo:
        document.set("width", 10)

    assert excinfo.value.field == "width"
    assert document.width is None

    image = Media(name="a", bundle=MediaBundle.IMAGE.value)
    image.set("height", 42)
    assert image.height == 42
