"""Tests for image ordering and primary-image selection."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from property_registry.exceptions import TransientStoreError
from property_registry.models import PropertyImage
from property_registry.schemas.image import AddImageRequest, UpdateImageRequest
from property_registry.services.image_service import (
    PropertyImageService,
    build_thumbnail_path,
    extract_file_type,
)
from property_registry.services.property_service import PropertyService


@pytest.fixture
def property_factory(session, owner_factory, property_request_factory):
    async def _create(**overrides: object) -> uuid.UUID:
        owner = await owner_factory()
        result = await PropertyService(session).create_property(
            property_request_factory(owner.id, **overrides)
        )
        assert result.data is not None
        return result.data.id

    return _create


async def _enabled_primary_count(session, property_id: uuid.UUID) -> int:
    stmt = (
        select(func.count(PropertyImage.id))
        .where(PropertyImage.property_id == property_id)
        .where(PropertyImage.is_primary == True)
        .where(PropertyImage.enabled == True)
    )
    return int(await session.scalar(stmt))


async def _image(session, image_id: uuid.UUID) -> PropertyImage:
    image = await session.get(PropertyImage, image_id, populate_existing=True)
    assert image is not None
    return image


@pytest.mark.anyio
async def test_second_primary_clears_the_first(session, property_factory) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)

    first = await service.add_image(
        property_id, AddImageRequest(file="photos/a.jpg", is_primary=True)
    )
    second = await service.add_image(
        property_id, AddImageRequest(file="photos/b.jpg", is_primary=True)
    )

    assert first.success and second.success
    assert (await _image(session, first.data.id)).is_primary is False
    assert (await _image(session, second.data.id)).is_primary is True
    assert await _enabled_primary_count(session, property_id) == 1


@pytest.mark.anyio
async def test_display_order_is_assigned_after_the_last_image(
    session, property_factory
) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)

    first = await service.add_image(property_id, AddImageRequest(file="a.png"))
    explicit = await service.add_image(
        property_id, AddImageRequest(file="b.png", display_order=7)
    )
    zero = await service.add_image(
        property_id, AddImageRequest(file="c.png", display_order=0)
    )

    assert first.data.display_order == 1
    assert explicit.data.display_order == 7
    assert zero.data.display_order == 8


@pytest.mark.anyio
async def test_add_image_derives_file_type_and_thumbnail(
    session, property_factory
) -> None:
    property_id = await property_factory()

    result = await PropertyImageService(session).add_image(
        property_id,
        AddImageRequest(
            file="https://cdn.example.com/listings/front.JPEG",
            title="Front",
            file_size_bytes=2048,
        ),
    )

    data = result.data
    assert result.message == "Image added successfully"
    assert data.file_type == "jpeg"
    assert data.thumbnail_path == "https://cdn.example.com/listings/front_thumb.JPEG"
    assert data.file_size_bytes == 2048
    assert data.enabled is True
    assert data.is_primary is False


@pytest.mark.anyio
async def test_add_image_to_missing_property(session) -> None:
    result = await PropertyImageService(session).add_image(
        uuid.uuid4(), AddImageRequest(file="a.jpg")
    )

    assert result.status_code == 404
    assert result.message == "Property not found"


@pytest.mark.anyio
async def test_set_primary_moves_the_flag(session, property_factory) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    a = await service.add_image(property_id, AddImageRequest(file="a.jpg", is_primary=True))
    b = await service.add_image(property_id, AddImageRequest(file="b.jpg"))

    result = await service.set_primary(b.data.id)

    assert result.success is True
    assert result.data.is_primary is True
    assert (await _image(session, a.data.id)).is_primary is False
    assert await _enabled_primary_count(session, property_id) == 1


@pytest.mark.anyio
async def test_set_primary_missing_image(session) -> None:
    result = await PropertyImageService(session).set_primary(uuid.uuid4())

    assert result.status_code == 404
    assert result.message == "Image not found"


@pytest.mark.anyio
async def test_set_primary_refuses_disabled_image(session, property_factory) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    image = await service.add_image(property_id, AddImageRequest(file="a.jpg"))
    await service.update_image(image.data.id, UpdateImageRequest(enabled=False))

    result = await service.set_primary(image.data.id)

    assert result.status_code == 400


@pytest.mark.anyio
async def test_deleting_primary_promotes_remaining_image(
    session, property_factory
) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    primary = await service.add_image(
        property_id, AddImageRequest(file="a.jpg", is_primary=True)
    )
    other = await service.add_image(property_id, AddImageRequest(file="b.jpg"))

    result = await service.delete_image(primary.data.id)

    assert result.success is True
    assert await session.get(PropertyImage, primary.data.id) is None
    assert (await _image(session, other.data.id)).is_primary is True
    assert await _enabled_primary_count(session, property_id) == 1


@pytest.mark.anyio
async def test_promotion_picks_lowest_display_order_and_skips_disabled(
    session, property_factory
) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    primary = await service.add_image(
        property_id, AddImageRequest(file="a.jpg", is_primary=True, display_order=1)
    )
    disabled = await service.add_image(
        property_id, AddImageRequest(file="b.jpg", display_order=2)
    )
    later = await service.add_image(
        property_id, AddImageRequest(file="c.jpg", display_order=5)
    )
    earlier = await service.add_image(
        property_id, AddImageRequest(file="d.jpg", display_order=3)
    )
    await service.update_image(disabled.data.id, UpdateImageRequest(enabled=False))

    await service.delete_image(primary.data.id)

    assert (await _image(session, earlier.data.id)).is_primary is True
    assert (await _image(session, later.data.id)).is_primary is False
    assert (await _image(session, disabled.data.id)).is_primary is False


@pytest.mark.anyio
async def test_deleting_non_primary_leaves_primary(session, property_factory) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    primary = await service.add_image(
        property_id, AddImageRequest(file="a.jpg", is_primary=True)
    )
    other = await service.add_image(property_id, AddImageRequest(file="b.jpg"))

    await service.delete_image(other.data.id)

    assert (await _image(session, primary.data.id)).is_primary is True


@pytest.mark.anyio
async def test_deleting_last_image_leaves_no_primary(session, property_factory) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    only = await service.add_image(
        property_id, AddImageRequest(file="a.jpg", is_primary=True)
    )

    result = await service.delete_image(only.data.id)

    assert result.success is True
    assert await _enabled_primary_count(session, property_id) == 0


@pytest.mark.anyio
async def test_update_image_flip_to_primary_clears_others(
    session, property_factory
) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    a = await service.add_image(property_id, AddImageRequest(file="a.jpg", is_primary=True))
    b = await service.add_image(property_id, AddImageRequest(file="b.jpg"))

    result = await service.update_image(
        b.data.id, UpdateImageRequest(is_primary=True, title="Back yard")
    )

    assert result.data.is_primary is True
    assert result.data.title == "Back yard"
    assert (await _image(session, a.data.id)).is_primary is False
    assert await _enabled_primary_count(session, property_id) == 1


@pytest.mark.anyio
async def test_update_image_partial_keeps_other_fields(
    session, property_factory
) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    image = await service.add_image(
        property_id,
        AddImageRequest(file="a.jpg", title="Front", description="Street view"),
    )

    result = await service.update_image(
        image.data.id, UpdateImageRequest(file="photos/new.webp")
    )

    assert result.data.title == "Front"
    assert result.data.description == "Street view"
    assert result.data.file_type == "webp"
    assert result.data.thumbnail_path == "photos/new_thumb.webp"


@pytest.mark.anyio
async def test_single_primary_holds_across_operation_sequence(
    session, property_factory
) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)

    ids = []
    for index in range(4):
        result = await service.add_image(
            property_id,
            AddImageRequest(file=f"{index}.jpg", is_primary=index % 2 == 0),
        )
        ids.append(result.data.id)
        assert await _enabled_primary_count(session, property_id) <= 1

    steps = [
        lambda: service.set_primary(ids[1]),
        lambda: service.update_image(ids[3], UpdateImageRequest(is_primary=True)),
        lambda: service.update_image(ids[1], UpdateImageRequest(enabled=True)),
        lambda: service.delete_image(ids[3]),
        lambda: service.set_primary(ids[2]),
        lambda: service.delete_image(ids[0]),
        lambda: service.update_image(ids[2], UpdateImageRequest(is_primary=False)),
        lambda: service.set_primary(ids[1]),
    ]
    for step in steps:
        await step()
        assert await _enabled_primary_count(session, property_id) in (0, 1)


@pytest.mark.anyio
async def test_image_reads(session, property_factory) -> None:
    property_id = await property_factory()
    service = PropertyImageService(session)
    second = await service.add_image(
        property_id, AddImageRequest(file="b.jpg", display_order=2)
    )
    first = await service.add_image(
        property_id, AddImageRequest(file="a.jpg", display_order=1, is_primary=True)
    )
    hidden = await service.add_image(
        property_id, AddImageRequest(file="c.jpg", display_order=3)
    )
    await service.update_image(hidden.data.id, UpdateImageRequest(enabled=False))

    listed = await service.get_images_by_property(property_id)
    primary = await service.get_primary_image(property_id)
    single = await service.get_image(second.data.id)

    assert [image.id for image in listed.data] == [first.data.id, second.data.id]
    assert primary.data.id == first.data.id
    assert single.data.file == "b.jpg"
    assert (await service.get_image(uuid.uuid4())).status_code == 404
    assert (await service.get_images_by_property(uuid.uuid4())).status_code == 404


@pytest.mark.anyio
async def test_property_response_exposes_primary_image_url(
    session, property_factory
) -> None:
    property_id = await property_factory()
    images = PropertyImageService(session)
    await images.add_image(property_id, AddImageRequest(file="a.jpg"))
    await images.add_image(property_id, AddImageRequest(file="b.jpg", is_primary=True))

    result = await PropertyService(session).get_property(property_id)

    assert result.data.primary_image_url == "b.jpg"
    assert [image.file for image in result.data.images] == ["a.jpg", "b.jpg"]


def test_add_image_request_rejects_unknown_extension() -> None:
    with pytest.raises(ValueError):
        AddImageRequest(file="document.pdf")


@pytest.mark.parametrize(
    ("file", "file_type", "thumbnail"),
    [
        ("photos/house.jpg", "jpg", "photos/house_thumb.jpg"),
        ("house.PNG", "png", "house_thumb.PNG"),
        ("https://cdn.example.com/a/b.webp", "webp", "https://cdn.example.com/a/b_thumb.webp"),
        ("no_extension", None, "no_extension_thumb"),
        ("photos/", None, None),
    ],
)
def test_file_type_and_thumbnail_derivation(
    file: str, file_type: str | None, thumbnail: str | None
) -> None:
    assert extract_file_type(file) == file_type
    assert build_thumbnail_path(file) == thumbnail


@pytest.mark.anyio
async def test_image_reads_surface_store_outage_as_transient_error(
    session, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def _lost_connection(*args, **kwargs):
        raise OperationalError("SELECT property_images", {}, ConnectionError())

    monkeypatch.setattr(session, "execute", _lost_connection)
    service = PropertyImageService(session)

    for read in (
        lambda: service.get_images_by_property(uuid.uuid4()),
        lambda: service.get_image(uuid.uuid4()),
        lambda: service.get_primary_image(uuid.uuid4()),
    ):
        with pytest.raises(TransientStoreError):
            await read()
