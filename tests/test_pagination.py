"""History pagination — arithmetic, defaults, clamping."""

from datetime import datetime, timedelta, timezone

import pytest

from core.config import QRCodeLimits
from qrcodes.domain import QRRecord
from qrcodes.pagination import normalize_page_params, page_window, paginate


async def _fill(store, owner_id: str, count: int) -> None:
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(count):
        await store.insert(
            QRRecord(
                owner_id=owner_id,
                text=f"item-{i}",
                size=200,
                error_correction_level="M",
                image_data_url="data:image/png;base64,AAAA",
                created_at=base + timedelta(seconds=i),
            )
        )


def test_page_window_arithmetic():
    assert page_window(1, 20, 45) == (3, True, False)
    assert page_window(2, 20, 45) == (3, True, True)
    assert page_window(3, 20, 45) == (3, False, True)
    assert page_window(1, 20, 40) == (2, True, False)
    assert page_window(1, 20, 0) == (0, False, False)
    assert page_window(4, 20, 45) == (3, False, True)


@pytest.mark.parametrize(
    "page,limit,expected",
    [
        (None, None, (1, 20)),
        ("2", "10", (2, 10)),
        (0, 0, (1, 20)),
        (-3, -5, (1, 20)),
        ("abc", "xyz", (1, 20)),
        ("3.7", 5, (3, 5)),
        (1, 100000, (1, 100)),
    ],
)
def test_normalize_page_params(limits, page, limit, expected):
    assert normalize_page_params(page, limit, limits) == expected


def test_normalize_respects_alternate_max():
    limits = QRCodeLimits(default_page_limit=5, max_page_limit=10)
    assert normalize_page_params(None, None, limits) == (1, 5)
    assert normalize_page_params(1, 50, limits) == (1, 10)


@pytest.mark.asyncio
async def test_first_and_last_page_of_45(memory_store, limits):
    await _fill(memory_store, "u1", 45)

    first = await paginate(memory_store, "u1", page=1, limit=20, limits=limits)
    assert first.total_count == 45
    assert first.total_pages == 3
    assert first.has_next_page is True
    assert first.has_prev_page is False
    assert len(first.items) == 20
    assert first.items[0].text == "item-44"

    last = await paginate(memory_store, "u1", page=3, limit=20, limits=limits)
    assert last.current_page == 3
    assert last.has_next_page is False
    assert last.has_prev_page is True
    assert [r.text for r in last.items] == [f"item-{i}" for i in range(4, -1, -1)]


@pytest.mark.asyncio
async def test_empty_history(memory_store, limits):
    result = await paginate(memory_store, "nobody", page=None, limit=None, limits=limits)
    assert result.items == []
    assert result.total_count == 0
    assert result.total_pages == 0
    assert result.has_next_page is False
    assert result.has_prev_page is False


@pytest.mark.asyncio
async def test_history_response_shape(memory_store, limits):
    await _fill(memory_store, "u1", 1)
    body = (await paginate(memory_store, "u1", page=1, limit=20, limits=limits)).to_response()
    assert set(body) == {"items", "pagination"}
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 1,
        "totalCount": 1,
        "hasNextPage": False,
        "hasPrevPage": False,
    }
    assert body["items"][0]["text"] == "item-0"


def test_huge_page_is_clamped_so_offset_fits_64_bits(limits):
    page, limit = normalize_page_params("99999999999999999999", 20, limits)
    assert limit == 20
    assert (page - 1) * limit <= 2**63 - 1
    assert page > 1


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(memory_store, limits):
    await _fill(memory_store, "u1", 3)
    result = await paginate(memory_store, "u1", page="99999999999999999999", limit=20, limits=limits)
    assert result.items == []
    assert result.total_count == 3
    assert result.total_pages == 1
    assert result.has_next_page is False
    assert result.has_prev_page is True
