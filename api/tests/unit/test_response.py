"""Tests for paginated response assembly."""

import json

from account_api.pagination import (
    CursorPageRequest, OffsetPageRequest, page_response, pagination_headers
)


class TestPaginationHeaders:
    """Test Count/Size/Page/Link headers."""

    def test_offset_headers(self):
        headers = pagination_headers(
            OffsetPageRequest(size=2, page=1),
            5,
            '</user/uploads?size=2&page=2>; rel="next"'
        )

        assert headers == {
            "Count": "5",
            "Size": "2",
            "Page": "1",
            "Link": '</user/uploads?size=2&page=2>; rel="next"',
        }

    def test_cursor_headers_have_no_page_or_count(self):
        headers = pagination_headers(CursorPageRequest(size=3, before="2021-07-14T12:00:00Z"), None, None)

        assert headers == {"Size": "3"}

    def test_zero_count_is_reported(self):
        headers = pagination_headers(OffsetPageRequest(size=10, page=1), 0, None)

        assert headers["Count"] == "0"
        assert "Link" not in headers


class TestPageResponse:
    """Test page_response."""

    def test_items_become_body(self):
        response = page_response(
            [{"_id": "1"}, {"_id": "2"}],
            OffsetPageRequest(size=2, page=1),
            2,
            None
        )

        assert response.status_code == 200
        assert json.loads(response.body) == [{"_id": "1"}, {"_id": "2"}]
        assert response.headers["Count"] == "2"
        assert response.headers["Size"] == "2"
        assert response.headers["Page"] == "1"

    def test_explicit_body(self):
        response = page_response(
            [{"_id": "1"}],
            OffsetPageRequest(size=10, page=1),
            1,
            None,
            body={"count": 1, "results": ["pin"]}
        )

        assert json.loads(response.body) == {"count": 1, "results": ["pin"]}
