"""Integration tests for the uploads API endpoints."""

import pytest
from unittest.mock import AsyncMock, patch

from fastapi import status

from conftest import make_uploads

from account_api.config import get_settings
from account_api.db.errors import RangeNotSatisfiableDBError
from account_api.errors.problem_details import NotFoundError
from account_api.pagination import CursorPageRequest, OffsetPageRequest, Page


class TestListUploads:
    """Test GET /user/uploads."""

    def test_first_page(self, test_client, auth_headers):
        uploads = make_uploads(5)

        with patch("account_api.routes.uploads.list_uploads",
                   new=AsyncMock(return_value=Page(items=uploads[:2], count=5))) as mock_list:
            response = test_client.get("/user/uploads?size=2&page=1", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [upload["_id"] for upload in response.json()] == ["5", "4"]
        assert response.json()[0]["dagSize"] == 500
        assert response.headers["Count"] == "5"
        assert response.headers["Size"] == "2"
        assert response.headers["Page"] == "1"
        assert response.headers["Link"] == (
            '</user/uploads?size=2&page=2>; rel="next", '
            '</user/uploads?size=2&page=3>; rel="last", '
            '</user/uploads?size=2&page=1>; rel="first"'
        )
        mock_list.assert_awaited_once_with("1", OffsetPageRequest(size=2, page=1))

    def test_default_page_size(self, test_client, auth_headers):
        with patch("account_api.routes.uploads.list_uploads",
                   new=AsyncMock(return_value=Page(items=[], count=0))) as mock_list:
            response = test_client.get("/user/uploads", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []
        assert response.headers["Count"] == "0"
        assert response.headers["Link"] == '</user/uploads?size=25&page=1>; rel="first"'
        mock_list.assert_awaited_once_with("1", OffsetPageRequest(size=25, page=1))

    def test_empty_listing_with_legacy_links(self, app, test_client, auth_headers, test_settings):
        legacy = test_settings.model_copy(update={"omit_empty_page_links": False})
        app.dependency_overrides[get_settings] = lambda: legacy

        with patch("account_api.routes.uploads.list_uploads",
                   new=AsyncMock(return_value=Page(items=[], count=0))):
            response = test_client.get("/user/uploads?size=10", headers=auth_headers)

        assert 'page=0>; rel="last"' in response.headers["Link"]

    def test_cursor_page(self, test_client, auth_headers):
        uploads = make_uploads(5)

        with patch("account_api.routes.uploads.list_uploads",
                   new=AsyncMock(return_value=Page(items=uploads[:3], count=None))) as mock_list:
            response = test_client.get(
                "/user/uploads?size=3&before=2021-07-14T13:00:00.000Z",
                headers=auth_headers
            )

        assert response.status_code == status.HTTP_200_OK
        assert "Count" not in response.headers
        assert "Page" not in response.headers
        assert response.headers["Size"] == "3"
        assert response.headers["Link"] == (
            '</user/uploads?size=3&before=2021-07-14T12%3A03%3A00.000Z>; rel="next"'
        )
        mock_list.assert_awaited_once_with(
            "1",
            CursorPageRequest(size=3, before="2021-07-14T13:00:00.000Z")
        )

    def test_cursor_partial_page_has_no_link(self, test_client, auth_headers):
        with patch("account_api.routes.uploads.list_uploads",
                   new=AsyncMock(return_value=Page(items=make_uploads(2), count=None))):
            response = test_client.get(
                "/user/uploads?size=3&before=2021-07-14T13:00:00.000Z",
                headers=auth_headers
            )

        assert "Link" not in response.headers

    @pytest.mark.parametrize("query, parameter", [
        ("size=0", "size"),
        ("size=abc", "size"),
        ("size=1001", "size"),
        ("page=-1", "page"),
        ("before=", "before"),
    ])
    def test_invalid_pagination(self, test_client, auth_headers, query, parameter):
        with patch("account_api.routes.uploads.list_uploads", new=AsyncMock()) as mock_list:
            response = test_client.get(f"/user/uploads?{query}", headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.headers["Content-Type"] == "application/problem+json"
        assert response.json()["parameter"] == parameter
        mock_list.assert_not_called()

    def test_page_out_of_range(self, test_client, auth_headers):
        with patch("account_api.routes.uploads.list_uploads",
                   new=AsyncMock(side_effect=RangeNotSatisfiableDBError(offset=20, count=5))):
            response = test_client.get("/user/uploads?size=10&page=3", headers=auth_headers)

        assert response.status_code == status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE
        assert response.json()["title"] == "Range Not Satisfiable"

    def test_maintenance_mode(self, app, test_client, auth_headers, test_settings):
        app.dependency_overrides[get_settings] = lambda: test_settings.model_copy(update={"mode": "--"})

        response = test_client.get("/user/uploads", headers=auth_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestUploadOperations:
    """Test single upload endpoints."""

    def test_get_upload(self, test_client, auth_headers):
        upload = make_uploads(1)[0]

        with patch("account_api.routes.uploads.get_upload", new=AsyncMock(return_value=upload)):
            response = test_client.get("/user/uploads/bafy1", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["cid"] == "bafy1"

    def test_get_missing_upload(self, test_client, auth_headers):
        with patch("account_api.routes.uploads.get_upload",
                   new=AsyncMock(side_effect=NotFoundError("Upload 'bafy1' not found"))):
            response = test_client.get("/user/uploads/bafy1", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_upload(self, test_client, auth_headers):
        with patch("account_api.routes.uploads.delete_upload",
                   new=AsyncMock(return_value={"_id": "1"})) as mock_delete:
            response = test_client.delete("/user/uploads/bafy1", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"_id": "1"}
        mock_delete.assert_awaited_once_with("1", "bafy1")

    def test_delete_missing_upload(self, test_client, auth_headers):
        with patch("account_api.routes.uploads.delete_upload", new=AsyncMock(return_value=None)):
            response = test_client.delete("/user/uploads/bafy1", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_in_read_only_mode(self, app, test_client, auth_headers, test_settings):
        app.dependency_overrides[get_settings] = lambda: test_settings.model_copy(update={"mode": "r-"})

        with patch("account_api.routes.uploads.delete_upload", new=AsyncMock()) as mock_delete:
            response = test_client.delete("/user/uploads/bafy1", headers=auth_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        mock_delete.assert_not_called()

    def test_rename_upload(self, test_client, auth_headers):
        with patch("account_api.routes.uploads.rename_upload",
                   new=AsyncMock(return_value={"name": "holiday.car"})) as mock_rename:
            response = test_client.post(
                "/user/uploads/bafy1/rename",
                json={"name": "holiday.car"},
                headers=auth_headers
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"name": "holiday.car"}
        mock_rename.assert_awaited_once_with("1", "bafy1", "holiday.car")

    def test_rename_requires_name(self, test_client, auth_headers):
        response = test_client.post("/user/uploads/bafy1/rename", json={}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
