"""Tests for page request parsing."""

import pytest
from pydantic import ValidationError

from account_api.config import Settings
from account_api.errors.problem_details import InvalidParameterError
from account_api.pagination import (
    CursorPageRequest, OffsetPageRequest, Page, PaginationConfig, parse_page_request
)


@pytest.fixture
def config() -> PaginationConfig:
    return PaginationConfig(default_size=25, max_size=1000)


class TestPaginationConfig:
    """Test pagination configuration."""

    def test_defaults(self):
        config = PaginationConfig()

        assert config.default_size == 25
        assert config.max_size == 1000
        assert config.omit_empty_links is True

    def test_from_settings(self):
        settings = Settings(default_page_size=10, max_page_size=50, omit_empty_page_links=False)

        config = PaginationConfig.from_settings(settings)

        assert config.default_size == 10
        assert config.max_size == 50
        assert config.omit_empty_links is False


class TestParsePageRequest:
    """Test parse_page_request."""

    def test_empty_params_give_first_offset_page(self, config):
        page_request = parse_page_request({}, config)

        assert isinstance(page_request, OffsetPageRequest)
        assert page_request.size == 25
        assert page_request.page == 1
        assert page_request.offset == 0

    def test_offset_params(self, config):
        page_request = parse_page_request({"size": "2", "page": "3"}, config)

        assert page_request == OffsetPageRequest(size=2, page=3)
        assert page_request.offset == 4

    def test_before_selects_cursor_mode(self, config):
        page_request = parse_page_request(
            {"before": "2021-07-14T12:00:00.000Z", "size": "3"},
            config
        )

        assert isinstance(page_request, CursorPageRequest)
        assert page_request.before == "2021-07-14T12:00:00.000Z"
        assert page_request.size == 3

    def test_before_takes_precedence_over_page(self, config):
        page_request = parse_page_request(
            {"before": "2021-07-14T12:00:00Z", "page": "4"},
            config
        )

        assert isinstance(page_request, CursorPageRequest)

    def test_before_ignored_when_cursor_not_allowed(self, config):
        page_request = parse_page_request(
            {"before": "2021-07-14T12:00:00Z", "page": "2", "size": "5"},
            config,
            allow_cursor=False
        )

        assert page_request == OffsetPageRequest(size=5, page=2)

    def test_empty_size_uses_default(self, config):
        page_request = parse_page_request({"size": ""}, config)

        assert page_request.size == 25

    def test_size_equal_to_max_is_accepted(self, config):
        page_request = parse_page_request({"size": "1000"}, config)

        assert page_request.size == 1000

    @pytest.mark.parametrize("size", ["abc", "0", "-1", "1.5", "1001"])
    def test_invalid_size_rejected(self, config, size):
        with pytest.raises(InvalidParameterError) as exc_info:
            parse_page_request({"size": size}, config)

        assert exc_info.value.status == 400
        assert exc_info.value.parameter == "size"

    @pytest.mark.parametrize("page", ["abc", "0", "-2"])
    def test_invalid_page_rejected(self, config, page):
        with pytest.raises(InvalidParameterError) as exc_info:
            parse_page_request({"page": page}, config)

        assert exc_info.value.parameter == "page"

    def test_empty_before_rejected(self, config):
        with pytest.raises(InvalidParameterError) as exc_info:
            parse_page_request({"before": ""}, config)

        assert exc_info.value.parameter == "before"


class TestPageRequestModels:
    """Test page request model constraints."""

    def test_offset_request_is_immutable(self):
        page_request = OffsetPageRequest(size=10, page=1)

        with pytest.raises(ValidationError):
            page_request.page = 2

    def test_offset_request_rejects_zero_size(self):
        with pytest.raises(ValidationError):
            OffsetPageRequest(size=0, page=1)

    def test_cursor_request_rejects_empty_before(self):
        with pytest.raises(ValidationError):
            CursorPageRequest(size=10, before="")

    def test_page_count_is_optional(self):
        page = Page(items=[1, 2])

        assert page.count is None
