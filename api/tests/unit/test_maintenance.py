"""Tests for maintenance modes."""

import pytest

from account_api.config import Settings
from account_api.errors.problem_details import InternalServerError, MaintenanceError
from account_api.maintenance import (
    NO_READ_OR_WRITE, READ_ONLY, READ_WRITE, check_mode, require_read, require_write
)


class TestCheckMode:
    """Test check_mode."""

    def test_read_write_allows_everything(self):
        check_mode(READ_WRITE, write=False)
        check_mode(READ_WRITE, write=True)

    def test_read_only_allows_reads(self):
        check_mode(READ_ONLY, write=False)

    def test_read_only_blocks_writes(self):
        with pytest.raises(MaintenanceError) as exc_info:
            check_mode(READ_ONLY, write=True)

        assert exc_info.value.status == 503

    @pytest.mark.parametrize("write", [False, True])
    def test_no_read_or_write_blocks_everything(self, write):
        with pytest.raises(MaintenanceError):
            check_mode(NO_READ_OR_WRITE, write=write)

    def test_unknown_mode(self):
        with pytest.raises(InternalServerError):
            check_mode("w-", write=False)


class TestDependencies:
    """Test the require_read and require_write dependencies."""

    @pytest.mark.asyncio
    async def test_require_read(self):
        await require_read(Settings(mode="r-"))

        with pytest.raises(MaintenanceError):
            await require_read(Settings(mode="--"))

    @pytest.mark.asyncio
    async def test_require_write(self):
        await require_write(Settings(mode="rw"))

        with pytest.raises(MaintenanceError):
            await require_write(Settings(mode="r-"))
