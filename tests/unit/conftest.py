import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_account_repo():
    """Mock credit account repository"""
    return MagicMock()


@pytest.fixture
def mock_sale_repo():
    """Mock credit sale repository"""
    return MagicMock()


@pytest.fixture
def mock_payment_repo():
    """Mock payment repository"""
    return MagicMock()
