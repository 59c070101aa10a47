import random

import pytest

from usersales.errors import (
    EmptyIDError,
    InvalidInputError,
    SaleNotFoundError,
    TransactionInvalidError,
)
from usersales.sales import (
    Sale,
    SaleReport,
    SaleService,
    SaleStatus,
    SaleStorage,
    SaleSummary,
    SaleUpdate,
)
from usersales.users import User, UserService, UserStorage


class _FailingStorage(SaleStorage):
    def set(self, sale):
        raise RuntimeError("fake error trying to set sale")


@pytest.fixture
def user_service():
    return UserService(UserStorage())


@pytest.fixture
def user(user_service):
    return user_service.create(User(name="Ayrton", address="Pringles", nickname="Chiche"))


@pytest.fixture
def service(user_service):
    return SaleService(user_service, SaleStorage(), rng=random.Random(1))


def _store(service, sale_id, user_id, amount, status):
    sale = Sale(id=sale_id, user_id=user_id, amount=amount, status=status, version=1)
    service.storage.set(sale)
    return sale


def test_create_success(service, user):
    sale = service.create(Sale(user_id=user.id, amount=10.5))
    assert sale.id
    assert sale.user_id == user.id
    assert sale.status in set(SaleStatus)
    assert sale.version == 1
    assert sale.created_at is not None
    assert sale.created_at == sale.updated_at
    assert service.get(sale.id) is sale


def test_create_unknown_user(service):
    with pytest.raises(SaleNotFoundError):
        service.create(Sale(user_id="missing", amount=10.0))


def test_create_deleted_user(service, user_service, user):
    user_service.delete(user.id)
    with pytest.raises(SaleNotFoundError):
        service.create(Sale(user_id=user.id, amount=10.0))


@pytest.mark.parametrize("amount", [0.0, -3.0])
def test_create_non_positive_amount(service, user, amount):
    with pytest.raises(InvalidInputError):
        service.create(Sale(user_id=user.id, amount=amount))


def test_create_storage_error_is_propagated(user_service, user):
    service = SaleService(user_service, _FailingStorage())
    with pytest.raises(RuntimeError, match="fake error trying to set sale"):
        service.create(Sale(user_id=user.id, amount=1.0))


def test_get_missing(service):
    with pytest.raises(SaleNotFoundError):
        service.get("missing")


def test_report_all_statuses(service):
    _store(service, "s1", "u1", 10.0, SaleStatus.PENDING)
    _store(service, "s2", "u1", 5.5, SaleStatus.APPROVED)
    _store(service, "s3", "u1", 2.0, SaleStatus.REJECTED)
    _store(service, "s4", "u2", 100.0, SaleStatus.PENDING)
    report = service.report("u1", "")
    assert report.metadata == SaleSummary(
        quantity=3, approved=1, rejected=1, pending=1, total_amount=17.5
    )
    assert [sale.id for sale in report.results] == ["s1", "s2", "s3"]


def test_report_filters_by_status(service):
    _store(service, "s1", "u1", 10.0, SaleStatus.PENDING)
    _store(service, "s2", "u1", 5.5, SaleStatus.APPROVED)
    report = service.report("u1", "pending")
    assert report.metadata.quantity == 1
    assert report.metadata.pending == 1
    assert report.metadata.approved == 0
    assert [sale.id for sale in report.results] == ["s1"]


def test_report_results_are_copies(service):
    original = _store(service, "s1", "u1", 10.0, SaleStatus.PENDING)
    report = service.report("u1", "")
    report.results[0].amount = 99.0
    assert original.amount == 10.0


def test_report_unknown_user_is_empty(service):
    _store(service, "s1", "u1", 10.0, SaleStatus.PENDING)
    report = service.report("nobody", "")
    assert report.metadata == SaleSummary()
    assert report.results == []


def test_report_invalid_status(service):
    with pytest.raises(InvalidInputError):
        service.report("u1", "cancelled")


def test_report_empty_storage(service):
    with pytest.raises(SaleNotFoundError):
        service.report("u1", "")


@pytest.mark.parametrize("target", ["approved", "rejected"])
def test_update_pending(service, target):
    _store(service, "s1", "u1", 10.0, SaleStatus.PENDING)
    updated = service.update("s1", SaleUpdate(status=target))
    assert updated.status == SaleStatus(target)
    assert updated.version == 2
    assert updated.updated_at is not None


@pytest.mark.parametrize("target", ["pending", "", "cancelled"])
def test_update_invalid_target(service, target):
    _store(service, "s1", "u1", 10.0, SaleStatus.PENDING)
    with pytest.raises(InvalidInputError):
        service.update("s1", SaleUpdate(status=target))
    assert service.get("s1").version == 1


@pytest.mark.parametrize("current", [SaleStatus.APPROVED, SaleStatus.REJECTED])
def test_update_closed_sale(service, current):
    _store(service, "s1", "u1", 10.0, current)
    with pytest.raises(TransactionInvalidError):
        service.update("s1", SaleUpdate(status="approved"))


def test_update_missing(service):
    with pytest.raises(SaleNotFoundError):
        service.update("missing", SaleUpdate(status="approved"))


def test_storage_rejects_empty_id():
    with pytest.raises(EmptyIDError):
        SaleStorage().set(Sale(user_id="u1", amount=1.0))


def test_storage_read_all_empty():
    with pytest.raises(SaleNotFoundError):
        SaleStorage().read_all()


def test_report_to_dict(service):
    _store(service, "s1", "u1", 10.0, SaleStatus.PENDING)
    data = service.report("u1", "").to_dict()
    assert data["metadata"] == {
        "quantity": 1,
        "approved": 0,
        "rejected": 0,
        "pending": 1,
        "total_amount": 10.0,
    }
    assert data["results"][0]["id"] == "s1"
    assert data["results"][0]["status"] == "pending"
    assert data["results"][0]["user_id"] == "u1"


def test_empty_report_to_dict():
    assert SaleReport().to_dict()["results"] == []