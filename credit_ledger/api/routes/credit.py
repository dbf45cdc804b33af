"""Credit API Routes

FastAPI routes for credit sales, payments and customer accounts.
"""

from decimal import Decimal
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Result
from credit_ledger.api.error import ClientError
from credit_ledger.api.schemas.credit_request import (
    CheckCreditRequestSchema,
    CreateCreditSaleRequestSchema,
    RegisterPaymentRequestSchema,
    UpdateCreditLimitRequestSchema,
)
from credit_ledger.app.use_cases.credit import (
    CheckCreditAvailability,
    CreateCreditSale,
    GetCreditAccount,
    GetCreditSale,
    GetPaymentHistory,
    ListCustomerCreditSales,
    ListCustomerPayments,
    ListDebtors,
    RegisterPayment,
    UpdateCreditLimit,
)
from credit_ledger.app.use_cases.credit.dtos import (
    CreateCreditSaleCommandDTO,
    CreditAccountDTO,
    CreditAuthorizationDTO,
    CreditLimitResponseDTO,
    CreditSaleDTO,
    CreditSaleResponseDTO,
    ListCustomerCreditSalesResponseDTO,
    ListCustomerPaymentsResponseDTO,
    ListDebtorsResponseDTO,
    PaymentHistoryResponseDTO,
    PaymentRegistrationResponseDTO,
    RegisterPaymentCommandDTO,
    UpdateCreditLimitCommandDTO,
)
from credit_ledger.adapter.repositories import (
    SqlAlchemyCreditAccountRepository,
    SqlAlchemyCreditSaleRepository,
    SqlAlchemyPaymentRepository,
)
from credit_ledger.adapter.services.notification_service import create_notification_service
from credit_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from credit_ledger.depends import get_session

router = APIRouter(prefix="/credit", tags=["Credit"])

ERROR_STATUS = {
    "INVALID_AMOUNT": status.HTTP_400_BAD_REQUEST,
    "CUSTOMER_MISMATCH": status.HTTP_400_BAD_REQUEST,
    "CREDIT_LIMIT_EXCEEDED": status.HTTP_402_PAYMENT_REQUIRED,
    "SALE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CUSTOMER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SALE_ALREADY_SETTLED": status.HTTP_409_CONFLICT,
    "IDEMPOTENCY_KEY_REUSED": status.HTTP_409_CONFLICT,
    "CONCURRENT_MODIFICATION": status.HTTP_409_CONFLICT,
    "AMOUNT_EXCEEDS_PENDING": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def _risk_thresholds() -> tuple[Decimal, Decimal]:
    return (
        Decimal(str(ApplicationConfig.RISK_ALERT_THRESHOLD)),
        Decimal(str(ApplicationConfig.RISK_CRITICAL_THRESHOLD)),
    )


def _unwrap(result: Result):
    if result.is_err():
        raise ClientError(
            result.error,
            status_code=ERROR_STATUS.get(
                result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
        )
    return result.value


@router.post(
    "/sales",
    response_model=CreditSaleResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Credit limit exceeded",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CREDIT_LIMIT_EXCEEDED",
                            "message": "Credit limit exceeded. Available: 20000.00"
                        }
                    }
                }
            }
        }
    }
)
async def create_credit_sale(
    request: CreateCreditSaleRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Record a sale paid on credit.

    The customer's account is opened on first use (unlimited). The sale
    total is added to the customer's debt only if the credit limit allows it.

    **Returns:**
    - 201: Sale created, with the customer's updated account
    - 402: Credit limit exceeded
    - 400: Invalid request parameters
    """
    alert, critical = _risk_thresholds()
    use_case = CreateCreditSale(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditSaleRepository(session),
        alert_threshold=alert,
        critical_threshold=critical,
    )
    result = await use_case.execute(
        CreateCreditSaleCommandDTO(
            customer_id=request.customer_id,
            total=request.total,
            due_date=request.due_date,
        )
    )
    return _unwrap(result)


@router.get("/sales/{sale_id}", response_model=CreditSaleDTO)
async def get_credit_sale(
    sale_id: int,
    session: AsyncSession = Depends(get_session)
):
    result = await GetCreditSale(SqlAlchemyCreditSaleRepository(session)).execute(sale_id)
    return _unwrap(result)


@router.post(
    "/sales/{sale_id}/payments",
    response_model=PaymentRegistrationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        409: {
            "description": "Sale already paid, key reused, or concurrent modification",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "SALE_ALREADY_SETTLED",
                            "message": "Credit sale 42 is already paid"
                        }
                    }
                }
            }
        },
        422: {
            "description": "Payment exceeds the pending balance",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "AMOUNT_EXCEEDS_PENDING",
                            "message": "Payment exceeds the pending balance. Requested: 50000.00, Pending: 40000.00"
                        }
                    }
                }
            }
        }
    }
)
async def register_payment(
    sale_id: int,
    request: RegisterPaymentRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Apply a payment to a credit sale.

    Repeating a request with the same `idempotency_key` returns the original
    payment (`replayed: true`) without applying it twice.

    **Returns:**
    - 200: Payment applied (or replayed)
    - 404: Sale not found
    - 409: Sale already paid, idempotency key reused, or concurrent modification
    - 422: Amount exceeds the pending balance
    """
    use_case = RegisterPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        SqlAlchemyCreditSaleRepository(session),
        SqlAlchemyPaymentRepository(session),
        notification_service=create_notification_service(
            ApplicationConfig.INVARIANT_ALERT_WEBHOOK
        ),
        max_attempts=ApplicationConfig.CREDIT_MAX_RETRIES,
    )
    result = await use_case.execute(
        RegisterPaymentCommandDTO(
            sale_id=sale_id,
            customer_id=request.customer_id,
            amount=request.amount,
            method=request.method,
            registered_by=request.registered_by,
            notes=request.notes,
            idempotency_key=request.idempotency_key,
        )
    )
    return _unwrap(result)


@router.get("/sales/{sale_id}/payments", response_model=PaymentHistoryResponseDTO)
async def get_payment_history(
    sale_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Payments applied to a credit sale, oldest first."""
    use_case = GetPaymentHistory(
        SqlAlchemyCreditSaleRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    return _unwrap(await use_case.execute(sale_id))


@router.get("/accounts/{customer_id}", response_model=CreditAccountDTO)
async def get_credit_account(
    customer_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Credit limit, debt, available credit and risk tier of a customer."""
    alert, critical = _risk_thresholds()
    use_case = GetCreditAccount(
        SqlAlchemyCreditAccountRepository(session),
        alert_threshold=alert,
        critical_threshold=critical,
    )
    return _unwrap(await use_case.execute(customer_id))


@router.put("/accounts/{customer_id}/limit", response_model=CreditLimitResponseDTO)
async def update_credit_limit(
    customer_id: str,
    request: UpdateCreditLimitRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Set a customer's credit limit (0 = unlimited).

    Existing debt is untouched; a limit below the current debt blocks new
    credit sales until the debt is paid down.
    """
    alert, critical = _risk_thresholds()
    use_case = UpdateCreditLimit(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditAccountRepository(session),
        alert_threshold=alert,
        critical_threshold=critical,
    )
    result = await use_case.execute(
        UpdateCreditLimitCommandDTO(customer_id=customer_id, new_limit=request.credit_limit)
    )
    return _unwrap(result)


@router.get("/accounts/{customer_id}/sales", response_model=ListCustomerCreditSalesResponseDTO)
async def list_customer_credit_sales(
    customer_id: str,
    include_settled: bool = Query(False, description="Include paid sales"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    use_case = ListCustomerCreditSales(SqlAlchemyCreditSaleRepository(session))
    result = await use_case.execute(
        customer_id, include_settled=include_settled, limit=limit, offset=offset
    )
    return _unwrap(result)


@router.get("/accounts/{customer_id}/payments", response_model=ListCustomerPaymentsResponseDTO)
async def list_customer_payments(
    customer_id: str,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    use_case = ListCustomerPayments(SqlAlchemyPaymentRepository(session))
    return _unwrap(await use_case.execute(customer_id, limit=limit, offset=offset))


@router.post("/accounts/{customer_id}/check", response_model=CreditAuthorizationDTO)
async def check_credit(
    customer_id: str,
    request: CheckCreditRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Preflight a credit sale without creating it.

    Always 200 for a valid amount; see `approved` for the decision.
    """
    use_case = CheckCreditAvailability(SqlAlchemyCreditAccountRepository(session))
    return _unwrap(await use_case.execute(customer_id, request.amount))


@router.get("/debtors", response_model=ListDebtorsResponseDTO)
async def list_debtors(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """Customers with outstanding debt, largest debt first."""
    alert, critical = _risk_thresholds()
    use_case = ListDebtors(
        SqlAlchemyCreditAccountRepository(session),
        alert_threshold=alert,
        critical_threshold=critical,
    )
    return _unwrap(await use_case.execute(limit=limit, offset=offset))
