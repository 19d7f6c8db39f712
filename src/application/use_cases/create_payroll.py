"""Create Payroll Use Case."""

from dataclasses import dataclass

from src.application.dto.requests import CreatePayrollItemRequest, CreatePayrollRequest
from src.config import get_logger
from src.core.entities.payroll import Payroll, PaymentDetails, PayrollComponent, PayrollItem
from src.core.interfaces.document_store import IPayrollStore

logger = get_logger(__name__)


@dataclass
class CreatePayrollResult:
    """Result of creating a payroll run."""

    payroll: Payroll


def _build_item(item_req: CreatePayrollItemRequest) -> PayrollItem:
    return PayrollItem(
        employee_id=item_req.employee_id,
        basic_salary=item_req.basic_salary,
        earnings=[PayrollComponent(**e.model_dump()) for e in item_req.earnings],
        deductions=[PayrollComponent(**d.model_dump()) for d in item_req.deductions],
        gross_salary=item_req.gross_salary,
        net_salary=item_req.net_salary,
        payment=PaymentDetails(method=item_req.payment_method),
    )


class CreatePayrollUseCase:
    """Create a payroll run for one month; the store assigns its PAY number."""

    def __init__(self, store: IPayrollStore | None = None):
        self._store = store

    async def _get_store(self) -> IPayrollStore:
        if self._store is None:
            from src.infrastructure.storage.sqlite import get_payroll_store

            self._store = await get_payroll_store()
        return self._store

    async def execute(self, request: CreatePayrollRequest) -> CreatePayrollResult:
        """Execute create payroll use case."""
        logger.info(
            "create_payroll_started",
            month=request.month,
            year=request.year,
            employees=len(request.items),
        )

        store = await self._get_store()

        payroll = Payroll(
            month=request.month,
            year=request.year,
            from_date=request.from_date,
            to_date=request.to_date,
            items=[_build_item(item) for item in request.items],
            notes=request.notes,
        )

        payroll = await store.create(payroll)

        logger.info(
            "create_payroll_complete",
            payroll_id=payroll.payroll_id,
            total_net_salary=str(payroll.total_net_salary),
        )

        return CreatePayrollResult(payroll=payroll)
