from typing import List

from farmpro.core.exceptions import AlreadyCompletedException, ObjectNotFoundException
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Task, TaskCompletion, TransactionKind
from farmpro.schemas.task import STaskCreate
from farmpro.services.ledger import LedgerService
from farmpro.utils.clock import utcnow
from farmpro.utils.locks import account_locks
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


class TaskRegistryService:
    """Каталог социальных заданий и их выполнение (одна награда на пару аккаунт/задание)."""

    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.ledger = LedgerService(uow)

    async def create_task(self, obj_in: STaskCreate) -> Task:
        task = await self.uow.tasks.add(Task(**obj_in.model_dump()))
        await self.uow.commit()
        logger.info(f"Task created: {task!r}")
        return task

    async def set_active(self, task_id: int, is_active: bool) -> Task:
        task = await self.uow.tasks.get(id=task_id)
        task.is_active = is_active
        task.updated_at = utcnow()
        await self.uow.commit()
        return task

    async def list_active(self) -> List[Task]:
        return await self.uow.tasks.f(is_active=True)

    async def list_completions(self, account_id: int) -> List[TaskCompletion]:
        await self.uow.accounts.get(id=account_id)
        return await self.uow.task_completions.f(account_id=account_id)

    async def complete(self, account_id: int, task_id: int) -> TaskCompletion:
        """
        Отметить задание выполненным и начислить награду.

        Raises:
            ObjectNotFoundException: нет аккаунта, задания, или задание выключено.
            AlreadyCompletedException: задание уже выполнено этим аккаунтом.
        """
        async with account_locks.hold(account_id), self.uow:
            account = await self.uow.accounts.get_for_update(account_id)
            task = await self.uow.tasks.first(id=task_id)
            if task is None or not task.is_active:
                raise ObjectNotFoundException("Task not found.")

            if await self.uow.task_completions.first(account_id=account_id, task_id=task_id) is not None:
                raise AlreadyCompletedException()

            completion = await self.uow.task_completions.add(
                TaskCompletion(account_id=account_id, task_id=task_id, completed_at=utcnow())
            )
            await self.ledger.credit(account, task.reward, TransactionKind.TASK, f"Completed task: {task.title}")
            await self.uow.commit()

        logger.info(f"account={account_id} completed task={task_id}, reward={task.reward}")
        return completion
