from typing import List

from fastapi import APIRouter, Depends, status
from fastapi_cache.decorator import cache

from farmpro.api.deps import get_uow
from farmpro.core.config import settings
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.common import IGetResponseBase, IPostResponseBase
from farmpro.schemas.task import STaskCompletionRead, STaskCreate, STaskRead, STaskUpdate
from farmpro.services.task_registry import TaskRegistryService
from farmpro.utils.cache import CATALOG_NAMESPACE, catalog_key_builder, clear_catalog_cache

router = APIRouter()


def get_task_service(uow: IUnitOfWork = Depends(get_uow)) -> TaskRegistryService:
    return TaskRegistryService(uow)


@router.get(
    "/tasks",
    response_description="Active tasks",
    response_model=IGetResponseBase[List[STaskRead]],
    summary="Get active tasks"
)
@cache(
    expire=settings.CATALOG_CACHE_SECONDS,
    namespace=CATALOG_NAMESPACE,
    key_builder=catalog_key_builder
)
async def get_tasks(
        task_service: TaskRegistryService = Depends(get_task_service),
) -> IGetResponseBase[List[STaskRead]]:
    tasks = await task_service.list_active()
    return IGetResponseBase(data=[STaskRead.model_validate(task) for task in tasks])


@router.post(
    "/tasks",
    response_description="Create new task",
    response_model=IPostResponseBase[STaskRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create new task"
)
async def create_task(
        obj_in: STaskCreate,
        task_service: TaskRegistryService = Depends(get_task_service),
) -> IPostResponseBase[STaskRead]:
    task = await task_service.create_task(obj_in)
    await clear_catalog_cache()
    return IPostResponseBase(data=STaskRead.model_validate(task))


@router.patch(
    "/tasks/{task_id}",
    response_description="Enable or disable task",
    response_model=IGetResponseBase[STaskRead],
    summary="Update task"
)
async def update_task(
        task_id: int,
        obj_in: STaskUpdate,
        task_service: TaskRegistryService = Depends(get_task_service),
) -> IGetResponseBase[STaskRead]:
    task = await task_service.set_active(task_id, obj_in.is_active)
    await clear_catalog_cache()
    return IGetResponseBase(data=STaskRead.model_validate(task))


@router.get(
    "/accounts/{account_id}/tasks",
    response_description="Tasks completed by the account",
    response_model=IGetResponseBase[List[STaskCompletionRead]],
    summary="Get completed tasks"
)
async def get_completed_tasks(
        account_id: int,
        task_service: TaskRegistryService = Depends(get_task_service),
) -> IGetResponseBase[List[STaskCompletionRead]]:
    completions = await task_service.list_completions(account_id)
    return IGetResponseBase(data=[STaskCompletionRead.model_validate(c) for c in completions])


@router.post(
    "/accounts/{account_id}/tasks/{task_id}/complete",
    response_description="Complete task and receive the reward",
    response_model=IPostResponseBase[STaskCompletionRead],
    summary="Complete task"
)
async def complete_task(
        account_id: int,
        task_id: int,
        task_service: TaskRegistryService = Depends(get_task_service),
) -> IPostResponseBase[STaskCompletionRead]:
    completion = await task_service.complete(account_id, task_id)
    return IPostResponseBase(message="Task completed", data=STaskCompletionRead.model_validate(completion))
