from fastapi import APIRouter, Depends

from farmpro.api.deps import get_uow
from farmpro.core.exceptions import ObjectNotFoundException
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.common import IGetResponseBase
from farmpro.schemas.setting import SSettingRead, SSettingUpdate
from farmpro.services.settings_store import SettingsService

router = APIRouter()


def get_settings_service(uow: IUnitOfWork = Depends(get_uow)) -> SettingsService:
    return SettingsService(uow)


@router.get(
    "/{key}",
    response_description="Get setting by key",
    response_model=IGetResponseBase[SSettingRead],
    summary="Get setting"
)
async def get_setting(
        key: str,
        settings_service: SettingsService = Depends(get_settings_service),
) -> IGetResponseBase[SSettingRead]:
    setting = await settings_service.get(key)
    if setting is not None:
        return IGetResponseBase(data=SSettingRead.model_validate(setting))

    value = await settings_service.get_value(key)
    if value is None:
        raise ObjectNotFoundException("Setting not found.")
    return IGetResponseBase(data=SSettingRead(key=key, value=value))


@router.put(
    "/{key}",
    response_description="Create or update setting",
    response_model=IGetResponseBase[SSettingRead],
    summary="Set setting"
)
async def put_setting(
        key: str,
        obj_in: SSettingUpdate,
        settings_service: SettingsService = Depends(get_settings_service),
) -> IGetResponseBase[SSettingRead]:
    setting = await settings_service.set(key, obj_in.value)
    return IGetResponseBase(data=SSettingRead.model_validate(setting))
