from fastapi import Request
from fastapi_cache import FastAPICache

CATALOG_NAMESPACE = "catalog"


def catalog_key_builder(
    func,
    namespace: str = "",
    request: Request = None,
    *args,
    **kwargs,
) -> str:
    prefix = FastAPICache.get_prefix()
    path = request.url.path if request is not None else func.__name__
    # keyed on our own namespace so clear_catalog_cache matches every listing
    return f"{prefix}:{CATALOG_NAMESPACE}:{path}"


async def clear_catalog_cache() -> None:
    """Drop cached task and boost listings after the catalog changed."""
    await FastAPICache.clear(namespace=CATALOG_NAMESPACE)
