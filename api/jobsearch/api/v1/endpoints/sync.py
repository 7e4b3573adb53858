"""
Endpoints para disparar la sincronizacion del feed manualmente.
El scheduler es el disparador normal; esto sirve para operar a demanda.
"""
import asyncio

from fastapi import APIRouter, Depends, status
from loguru import logger

from jobsearch.api.v1.dependencies.use_case_deps import get_sync_use_cases
from jobsearch.application.dto.sync_dto import SyncResultDTO, SyncStatusDTO
from jobsearch.application.use_cases.sync_use_cases import FeedSyncUseCases
from jobsearch.infrastructure.scheduling.sync_lock import SyncRunLock


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/full",
    response_model=SyncResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Full sync: barrido completo y desalojo"
)
async def run_full_sync(
    use_cases: FeedSyncUseCases = Depends(get_sync_use_cases),
) -> SyncResultDTO:
    """
    Ejecuta un full sync del feed.

    - Recorre la ventana de retencion completa (6 meses)
    - Elimina avisos vencidos o que el feed ya no publica
    - Responde 409 si hay otra corrida en curso
    """
    logger.info("Iniciando full sync desde API")
    # El sync es bloqueante: se ejecuta en un thread para no bloquear el event loop
    result = await asyncio.to_thread(use_cases.run_full_sync)
    return SyncResultDTO.from_result(result)


@router.post(
    "/incremental",
    response_model=SyncResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Sync incremental: solo avisos actualizados"
)
async def run_incremental_sync(
    use_cases: FeedSyncUseCases = Depends(get_sync_use_cases),
) -> SyncResultDTO:
    """
    Trae los avisos actualizados desde el ultimo `updated` guardado.
    No elimina nada. Responde 409 si hay otra corrida en curso.
    """
    logger.info("Iniciando sync incremental desde API")
    result = await asyncio.to_thread(use_cases.run_incremental_sync)
    return SyncResultDTO.from_result(result)


@router.get(
    "/status",
    response_model=SyncStatusDTO,
    summary="Estado de la corrida de sync"
)
async def get_sync_status() -> SyncStatusDTO:
    return SyncStatusDTO(running=SyncRunLock.is_running(), mode=SyncRunLock.running_mode())
