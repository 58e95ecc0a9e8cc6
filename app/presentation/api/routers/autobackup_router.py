import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.application.backup.auto_backup import AutoBackupService
from app.presentation.dependencies import get_auto_backup_service
from app.presentation.schemas.backup_schema import AutoBackupConfigUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/autobackup", tags=["Backup"])


@router.get("")
def autobackup_get(
    action: str = Query(default="config"),
    service: AutoBackupService = Depends(get_auto_backup_service),
):
    """Clients poll action=check; action=now forces an automatic snapshot."""
    if action == "config":
        return service.status()
    if action == "check":
        return service.check()
    if action == "now":
        result = service.run_now()
        if not result["success"]:
            raise HTTPException(status_code=500, detail=f"Backup failed: {result['error']}")
        return result
    raise HTTPException(status_code=400, detail="Invalid action")


@router.post("")
def autobackup_configure(
    changes: AutoBackupConfigUpdate,
    service: AutoBackupService = Depends(get_auto_backup_service),
):
    return service.update_config(changes)
