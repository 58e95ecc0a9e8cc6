import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError

from app.application.backup.snapshot_service import MANUAL, BackupService
from app.application.exceptions import InvalidInputError
from app.presentation.dependencies import get_backup_service, get_database_path
from app.presentation.schemas.backup_schema import ImportRequest, ImportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/backup", tags=["Backup"])


def _json_attachment(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )


@router.get("")
def backup_get(
    action: Optional[str] = Query(default=None),
    backup: Optional[str] = Query(default=None),
    service: BackupService = Depends(get_backup_service),
):
    """
    action=status  database, uploads, entity counts and stored snapshots
    action=export  take a manual snapshot and download it
    backup=<name>  download a stored snapshot
    """
    if action == "status":
        return service.status(get_database_path())

    if action == "export":
        result = service.create_snapshot(MANUAL)
        if not result.success:
            raise HTTPException(status_code=500, detail=f"Backup failed: {result.error}")
        content = json.dumps(result.envelope, indent=2, ensure_ascii=False)
        download_name = "exam-database-" + result.filename
        return _json_attachment(content, download_name)

    if backup:
        try:
            content = service.store.read(backup)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail="Backup not found")
        return _json_attachment(content, backup)

    raise HTTPException(status_code=400, detail="Invalid action")


@router.post("", response_model=ImportResponse)
def backup_import(request: ImportRequest, service: BackupService = Depends(get_backup_service)):
    """Restore a snapshot's data; all-or-nothing."""
    try:
        stats = service.apply_snapshot(request.data, mode=request.mode)
    except InvalidInputError:
        raise
    except SQLAlchemyError as e:
        # e.g. a record pointing at a parent missing from both snapshot and store
        reason = getattr(e, "orig", None) or e
        raise HTTPException(status_code=400, detail=f"Import failed: {reason}")
    return ImportResponse(success=True, message="Data imported successfully", stats=stats)


@router.delete("")
def backup_delete(
    backup: Optional[str] = Query(default=None),
    service: BackupService = Depends(get_backup_service),
):
    if not backup:
        raise HTTPException(status_code=400, detail="Backup name required")
    try:
        service.store.delete(backup)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Backup not found")
    except OSError as e:
        logger.error(f"Delete backup error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Delete failed")
    return {"success": True, "message": "Backup deleted"}
