from fastapi import APIRouter, HTTPException

from backup import export_backup, import_backup, write_backup_file
from db import SessionLocal
from schemas.backup import BackupImportRequest

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("")
def create_backup():
    with SessionLocal() as db:
        document = export_backup(db)

    path = write_backup_file(document)
    return {
        "ok": True,
        "data": document,
        "file": {"filename": path.name, "filepath": str(path)},
    }


@router.post("")
def restore_backup(body: BackupImportRequest):
    if body.data is None:
        raise HTTPException(status_code=400, detail="No backup data provided")

    with SessionLocal() as db:
        result = import_backup(db, body.data, body.mode)

    return {"ok": True, "mode": body.mode, "data": result.wire()}
