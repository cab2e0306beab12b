from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import Principal, get_current_principal
from app.database import get_db
from app.models.job import Job
from app.schemas.job import JobForm, JobOut
from app.services import jobs as job_service


router = APIRouter()


@router.get("", response_model=list[JobOut])
def list_jobs(
    search: str | None = Query(default=None),
    category: str | None = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[Job]:
    return job_service.list_jobs(db, search=search, category=category)


@router.post("", response_model=JobOut, status_code=201)
def create_job(
    payload: JobForm,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Job:
    return job_service.create_job(db, principal, payload)


@router.get("/mine", response_model=list[JobOut])
def list_my_jobs(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[Job]:
    return job_service.list_posted_jobs(db, principal)


@router.get("/{job_id}", response_model=JobOut)
def get_job(
    job_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Job:
    return job_service.get_job(db, job_id)


@router.put("/{job_id}", response_model=JobOut)
def update_job(
    job_id: str,
    payload: JobForm,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Job:
    return job_service.update_job(db, principal, job_id, payload)


@router.delete("/{job_id}")
def delete_job(
    job_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> dict[str, str]:
    job_service.delete_job(db, principal, job_id)
    return {"status": "deleted", "job_id": job_id}
