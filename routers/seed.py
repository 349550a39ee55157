from fastapi import APIRouter

from db import SessionLocal
from seeding import questions_status, seed_questions, seed_structure, structure_status

router = APIRouter(prefix="/seed", tags=["seed"])


@router.get("")
def seed_status():
    with SessionLocal() as db:
        return {"ok": True, "data": structure_status(db)}


@router.post("")
def run_seed():
    with SessionLocal() as db:
        results = seed_structure(db)
    return {"ok": True, "data": results}


@router.get("/questions")
def seed_questions_status():
    with SessionLocal() as db:
        return {"ok": True, "data": questions_status(db)}


@router.post("/questions")
def run_seed_questions():
    with SessionLocal() as db:
        results = seed_questions(db)
    return {
        "ok": True,
        "data": results,
        "message": f"Successfully added {results['questionsAdded']} questions",
    }
