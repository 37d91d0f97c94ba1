"""FastAPI backend for conflict checks, suggestions and bookings."""
import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from clinic_data import get_booking, list_bookings
from config import settings
from scheduling import InvalidRequest
from tools import (
    BookAppointmentInput,
    BookAppointmentOutput,
    CancelAppointmentInput,
    CancelAppointmentOutput,
    CheckConflictInput,
    CheckConflictOutput,
    GenerateSuggestionsInput,
    GenerateSuggestionsOutput,
    RescheduleAppointmentInput,
    RescheduleSlot,
    book_appointment,
    cancel_appointment,
    check_conflict,
    generate_suggestions,
    reschedule_appointment,
)

log = structlog.get_logger()

app = FastAPI(title="Clinic Scheduling Core")


def _failure_status(result: BookAppointmentOutput) -> int:
    # 409 lets the caller re-run suggestions against fresh data
    return 409 if (result.reason or "").startswith("Time slot conflict") else 400


@app.exception_handler(InvalidRequest)
async def invalid_request_handler(request: Request, exc: InvalidRequest):
    log.warning("invalid_request", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.post("/conflicts/check", response_model=CheckConflictOutput)
async def conflicts_check(body: CheckConflictInput):
    return check_conflict(body)


@app.post("/suggestions", response_model=GenerateSuggestionsOutput)
async def suggestions(body: GenerateSuggestionsInput):
    """Ranked free slots. Advisory only: booking re-checks at write time."""
    return generate_suggestions(body)


@app.get("/appointments")
async def appointments(provider_id: str | None = None):
    return {"appointments": [a.to_dict() for a in list_bookings(provider_id)]}


@app.get("/appointments/{confirmation_id}")
async def appointment_detail(confirmation_id: str):
    appointment = get_booking(confirmation_id)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment.to_dict()


@app.post("/appointments", response_model=BookAppointmentOutput, status_code=201)
async def create_appointment(body: BookAppointmentInput):
    result = book_appointment(body)
    if result.status == "failed":
        raise HTTPException(status_code=_failure_status(result), detail=result.reason)
    return result


@app.patch("/appointments/{confirmation_id}", response_model=BookAppointmentOutput)
async def update_appointment(confirmation_id: str, body: RescheduleSlot):
    if get_booking(confirmation_id) is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    result = reschedule_appointment(
        RescheduleAppointmentInput(confirmation_id=confirmation_id, **body.model_dump())
    )
    if result.status == "failed":
        raise HTTPException(status_code=_failure_status(result), detail=result.reason)
    return result


@app.delete("/appointments/{confirmation_id}", response_model=CancelAppointmentOutput)
async def delete_appointment(confirmation_id: str):
    result = cancel_appointment(CancelAppointmentInput(confirmation_id=confirmation_id))
    if not result.cancelled:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
