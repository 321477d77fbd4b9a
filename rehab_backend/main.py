# rehab_backend/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rehab_backend.models import CoachingRequest, CoachingResponse
from rehab_backend import llm_agent

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Rehab Coaching Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # local camera client / demo UI
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def health_check():
    return {"status": "ok", "llm": llm_agent.LLM_PROVIDER}


@app.post("/coaching_tip", response_model=CoachingResponse)
def coaching_tip(req: CoachingRequest):
    message, fallback = llm_agent.generate_coaching_tip(req.exercise, req.stats)
    return CoachingResponse(exercise=req.exercise, message=message, fallback=fallback)


@app.post("/session_summary", response_model=CoachingResponse)
def session_summary(req: CoachingRequest):
    message, fallback = llm_agent.generate_session_summary(req.exercise, req.stats)
    return CoachingResponse(exercise=req.exercise, message=message, fallback=fallback)
