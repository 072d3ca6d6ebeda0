from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
import os

app = FastAPI(title="Mock Advisory Server", version="1.0.0")
# Set MOCK_ADVISORY_FAIL=1 to exercise the degraded path
FAIL = os.environ.get("MOCK_ADVISORY_FAIL") == "1"

@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/generate")
async def generate(request: Request):
    if FAIL:
        raise HTTPException(status_code=503, detail="advisory model unavailable")
    body = await request.json()
    if "prompt" not in body:
        raise HTTPException(status_code=400, detail="prompt is required")
    return JSONResponse(content={
        "tips": [
            "Pay every minimum on time so no debt falls behind.",
            "Send any windfall straight to the debt at the top of your plan.",
        ],
        "priority": "Start with the debt your recommended strategy lists first.",
    })
