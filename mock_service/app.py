from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse

app = FastAPI(title="Mock Service")


@app.get("/", response_class=HTMLResponse)
async def home():
    return "<html><body><h1>Mock Service</h1></body></html>"


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/analytics")
async def analytics():
    return {"visits": 1024, "unique": 512}


@app.get("/api/blogs")
async def blogs():
    return [{"id": 1, "title": "Hello"}, {"id": 2, "title": "Latency budgets"}]


@app.get("/api/projects")
async def projects():
    return [{"id": 1, "name": "perf-harness"}]


@app.get("/api/settings")
async def settings():
    return {"theme": "dark", "locale": "en"}


@app.get("/api/roadmap")
async def roadmap():
    return {"next": ["search", "notifications"]}


@app.get("/api/dashboard")
@app.get("/api/appointments")
@app.get("/api/contact")
async def protected():
    raise HTTPException(status_code=401, detail="authentication required")


@app.post("/api/ai-assistant")
async def ai_assistant():
    return {"reply": "ok"}


# Run with: uvicorn mock_service.app:app --port 3004 --reload
