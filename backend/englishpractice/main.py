import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .db import Base, engine
from .errors import PracticeError
from .settings import settings
from .routers import health, evaluate, progress, practice
from . import models  # noqa: F401  (registers tables on Base.metadata)

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="English Practice API")
app.include_router(health.router)
app.include_router(evaluate.router)
app.include_router(progress.router)
app.include_router(practice.router)


@app.exception_handler(PracticeError)
async def practice_error_handler(request: Request, exc: PracticeError):
	return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
	if not settings.gemini_api_key:
		logger.warning("GEMINI_API_KEY is not set. /api/evaluate will answer 500 until configured.")


def run() -> None:
	import uvicorn
	uvicorn.run("englishpractice.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
	run()
