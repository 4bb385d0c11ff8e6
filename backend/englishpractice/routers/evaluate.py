import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..errors import PracticeError, ProviderError, ValidationError
from ..evaluation import evaluate_submission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["evaluation"])


def _error(status_code: int, message: str) -> JSONResponse:
	return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/evaluate")
async def evaluate(request: Request):
	try:
		payload = await request.json()
	except ValueError:
		return _error(400, "Request body must be valid JSON")
	try:
		evaluation = await evaluate_submission(payload)
	except ValidationError as e:
		return _error(e.status_code, e.message)
	except ProviderError as e:
		return _error(e.status_code, e.public_message)
	except PracticeError as e:
		logger.error("Evaluation error: %s", e.message)
		return _error(e.status_code, e.message)
	except Exception as e:
		# Unstructured failure: fall back to classifying the message text
		logger.exception("Evaluation error")
		err = ProviderError.from_exception(e)
		return _error(err.status_code, err.public_message)
	return {"evaluation": evaluation}
